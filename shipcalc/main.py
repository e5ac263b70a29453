# shipcalc/main.py
from datetime import datetime, timezone
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv

from shipcalc.carriers import CarrierDirectory
from shipcalc.countries import map_country_code
from shipcalc.engine.selector import fallback_quote, no_carrier_quote, quote_items
from shipcalc.schemas import RateRequest, RatesResponse
from shipcalc.settings import settings

load_dotenv()  # loads variables from .env at repo root


log = logging.getLogger("uvicorn")
logging.basicConfig(level=logging.INFO)

directory = CarrierDirectory(settings.carriers_file)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


# ========= FastAPI app =========
app = FastAPI(title="Shipping Cost Calculator", version=settings.app_version)

# the host platform calls the rate endpoint cross-origin
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "X-Shopify-Access-Token"],
    max_age=86400,
)


# ========= Endpoints =========
@app.get("/health")
@app.post("/health")
def health(request: Request):
    return {
        "status": "ok",
        "service": settings.service_name,
        "environment": settings.environment,
        "version": settings.app_version,
        "method": request.method,
        "timestamp": _now(),
        "carriers_configured": len(directory.get_carriers()),
    }


@app.get("/api/shipping-rates")
def shipping_rates_status():
    return {"status": "ok", "service": settings.service_name, "timestamp": _now()}


@app.post("/api/shipping-rates", response_model=RatesResponse)
def shipping_rates(req: RateRequest):
    """
    Carrier-service callback: split the cart into parcels per carrier and
    return the eligible rates, cheapest first. Always answers with at least
    one rate so checkout is never blocked.
    """
    body = req.rate
    try:
        country = map_country_code(body.destination.code, settings.country_map, settings.default_country)
        items = [i.to_line_item() for i in body.items if i.ships]
        log.info(
            f"Processing shipping request with {len(body.items)} items ({len(items)} weighted); "
            f"destination {body.destination.code} (mapped to {country})"
        )

        carriers = directory.get_carriers()
        if not carriers:
            log.info("No carriers configured, returning default rate")
            quotes = [no_carrier_quote(settings)]
        elif not items:
            log.info("Nothing to weigh, returning default rate")
            quotes = [fallback_quote(settings.fallback_price_cents, "no shippable items", settings)]
        else:
            quotes = quote_items(items, country, carriers, multi_rate=settings.multi_rate, settings=settings)
    except Exception:
        # never break checkout
        log.exception("Error calculating shipping rates")
        quotes = [fallback_quote(settings.fallback_price_cents, "fallback", settings)]

    log.info(f"Returning {len(quotes)} shipping rates")
    return {"rates": [q.to_rate() for q in quotes]}

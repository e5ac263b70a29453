# shipcalc/engine/selector.py
"""
Carrier selection: price every carrier, keep the eligible ones, cheapest first.

select_best_carrier / select_all_eligible_carriers share one parcel set across
carriers. quote_items splits the cart separately for each carrier using that
carrier's own ceiling, which is what the checkout endpoint does.
Every entry point returns at least one quote.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Sequence
import logging
import math
import re

from shipcalc.carriers import Carrier
from shipcalc.engine.parcels import LineItem, Parcel, TooManyParcelsError, split_parcels, validate_item
from shipcalc.engine.pricing import CarrierPrice, price_carrier
from shipcalc.engine.weights import grams_to_kg, kg_to_grams, total_weight_grams
from shipcalc.settings import Settings, settings as default_settings

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Quote:
    carrier_name: str
    service_name: str
    service_code: str
    total_price_cents: int
    parcel_count: int
    description: str
    currency_code: str
    delivery_time_days: Optional[str] = None

    def to_rate(self) -> Dict[str, Any]:
        """Rate object in the shape the host platform expects."""
        return {
            "service_name": self.service_name,
            "service_code": self.service_code,
            "total_price": self.total_price_cents,
            "description": self.description,
            "currency": self.currency_code,
        }


def service_code_for(name: str) -> str:
    return re.sub(r"\s+", "_", (name or "").lower())


def round_cents(cents: float) -> int:
    # half up, not banker's rounding
    return int(math.floor(cents + 0.5))


def _plural(n: int) -> str:
    return "parcel" if n == 1 else "parcels"


def fallback_quote(price_cents: int, reason: str, settings: Optional[Settings] = None) -> Quote:
    s = settings or default_settings
    return Quote(
        carrier_name=s.fallback_service_name,
        service_name=s.fallback_service_name,
        service_code=s.fallback_service_code,
        total_price_cents=price_cents,
        parcel_count=0,
        description=f"{s.fallback_description} ({reason})",
        currency_code=s.currency,
    )


def no_carrier_quote(settings: Optional[Settings] = None) -> Quote:
    s = settings or default_settings
    return fallback_quote(s.fallback_price_cents, "no carriers configured", s)


def infeasible_quote(settings: Optional[Settings] = None) -> Quote:
    s = settings or default_settings
    return fallback_quote(s.infeasible_price_cents, "order exceeds carrier limits", s)


def build_quote(price: CarrierPrice, settings: Optional[Settings] = None) -> Quote:
    s = settings or default_settings
    n = price.parcel_count
    total_kg = grams_to_kg(total_weight_grams(price.parcels))
    description = f"{total_kg:.2f}kg in {n} {_plural(n)}"
    if price.delivery_time_days:
        description += f" (Delivery: {price.delivery_time_days} days)"
    return Quote(
        carrier_name=price.carrier.name,
        service_name=f"{price.carrier.name} ({n} {_plural(n)})",
        service_code=service_code_for(price.carrier.name),
        total_price_cents=round_cents(price.total_cost_cents),
        parcel_count=n,
        description=description,
        currency_code=s.currency,
        delivery_time_days=price.delivery_time_days,
    )


def rank_eligible(prices: Iterable[CarrierPrice]) -> List[CarrierPrice]:
    """Eligible carriers by total cost; sorted() is stable, so ties keep carrier order."""
    return sorted((p for p in prices if p.eligible), key=lambda p: p.total_cost_cents)


def _quotes(prices: Iterable[CarrierPrice], settings: Settings) -> List[Quote]:
    ranked = rank_eligible(prices)
    if not ranked:
        return [infeasible_quote(settings)]
    return [build_quote(p, settings) for p in ranked]


def select_all_eligible_carriers(
    parcels: Sequence[Parcel],
    destination_country: str,
    carriers: Sequence[Carrier],
    settings: Optional[Settings] = None,
) -> List[Quote]:
    s = settings or default_settings
    if not carriers:
        return [no_carrier_quote(s)]
    return _quotes((price_carrier(c, parcels, destination_country) for c in carriers), s)


def select_best_carrier(
    parcels: Sequence[Parcel],
    destination_country: str,
    carriers: Sequence[Carrier],
    settings: Optional[Settings] = None,
) -> Quote:
    return select_all_eligible_carriers(parcels, destination_country, carriers, settings)[0]


def quote_items(
    items: Sequence[LineItem],
    destination_country: str,
    carriers: Sequence[Carrier],
    multi_rate: bool = True,
    settings: Optional[Settings] = None,
) -> List[Quote]:
    """
    Split the cart per carrier (using each carrier's own ceiling) and quote.
    Returns every eligible carrier cheapest first, or only the cheapest when
    multi_rate is False. Raises InvalidItemError for malformed items; a carrier
    that fails to split or price is logged and left out.
    """
    s = settings or default_settings
    if not carriers:
        return [no_carrier_quote(s)]
    for item in items:
        validate_item(item)

    prices: List[CarrierPrice] = []
    for c in carriers:
        try:
            parcels = split_parcels(items, kg_to_grams(c.max_weight_kg), max_parcels=s.max_parcels)
            prices.append(price_carrier(c, parcels, destination_country))
        except TooManyParcelsError as e:
            log.warning(f"Skipping carrier {c.name}: {e}")
        except Exception:
            log.exception(f"Error calculating rates for carrier {c.name}")
    quotes = _quotes(prices, s)
    return quotes if multi_rate else quotes[:1]

from typing import Dict

from pydantic_settings import BaseSettings, SettingsConfigDict

# Host-platform country codes the carrier configuration understands.
# Anything else is quoted as default_country.
DEFAULT_COUNTRY_MAP = {
    cc: cc
    for cc in [
        "AT", "DE", "BE", "BG", "CZ", "DK", "EE", "ES", "FI", "FR", "GB", "GR", "HR",
        "HU", "IE", "IT", "LT", "LU", "LV", "NL", "PL", "PT", "RO", "SE", "SI", "SK",
    ]
}


class Settings(BaseSettings):
    carriers_file: str = "carriers.yaml"
    default_country: str = "AT"
    country_map: Dict[str, str] = DEFAULT_COUNTRY_MAP
    currency: str = "EUR"
    # 1 -> every eligible carrier sorted by price, 0 -> cheapest only
    multi_rate: bool = True

    fallback_service_name: str = "Standard Shipping"
    fallback_service_code: str = "standard"
    fallback_description: str = "Standard shipping"
    fallback_price_cents: int = 1000       # no carriers configured
    infeasible_price_cents: int = 1500     # order exceeds every carrier limit
    max_parcels: int = 500

    service_name: str = "shipping-cost-calculator"
    environment: str = "development"
    app_version: str = "1.0.0"

    # NOTE: extra="ignore" avoids validation errors if stray keys appear in .env
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

settings = Settings()

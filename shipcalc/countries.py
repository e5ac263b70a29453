from typing import Mapping, Optional


def map_country_code(code: Optional[str], country_map: Mapping[str, str], default_country: str) -> str:
    """Translate a host-platform country code into the carrier configuration's code space."""
    cc = (code or "").strip().upper()
    mapped = country_map.get(cc)
    if mapped:
        return mapped.upper()
    return default_country.upper()

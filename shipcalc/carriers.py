# shipcalc/carriers.py
"""
Carrier configuration and the read-only Carrier Directory.

Carriers live in a YAML file:

    carriers:
      - id: post
        name: Post Parcel
        max_weight_kg: 31.5
        base_cost_cents: 490
        cost_per_kg_cents: 80
        countries:
          - country_code: AT
            delivery_time_days: "1-3"
            weight_rates:
              - {min_weight_kg: 0, max_weight_kg: 3, price_cents: 500}

Configuration is validated when loaded; get_carriers() never raises.
"""
from __future__ import annotations
from typing import List, Optional
import logging
import os

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

log = logging.getLogger(__name__)


class WeightRate(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    min_weight_kg: float = Field(..., ge=0)
    max_weight_kg: float
    price_cents: int = Field(..., ge=0)

    @model_validator(mode="after")
    def check_range(self):
        if self.min_weight_kg >= self.max_weight_kg:
            raise ValueError(
                f"weight band min ({self.min_weight_kg}) must be below max ({self.max_weight_kg})"
            )
        return self

    def contains(self, weight_kg: float) -> bool:
        return self.min_weight_kg <= weight_kg <= self.max_weight_kg


class CountryRate(BaseModel):
    country_code: str = Field(..., min_length=2, max_length=3)
    country_name: Optional[str] = None
    delivery_time_days: Optional[str] = None
    # stored order matters: lookup is first match wins
    weight_rates: List[WeightRate] = []

    @field_validator("country_code")
    @classmethod
    def upper_code(cls, v: str) -> str:
        return v.strip().upper()

    @field_validator("delivery_time_days", mode="before")
    @classmethod
    def days_as_text(cls, v):
        return None if v is None else str(v)

    @model_validator(mode="after")
    def check_overlap(self):
        # bands may touch (3kg ends one, starts the next) but not overlap
        bands = sorted(self.weight_rates, key=lambda r: r.min_weight_kg)
        for a, b in zip(bands, bands[1:]):
            if b.min_weight_kg < a.max_weight_kg:
                raise ValueError(
                    f"{self.country_code}: weight bands "
                    f"[{a.min_weight_kg}, {a.max_weight_kg}] and "
                    f"[{b.min_weight_kg}, {b.max_weight_kg}] overlap"
                )
        return self

    def find_weight_rate(self, weight_kg: float) -> Optional[WeightRate]:
        for r in self.weight_rates:
            if r.contains(weight_kg):
                return r
        return None


class Carrier(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    id: str
    name: str = Field(..., min_length=1)
    max_weight_kg: float = Field(..., gt=0)
    base_cost_cents: float = Field(0, ge=0)
    cost_per_kg_cents: float = Field(0, ge=0)
    countries: List[CountryRate] = []

    @field_validator("id", mode="before")
    @classmethod
    def id_as_text(cls, v):
        return v if v is None else str(v)

    @model_validator(mode="after")
    def unique_countries(self):
        seen = set()
        for c in self.countries:
            if c.country_code in seen:
                raise ValueError(f"carrier {self.name!r}: country {c.country_code} configured twice")
            seen.add(c.country_code)
        return self

    def country_rate(self, country_code: Optional[str]) -> Optional[CountryRate]:
        code = (country_code or "").strip().upper()
        for c in self.countries:
            if c.country_code == code:
                return c
        return None


class CarrierConfig(BaseModel):
    carriers: List[Carrier] = []

    @model_validator(mode="after")
    def unique_ids(self):
        ids = [c.id for c in self.carriers]
        dupes = sorted({i for i in ids if ids.count(i) > 1})
        if dupes:
            raise ValueError(f"duplicate carrier ids: {', '.join(dupes)}")
        return self


class CarrierDirectory:
    """Read access to the carrier configuration file."""

    def __init__(self, path: str):
        self.path = path

    def _load(self) -> List[Carrier]:
        with open(self.path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
        if isinstance(raw, list):
            raw = {"carriers": raw}
        return CarrierConfig.model_validate(raw).carriers

    def get_carriers(self) -> List[Carrier]:
        """
        All configured carriers ordered by name.
        Any storage or validation failure is logged and yields an empty list,
        which callers treat the same as "no carriers configured".
        """
        if not os.path.isfile(self.path):
            log.warning(f"Carrier file not found: {self.path}")
            return []
        try:
            carriers = self._load()
        except (OSError, yaml.YAMLError) as e:
            log.error(f"Error reading carriers from {self.path}: {e}")
            return []
        except ValidationError as e:
            log.error(f"Invalid carrier configuration in {self.path}: {e}")
            return []
        return sorted(carriers, key=lambda c: c.name)

    def get_carrier(self, carrier_id: str) -> Optional[Carrier]:
        for c in self.get_carriers():
            if c.id == str(carrier_id):
                return c
        return None

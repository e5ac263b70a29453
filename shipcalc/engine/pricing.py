# shipcalc/engine/pricing.py
from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional, Sequence

from shipcalc.carriers import Carrier
from shipcalc.engine.parcels import Parcel
from shipcalc.engine.weights import exceeds_limit, grams_to_kg


@dataclass(frozen=True)
class CarrierPrice:
    carrier: Carrier
    parcels: List[Parcel]
    total_cost_cents: float
    eligible: bool
    delivery_time_days: Optional[str] = None

    @property
    def parcel_count(self) -> int:
        return len(self.parcels)


def linear_cost(carrier: Carrier, weight_kg: float) -> float:
    return carrier.base_cost_cents + weight_kg * carrier.cost_per_kg_cents


def price_carrier(carrier: Carrier, parcels: Sequence[Parcel], destination_country: str) -> CarrierPrice:
    """
    Price one carrier for a parcel set.

    Per parcel: first matching weight band of the destination country, else
    base + kg * per_kg. A parcel above the carrier ceiling makes the carrier
    ineligible, but it is still priced so the total shows what it would cost.
    """
    country = carrier.country_rate(destination_country)
    total = 0.0
    eligible = True
    delivery_time = None

    for parcel in parcels:
        weight_kg = grams_to_kg(parcel.weight_grams)
        if exceeds_limit(weight_kg, carrier.max_weight_kg):
            eligible = False

        band = country.find_weight_rate(weight_kg) if country else None
        if band is not None:
            total += band.price_cents
            delivery_time = country.delivery_time_days
        else:
            total += linear_cost(carrier, weight_kg)

    return CarrierPrice(
        carrier=carrier,
        parcels=list(parcels),
        total_cost_cents=total,
        eligible=eligible,
        delivery_time_days=delivery_time,
    )

# shipcalc/engine/weights.py
from typing import Iterable

# Cart items arrive in grams, carrier configuration is stored in kilograms.
GRAMS_PER_KG = 1000.0


def grams_to_kg(grams: float) -> float:
    return grams / GRAMS_PER_KG


def kg_to_grams(kg: float) -> float:
    return kg * GRAMS_PER_KG


def exceeds_limit(weight_kg: float, limit_kg: float) -> bool:
    """True when a weight is strictly above a carrier ceiling (both in kg)."""
    return weight_kg > limit_kg


def total_weight_grams(parcels: Iterable) -> float:
    return sum(p.weight_grams for p in parcels)

# shipcalc/engine/parcels.py
"""
Parcel splitter: greedy descending-weight bin packing followed by a merge pass.

Heaviest items are placed first to reduce fragmentation. The result is an
approximation, not an optimal packing.
"""
from __future__ import annotations
from dataclasses import dataclass, field, replace
from typing import List, Optional, Sequence, Union
import math


class InvalidItemError(ValueError):
    """Raised when an item (or the parcel ceiling) cannot be packed."""


class TooManyParcelsError(InvalidItemError):
    """Raised when a cart would need more parcels than a single quote allows."""


# one quote never packs more parcels than this
MAX_PARCELS = 500


@dataclass(frozen=True)
class LineItem:
    identifier: Optional[Union[str, int]]
    unit_weight_grams: float
    quantity: int

    @property
    def total_weight_grams(self) -> float:
        return self.unit_weight_grams * self.quantity


@dataclass
class Parcel:
    items: List[LineItem] = field(default_factory=list)
    weight_grams: float = 0.0

    def add(self, item: LineItem, quantity: int) -> None:
        # copy-on-write: the caller's item keeps its original quantity
        self.items.append(replace(item, quantity=quantity))
        self.weight_grams += item.unit_weight_grams * quantity


def validate_item(item: LineItem) -> None:
    qty = item.quantity
    if isinstance(qty, bool) or not isinstance(qty, int) or qty < 1:
        raise InvalidItemError(
            f"item {item.identifier!r}: quantity must be a positive integer, got {qty!r}"
        )
    w = item.unit_weight_grams
    if isinstance(w, bool) or not isinstance(w, (int, float)) or not math.isfinite(w) or w <= 0:
        raise InvalidItemError(
            f"item {item.identifier!r}: unit weight must be a positive finite number of grams, got {w!r}"
        )


def merge_parcels(parcels: Sequence[Parcel], max_weight_grams: float) -> List[Parcel]:
    """
    Combine parcels pairwise while the pair still fits under the ceiling.

    Pairs are scanned in order. After a merge the scan resumes at the same
    parcel: earlier parcels already failed against everything and only get
    heavier partners, so a full restart would find nothing new. Parcels already
    over the ceiling (single oversized units) are never merge candidates.
    """
    out = [Parcel(items=list(p.items), weight_grams=p.weight_grams) for p in parcels]
    i = 0
    while i < len(out):
        if out[i].weight_grams > max_weight_grams:
            i += 1
            continue
        j = i + 1
        while j < len(out):
            if out[i].weight_grams + out[j].weight_grams <= max_weight_grams:
                out[i] = Parcel(
                    items=out[i].items + out[j].items,
                    weight_grams=out[i].weight_grams + out[j].weight_grams,
                )
                # partners before j already failed against a lighter out[i]
                del out[j]
            else:
                j += 1
        i += 1
    return out


def _min_parcel_count(items: Sequence[LineItem], max_weight_grams: float) -> int:
    oversized = sum(it.quantity for it in items if it.unit_weight_grams > max_weight_grams)
    regular = sum(it.total_weight_grams for it in items if it.unit_weight_grams <= max_weight_grams)
    return oversized + math.ceil(regular / max_weight_grams)


def split_parcels(
    items: Sequence[LineItem],
    max_weight_grams: float,
    max_parcels: int = MAX_PARCELS,
) -> List[Parcel]:
    """
    Partition items into parcels whose weight stays <= max_weight_grams.

    A single unit heavier than the ceiling is shipped alone, one parcel per unit;
    such parcels exceed the ceiling and must be rejected by the pricer. They are
    appended after the merged regular parcels.
    Raises InvalidItemError for a non-positive or non-finite ceiling, quantity or
    unit weight, and TooManyParcelsError when the cart cannot fit in max_parcels
    parcels.
    """
    if max_weight_grams is None or not math.isfinite(max_weight_grams) or max_weight_grams <= 0:
        raise InvalidItemError(f"max weight must be a positive finite number, got {max_weight_grams!r}")
    for item in items:
        validate_item(item)

    needed = _min_parcel_count(items, max_weight_grams)
    if needed > max_parcels:
        raise TooManyParcelsError(
            f"cart needs at least {needed} parcels at {max_weight_grams}g, limit is {max_parcels}"
        )

    ordered = sorted(items, key=lambda it: it.total_weight_grams, reverse=True)

    parcels: List[Parcel] = []
    oversized: List[Parcel] = []
    current = Parcel()
    for item in ordered:
        if item.unit_weight_grams > max_weight_grams:
            for _ in range(item.quantity):
                single = Parcel()
                single.add(item, 1)
                oversized.append(single)
            continue

        remaining = item.quantity
        while remaining > 0:
            fit = math.floor((max_weight_grams - current.weight_grams) / item.unit_weight_grams)
            if fit <= 0:
                # an empty parcel always takes at least one unit here
                parcels.append(current)
                current = Parcel()
                continue
            take = min(fit, remaining)
            current.add(item, take)
            remaining -= take

    if current.items:
        parcels.append(current)

    return merge_parcels(parcels, max_weight_grams) + oversized

import random
from collections import Counter

import pytest

from shipcalc.engine.parcels import (
    InvalidItemError,
    LineItem,
    Parcel,
    TooManyParcelsError,
    merge_parcels,
    split_parcels,
)


def _qty_by_item(parcels):
    out = Counter()
    for p in parcels:
        for it in p.items:
            out[it.identifier] += it.quantity
    return out


def _random_cart(rng, n_items):
    return [
        LineItem(identifier=f"item-{i}", unit_weight_grams=rng.randint(1, 12000), quantity=rng.randint(1, 6))
        for i in range(n_items)
    ]


def test_single_light_item_one_parcel():
    parcels = split_parcels([LineItem("sku-1", 500, 1)], 31500)
    assert len(parcels) == 1
    assert parcels[0].weight_grams == 500


def test_oversized_unit_gets_own_parcel():
    parcels = split_parcels([LineItem("anvil", 20000, 1)], 10000)
    assert len(parcels) == 1
    assert parcels[0].weight_grams == 20000
    assert parcels[0].items[0].quantity == 1


def test_oversized_units_one_parcel_each():
    parcels = split_parcels([LineItem("anvil", 20000, 3), LineItem("pen", 500, 1)], 10000)
    weights = sorted(p.weight_grams for p in parcels)
    assert weights == [500, 20000, 20000, 20000]


def test_quantity_is_split_across_parcels():
    item = LineItem("brick", 3000, 5)
    parcels = split_parcels([item], 10000)
    assert [p.weight_grams for p in parcels] == [9000, 6000]
    assert [p.items[0].quantity for p in parcels] == [3, 2]
    # input untouched
    assert item.quantity == 5


def test_merge_pass_joins_light_tail_parcel():
    items = [
        LineItem("A", 6000, 1),
        LineItem("B", 5000, 1),
        LineItem("C", 4900, 1),
        LineItem("D", 150, 2),
    ]
    parcels = split_parcels(items, 10000)
    assert [p.weight_grams for p in parcels] == [6300, 9900]
    assert [it.identifier for it in parcels[0].items] == ["A", "D"]


def test_merge_parcels_rescans_after_merge():
    parcels = [Parcel(weight_grams=4000), Parcel(weight_grams=7000), Parcel(weight_grams=5000)]
    merged = merge_parcels(parcels, 10000)
    assert [p.weight_grams for p in merged] == [9000, 7000]


def test_empty_cart():
    assert split_parcels([], 10000) == []


@pytest.mark.parametrize("item", [
    LineItem("zero", 0, 3),
    LineItem("negative", -10, 1),
    LineItem("no-qty", 100, 0),
    LineItem("neg-qty", 100, -2),
    LineItem("frac-qty", 100, 1.5),
    LineItem("inf-weight", float("inf"), 1),
])
def test_malformed_items_fail_fast(item):
    with pytest.raises(InvalidItemError):
        split_parcels([LineItem("ok", 100, 1), item], 10000)


@pytest.mark.parametrize("limit", [0, -1, float("inf"), float("nan")])
def test_non_positive_limit_rejected(limit):
    with pytest.raises(InvalidItemError):
        split_parcels([LineItem("ok", 100, 1)], limit)


@pytest.mark.parametrize("seed", range(25))
def test_random_carts_respect_limit_and_conserve_quantity(seed):
    rng = random.Random(seed)
    limit = rng.choice([5000, 10000, 31500])
    items = _random_cart(rng, rng.randint(1, 12))
    parcels = split_parcels(items, limit)

    for p in parcels:
        if p.weight_grams > limit:
            # only a single unit heavier than the limit may do this
            assert len(p.items) == 1 and p.items[0].quantity == 1
            assert p.items[0].unit_weight_grams > limit
        assert p.weight_grams == sum(it.unit_weight_grams * it.quantity for it in p.items)

    assert _qty_by_item(parcels) == Counter({it.identifier: it.quantity for it in items})
    assert sum(p.weight_grams for p in parcels) == sum(it.total_weight_grams for it in items)


@pytest.mark.parametrize("seed", range(10))
def test_merge_is_idempotent(seed):
    rng = random.Random(seed)
    parcels = split_parcels(_random_cart(rng, 10), 10000)
    again = merge_parcels(parcels, 10000)
    assert [p.weight_grams for p in again] == [p.weight_grams for p in parcels]
    assert [[it.identifier for it in p.items] for p in again] == [[it.identifier for it in p.items] for p in parcels]


def test_split_is_deterministic():
    rng = random.Random(7)
    items = _random_cart(rng, 8)
    first = split_parcels(items, 10000)
    second = split_parcels(items, 10000)
    assert [(p.weight_grams, p.items) for p in first] == [(p.weight_grams, p.items) for p in second]


def test_oversized_parcels_are_never_merged():
    parcels = [Parcel(weight_grams=20000), Parcel(weight_grams=100), Parcel(weight_grams=200)]
    assert [p.weight_grams for p in merge_parcels(parcels, 10000)] == [20000, 300]


def test_oversized_parcels_come_after_regular_ones():
    parcels = split_parcels([LineItem("anvil", 20000, 2), LineItem("pen", 500, 3)], 10000)
    assert [p.weight_grams for p in parcels] == [1500, 20000, 20000]


def test_huge_oversized_quantity_hits_parcel_limit():
    with pytest.raises(TooManyParcelsError):
        split_parcels([LineItem("anvil", 20000, 20000)], 10000)


def test_huge_regular_quantity_hits_parcel_limit():
    with pytest.raises(TooManyParcelsError):
        split_parcels([LineItem("sand", 1000, 10000)], 10000)


def test_parcel_limit_boundary():
    assert len(split_parcels([LineItem("anvil", 20000, 500)], 10000)) == 500
    with pytest.raises(TooManyParcelsError):
        split_parcels([LineItem("anvil", 20000, 501)], 10000)
    assert len(split_parcels([LineItem("anvil", 20000, 3)], 10000, max_parcels=3)) == 3


def test_parcel_count_stays_bounded_for_large_carts():
    items = [LineItem(f"box-{i}", 5001, 10) for i in range(20)] + [LineItem("anvil", 20000, 100)]
    parcels = split_parcels(items, 10000)
    # 5001g units cannot share a parcel
    assert len(parcels) == 200 + 100
    assert all(len(p.items) == 1 for p in parcels)

# tests/conftest.py
import os, sys
import pytest
from dotenv import load_dotenv

# project root on path
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

# load env once
load_dotenv()

from shipcalc.carriers import Carrier
from shipcalc.settings import Settings


@pytest.fixture
def test_settings():
    return Settings(
        _env_file=None,
        currency="EUR",
        fallback_price_cents=1000,
        infeasible_price_cents=1500,
        default_country="AT",
    )


@pytest.fixture
def carrier_a():
    return Carrier(id="a", name="Carrier A", max_weight_kg=30, base_cost_cents=500, cost_per_kg_cents=100)


@pytest.fixture
def carrier_b():
    return Carrier(id="b", name="Carrier B", max_weight_kg=5, base_cost_cents=100, cost_per_kg_cents=10)


@pytest.fixture
def banded_carrier():
    return Carrier(
        id="post",
        name="Post Parcel",
        max_weight_kg=31.5,
        base_cost_cents=490,
        cost_per_kg_cents=80,
        countries=[
            {
                "country_code": "AT",
                "delivery_time_days": "1-3",
                "weight_rates": [
                    {"min_weight_kg": 0, "max_weight_kg": 3, "price_cents": 500},
                    {"min_weight_kg": 3, "max_weight_kg": 10, "price_cents": 900},
                ],
            }
        ],
    )

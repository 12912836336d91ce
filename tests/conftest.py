"""Shared fixtures: a fixed clock and an item factory."""

from datetime import datetime, timedelta, timezone

import numpy as np
import pytest

from feed.models.item import Item

FIXED_NOW = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


def make_item(item_id: int, days_old: int = 10, **fields) -> Item:
    """Item added `days_old` days before FIXED_NOW; other fields passed through."""
    data = {
        "id": item_id,
        "name": fields.pop("name", f"Item {item_id}"),
        "added_at": FIXED_NOW - timedelta(days=days_old),
    }
    data.update(fields)
    return Item.model_validate(data)


@pytest.fixture
def clock():
    return lambda: FIXED_NOW


@pytest.fixture
def rng():
    return np.random.default_rng(42)


@pytest.fixture
def catalog():
    """Small mixed catalog: two kitchens, one brand pair, a sealed expensive item."""
    return [
        make_item(1, days_old=200, name="Espresso machine", category="appliances",
                  brand="Breville", price=2400, open_status="unopened",
                  location={"area": "Kitchen"}, tags=[{"name": "coffee"}]),
        make_item(2, days_old=40, name="Coffee grinder", category="appliances",
                  brand="Breville", price=900, open_status="opened",
                  location={"area": "Kitchen"}, tags=[{"name": "coffee"}]),
        make_item(3, days_old=3, name="Paper towels", category="cleaning supplies",
                  price=8, open_status="opened", status="used_up"),
        make_item(4, days_old=100, name="Passport", category="documents",
                  location={"area": "Bedroom"}),
        make_item(5, days_old=400, name="Old vitamins", category="medicine",
                  price=60, status="expired", location={"area": "Bathroom"}),
    ]

from decimal import Decimal
import pytest

from storefront.utils.money import to_decimal, to_minor_units, from_minor_units
from storefront.utils.text import slugify


@pytest.mark.parametrize("amount, expected", [
    ("10.00", 1000),
    (10.005, 1001),
    (Decimal("0.004"), 0),
    (19.99, 1999),
    (None, 0),
])
def test_to_minor_units_rounds_half_up(amount, expected):
    assert to_minor_units(amount) == expected


def test_from_minor_units():
    assert from_minor_units(2500) == Decimal("25.00")
    assert from_minor_units(None) == Decimal("0.00")


def test_to_decimal_unreadable_is_zero():
    assert to_decimal("abc") == Decimal("0.00")


@pytest.mark.parametrize("name, slug", [
    ("Home & Garden!", "home-garden"),
    ("  Vêtements Homme ", "vêtements-homme"),
    ("Café-Thé", "café-thé"),
    ("!!!", ""),
])
def test_slugify(name, slug):
    assert slugify(name) == slug

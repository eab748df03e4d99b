"""
Conversions montants décimaux <-> unités mineures Stripe (centimes).
"""
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Any

CENT = Decimal("0.01")

def to_decimal(value: Any) -> Decimal:
    """Decimal à 2 décimales depuis str|int|float|Decimal; Decimal('0.00') si illisible."""
    if value is None:
        return Decimal("0.00")
    try:
        return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)
    except (InvalidOperation, ValueError):
        return Decimal("0.00")

def to_minor_units(amount: Any) -> int:
    """10.005 -> 1001 (arrondi half-up au centime)."""
    return int((to_decimal(amount) * 100).to_integral_value(rounding=ROUND_HALF_UP))

def from_minor_units(amount: Any) -> Decimal:
    """2500 -> Decimal('25.00')."""
    return (Decimal(int(amount or 0)) / 100).quantize(CENT)

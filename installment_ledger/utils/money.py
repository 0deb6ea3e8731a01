"""Money helpers - Decimal inside the engine, 2-place rounding at the edges"""

from decimal import Decimal, ROUND_HALF_UP

CENT = Decimal("0.01")


def to_money(value: Decimal | int | float | str) -> Decimal:
    """Coerce an input amount to Decimal without losing precision (floats go through str)"""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def round_money(value: Decimal) -> Decimal:
    """Round to cents for presentation. Never applied inside engine loops."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)

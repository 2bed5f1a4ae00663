"""Decimal money helpers shared by the balance and settlement stages."""
from decimal import Decimal, ROUND_HALF_UP

CENT = Decimal("0.01")
# Balances and transfers at or below this are considered settled.
TOLERANCE = CENT


def to_decimal(value) -> Decimal:
    """Convert via str so float noise (0.1 -> 0.1000000000000000055) never enters."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_money(value, places: int = 2) -> Decimal:
    """Round half away from zero to `places` decimals."""
    return to_decimal(value).quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)


def money_float(value) -> float:
    rounded = round_money(value)
    # -0.00 would serialize as -0.0
    return float(rounded) if rounded else 0.0

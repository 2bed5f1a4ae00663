"""Static entry-time conversion into the trip currency."""
import os
from typing import Optional

from tripsplit.services.money import money_float, to_decimal

# (entered currency, trip currency) -> multiplier
STATIC_RATES: dict[tuple[str, str], float] = {
    ("PLN", "JPY"): float(os.getenv("PLN_TO_JPY_RATE", "38.46")),
}


class UnsupportedCurrency(ValueError):
    pass


def convert_entry(amount: float, description: str, entered: Optional[str], trip_currency: str) -> tuple[float, str]:
    """Return (amount in trip currency, description) for an expense entered in `entered`."""
    if not entered or entered.upper() == trip_currency.upper():
        return amount, description
    entered = entered.upper()
    rate = STATIC_RATES.get((entered, trip_currency.upper()))
    if rate is None:
        raise UnsupportedCurrency(f"No rate from {entered} to {trip_currency}")
    converted = money_float(to_decimal(amount) * to_decimal(rate))
    return converted, f"{description} ({to_decimal(amount).normalize():f} {entered})"

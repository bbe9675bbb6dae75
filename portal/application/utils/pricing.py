from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal


def _to_decimal(value: Decimal | int | float | str) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def billable_days(days: int) -> int:
    """Same-day bookings are priced as one day."""
    return max(days, 1)


def per_day_rate(total_price: Decimal | int | float, original_days: int) -> Decimal:
    if original_days == 0:
        raise ZeroDivisionError("per-day rate is undefined for a booking spanning zero days")
    return _to_decimal(total_price) / Decimal(original_days)


def estimate(rate: Decimal | int | float | str, days: int) -> int:
    """Advisory price for `days` at `rate`, rounded half-up to whole currency units."""
    amount = _to_decimal(rate) * Decimal(days)
    return int(amount.quantize(Decimal("1"), rounding=ROUND_HALF_UP))

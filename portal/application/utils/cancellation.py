from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from decimal import Decimal
from zoneinfo import ZoneInfo

from portal.domain.entities.booking import Booking

REFUND_WINDOW_HOURS = 48
UTC = ZoneInfo("UTC")


@dataclass(frozen=True)
class CancellationQuote:
    hours_before_start: float
    refundable: bool
    refund_amount: Decimal


def localize(day: date, at: time, timezone: ZoneInfo) -> datetime:
    return datetime.combine(day, at, tzinfo=timezone)


def hours_until(start_date: date, start_time: time, now: datetime, timezone: ZoneInfo) -> float:
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone)
    # Real elapsed hours, across DST switches too.
    start = localize(start_date, start_time, timezone).astimezone(UTC)
    return (start - now.astimezone(UTC)).total_seconds() / 3600


def is_refundable(
    start_date: date,
    start_time: time,
    now: datetime,
    timezone: ZoneInfo,
    window_hours: int = REFUND_WINDOW_HOURS,
) -> bool:
    """True when at least `window_hours` remain before the scheduled start."""
    return hours_until(start_date, start_time, now, timezone) >= window_hours


def refund_amount(paid_amount: Decimal, refundable: bool) -> Decimal:
    return paid_amount if refundable else Decimal("0")


def quote(
    booking: Booking,
    now: datetime,
    timezone: ZoneInfo,
    window_hours: int = REFUND_WINDOW_HOURS,
) -> CancellationQuote:
    hours = hours_until(booking.start_date, booking.start_time, now, timezone)
    refundable = hours >= window_hours
    return CancellationQuote(
        hours_before_start=hours,
        refundable=refundable,
        refund_amount=refund_amount(booking.paid_amount, refundable),
    )

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from portal.domain.entities.booking import CLOSED_STATUSES, IN_PROGRESS, Booking, BookingStatus


@dataclass(frozen=True)
class BookingPermissions:
    effective_status: str
    can_modify: bool
    can_cancel: bool
    can_extend: bool


def effective_status(booking: Booking) -> str:
    if booking.checked_in and not booking.checked_out:
        return IN_PROGRESS
    return booking.status.value


def evaluate(booking: Booking, now: datetime | None = None) -> BookingPermissions:
    """
    Derive the display status and the actions the customer may take.

    `now` is accepted so callers evaluate against one instant per request;
    the current rules depend only on status and check-in flags.
    """
    return BookingPermissions(
        effective_status=effective_status(booking),
        can_modify=booking.status != BookingStatus.CANCELLED and not booking.checked_in,
        can_cancel=not booking.checked_in and booking.status not in CLOSED_STATUSES,
        can_extend=booking.status not in CLOSED_STATUSES and not booking.checked_out,
    )

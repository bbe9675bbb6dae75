from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, time

from portal.application.exceptions import PortalValidationError
from portal.application.ports.portal_api import PortalApiPort
from portal.application.use_cases.bookings import BookingsUseCase, BookingView
from portal.application.utils.duration import days_between, is_valid_range
from portal.application.utils.pricing import billable_days, estimate, per_day_rate
from portal.domain.entities.booking import Booking


@dataclass(frozen=True)
class ModificationPreview:
    original_days: int
    new_days: int
    estimated_price: int
    has_changes: bool
    is_valid: bool


def preview(booking: Booking, start_date: date, end_date: date, start_time: time, end_time: time) -> ModificationPreview:
    """Instant, advisory estimate for new dates; the backend sets the real price."""
    original_days = days_between(booking.start_date, booking.end_date, clamp=True)
    new_days = days_between(start_date, end_date, clamp=True)
    rate = per_day_rate(booking.total_price, billable_days(original_days))

    has_changes = (
        start_date != booking.start_date
        or end_date != booking.end_date
        or start_time != booking.start_time
        or end_time != booking.end_time
    )
    return ModificationPreview(
        original_days=original_days,
        new_days=new_days,
        estimated_price=estimate(rate, billable_days(new_days)),
        has_changes=has_changes,
        is_valid=is_valid_range(start_date, start_time, end_date, end_time) and has_changes,
    )


class ModifyBookingUseCase:
    def __init__(self, api: PortalApiPort, bookings: BookingsUseCase) -> None:
        self._api = api
        self._bookings = bookings
        self._logger = logging.getLogger(__name__)

    async def estimate(
        self,
        booking_id: str,
        start_date: date,
        end_date: date,
        start_time: time,
        end_time: time,
    ) -> ModificationPreview:
        booking = await self._api.get_booking(booking_id)
        return preview(booking, start_date, end_date, start_time, end_time)

    async def submit(
        self,
        booking_id: str,
        start_date: date,
        end_date: date,
        start_time: time,
        end_time: time,
        now: datetime | None = None,
    ) -> BookingView:
        current = await self._bookings.get_booking(booking_id, now)
        if not current.permissions.can_modify or current.booking.is_closed:
            raise PortalValidationError("This booking can no longer be modified", code="modify.notAllowed")

        result = preview(current.booking, start_date, end_date, start_time, end_time)
        if not is_valid_range(start_date, start_time, end_date, end_time):
            raise PortalValidationError("The end must be after the start", code="modify.invalidRange")
        if not result.has_changes:
            raise PortalValidationError("There are no changes to save", code="modify.noChanges")

        await self._api.modify_booking(booking_id, start_date, end_date, start_time, end_time)
        self._logger.info("Booking dates modified", extra={"booking_id": booking_id})
        return await self._bookings.get_booking(booking_id, now)

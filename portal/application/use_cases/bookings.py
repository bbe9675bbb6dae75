from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from zoneinfo import ZoneInfo

from portal.application.exceptions import PortalValidationError
from portal.application.ports.portal_api import PortalApiPort
from portal.application.utils import cancellation
from portal.application.utils.booking_state import BookingPermissions, evaluate
from portal.domain.entities.booking import Booking


@dataclass(frozen=True)
class BookingView:
    booking: Booking
    permissions: BookingPermissions
    cancellation: cancellation.CancellationQuote | None = None


@dataclass(frozen=True)
class BookingOverview:
    upcoming: list[BookingView]
    past: list[BookingView]


class BookingsUseCase:
    def __init__(
        self,
        api: PortalApiPort,
        timezone: ZoneInfo,
        refund_window_hours: int = cancellation.REFUND_WINDOW_HOURS,
    ) -> None:
        self._api = api
        self._timezone = timezone
        self._refund_window_hours = refund_window_hours
        self._logger = logging.getLogger(__name__)

    def _now(self, now: datetime | None) -> datetime:
        if now is None:
            return datetime.now(self._timezone)
        if now.tzinfo is None:
            return now.replace(tzinfo=self._timezone)
        return now

    def view(self, booking: Booking, now: datetime | None = None) -> BookingView:
        now = self._now(now)
        permissions = evaluate(booking, now)
        quote = None
        if permissions.can_cancel:
            quote = cancellation.quote(booking, now, self._timezone, self._refund_window_hours)
        return BookingView(booking=booking, permissions=permissions, cancellation=quote)

    async def list_bookings(self, customer_id: str, now: datetime | None = None) -> BookingOverview:
        now = self._now(now)
        today = now.astimezone(self._timezone).date()
        upcoming: list[BookingView] = []
        past: list[BookingView] = []
        for booking in await self._api.list_bookings(customer_id):
            view = self.view(booking, now)
            in_progress = booking.checked_in and not booking.checked_out
            if in_progress or (booking.start_date >= today and not booking.is_closed):
                upcoming.append(view)
            else:
                past.append(view)
        upcoming.sort(key=lambda v: (v.booking.start_date, v.booking.start_time))
        past.sort(key=lambda v: (v.booking.start_date, v.booking.start_time), reverse=True)
        return BookingOverview(upcoming=upcoming, past=past)

    async def get_booking(self, booking_id: str, now: datetime | None = None) -> BookingView:
        booking = await self._api.get_booking(booking_id)
        return self.view(booking, now)

    async def cancel_booking(self, booking_id: str, confirmed: bool, now: datetime | None = None) -> BookingView:
        """
        Cancel after the customer has seen the refund notice.

        Permissions are evaluated on a fresh copy of the booking, and the
        booking is fetched again afterwards so the returned view reflects
        the backend's outcome.
        """
        current = await self.get_booking(booking_id, now)
        if not current.permissions.can_cancel:
            raise PortalValidationError("This booking can no longer be cancelled", code="cancel.notAllowed")
        if not confirmed:
            raise PortalValidationError("Cancellation must be confirmed", code="cancel.confirmationRequired")

        await self._api.cancel_booking(booking_id)
        self._logger.info(
            "Booking cancelled",
            extra={"booking_id": booking_id, "status": "CANCELLED"},
        )
        return await self.get_booking(booking_id, now)

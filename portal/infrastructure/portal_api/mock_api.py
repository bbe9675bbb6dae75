from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, time, timedelta
from decimal import Decimal
from typing import Any

from portal.application.exceptions import PortalBackendError, PortalNotFoundError
from portal.application.ports.portal_api import PortalApiPort
from portal.application.utils.duration import days_between
from portal.application.utils.pricing import billable_days, per_day_rate
from portal.domain.entities.booking import (
    Booking,
    BookingOption,
    BookingStatus,
    Contract,
    ContractExtension,
)
from portal.domain.entities.customer import Customer, CustomerProfile
from portal.domain.entities.extension_session import (
    ExtensionAvailability,
    ExtensionPricing,
    PaymentMethod,
)

MOCK_CUSTOMER_ID = "1"


def _sample_bookings(today: date) -> list[Booking]:
    return [
        Booking(
            id="1",
            reference="VR-2026-0001",
            status=BookingStatus.CONFIRMED,
            start_date=today + timedelta(days=5),
            end_date=today + timedelta(days=8),
            start_time=time(10, 0),
            end_time=time(10, 0),
            total_price=Decimal("150"),
            paid_amount=Decimal("45"),
            deposit_amount=Decimal("100"),
            options=(BookingOption(name="Casco", quantity=2, total_price=Decimal("10")),),
            vehicle_name={"es": "Scooter eléctrico", "en": "Electric scooter", "fr": "Scooter électrique"},
        ),
        Booking(
            id="2",
            reference="VR-2026-0002",
            status=BookingStatus.CONFIRMED,
            start_date=today - timedelta(days=1),
            end_date=today + timedelta(days=2),
            start_time=time(9, 30),
            end_time=time(18, 0),
            checked_in=True,
            total_price=Decimal("90"),
            paid_amount=Decimal("90"),
            deposit_amount=Decimal("50"),
            contract=Contract(contract_number="CT-0002", document_url="https://example.invalid/ct-0002.pdf"),
            vehicle_name={"es": "Bicicleta eléctrica", "en": "E-bike"},
        ),
        Booking(
            id="3",
            reference="VR-2025-0107",
            status=BookingStatus.COMPLETED,
            start_date=today - timedelta(days=40),
            end_date=today - timedelta(days=37),
            start_time=time(10, 0),
            end_time=time(10, 0),
            checked_in=True,
            checked_out=True,
            total_price=Decimal("120"),
            paid_amount=Decimal("120"),
            vehicle_name={"es": "Moto 125cc"},
        ),
    ]


class MockPortalApi(PortalApiPort):
    """In-memory stand-in for the customer-portal API, used for local development."""

    def __init__(self, bookings: list[Booking] | None = None, today: date | None = None) -> None:
        today = today or date.today()
        self._bookings: dict[str, Booking] = {b.id: b for b in (bookings or _sample_bookings(today))}
        self._customer = Customer(id=MOCK_CUSTOMER_ID, first_name="Juan", last_name="García", email="juan@example.com")
        self._profile = CustomerProfile(
            id=MOCK_CUSTOMER_ID,
            email=self._customer.email,
            first_name=self._customer.first_name,
            last_name=self._customer.last_name,
            language="es",
            last_booking_end_date=max((b.end_date for b in self._bookings.values()), default=None),
        )
        self._unavailable_after: date | None = None
        self._failures: dict[str, str] = {}
        self._pending_codes: set[str] = set()
        self.calls: list[str] = []
        self._logger = logging.getLogger(__name__)

    def fail(self, operation: str, message: str) -> None:
        """Make the next call to `operation` fail with a backend error."""
        self._failures[operation] = message

    def block_extensions_after(self, day: date | None) -> None:
        self._unavailable_after = day

    def _enter(self, operation: str) -> None:
        self.calls.append(operation)
        message = self._failures.pop(operation, None)
        if message is not None:
            raise PortalBackendError(message, status_code=400)

    def _booking(self, booking_id: str) -> Booking:
        booking = self._bookings.get(str(booking_id))
        if booking is None:
            raise PortalNotFoundError("Booking not found", status_code=404)
        return booking

    def _active_count(self) -> int:
        return sum(1 for b in self._bookings.values() if not b.is_closed)

    async def request_login_code(self, email: str) -> None:
        self._enter("request_login_code")
        self._pending_codes.add(email.lower())
        self._logger.info("Mock login code issued", extra={"email": email})

    async def verify_login_code(self, email: str, code: str) -> Customer:
        self._enter("verify_login_code")
        if email.lower() not in self._pending_codes:
            raise PortalBackendError("Invalid or expired code", status_code=401)
        return replace(self._customer, email=email)

    async def list_bookings(self, customer_id: str) -> list[Booking]:
        self._enter("list_bookings")
        if str(customer_id) != MOCK_CUSTOMER_ID:
            return []
        return list(self._bookings.values())

    async def get_booking(self, booking_id: str) -> Booking:
        self._enter("get_booking")
        return self._booking(booking_id)

    async def modify_booking(
        self,
        booking_id: str,
        start_date: date,
        end_date: date,
        start_time: time,
        end_time: time,
    ) -> Booking | None:
        self._enter("modify_booking")
        booking = self._booking(booking_id)
        if booking.is_closed or booking.checked_in:
            raise PortalBackendError("Booking can no longer be modified", status_code=409)
        rate = per_day_rate(booking.total_price, billable_days(days_between(booking.start_date, booking.end_date)))
        new_days = billable_days(days_between(start_date, end_date, clamp=True))
        updated = replace(
            booking,
            start_date=start_date,
            end_date=end_date,
            start_time=start_time,
            end_time=end_time,
            total_price=(rate * new_days).quantize(Decimal("1")),
        )
        self._bookings[updated.id] = updated
        return updated

    async def cancel_booking(self, booking_id: str) -> Booking | None:
        self._enter("cancel_booking")
        booking = self._booking(booking_id)
        if booking.checked_in or booking.is_closed:
            raise PortalBackendError("Booking can no longer be cancelled", status_code=409)
        updated = replace(booking, status=BookingStatus.CANCELLED)
        self._bookings[updated.id] = updated
        return updated

    def _current_end(self, booking: Booking) -> tuple[date, time]:
        if booking.contract and booking.contract.current_end_date:
            return booking.contract.current_end_date, booking.contract.current_end_time or booking.end_time
        return booking.end_date, booking.end_time

    async def check_extension(self, booking_id: str, new_end_date: date, new_end_time: time) -> ExtensionAvailability:
        self._enter("check_extension")
        booking = self._booking(booking_id)
        if self._unavailable_after is not None and new_end_date > self._unavailable_after:
            return ExtensionAvailability(available=False)
        end_date, _ = self._current_end(booking)
        extra_days = days_between(end_date, new_end_date)
        rate = per_day_rate(booking.total_price, billable_days(days_between(booking.start_date, booking.end_date)))
        return ExtensionAvailability(
            available=True,
            pricing=ExtensionPricing(
                additional_days=extra_days,
                total_amount=(rate * max(extra_days, 1)).quantize(Decimal("1")),
            ),
            agency_payment_available=not booking.checked_in,
        )

    async def confirm_extension(
        self,
        booking_id: str,
        new_end_date: date,
        new_end_time: time,
        payment_method: PaymentMethod,
    ) -> ContractExtension:
        self._enter("confirm_extension")
        availability = await self.check_extension(booking_id, new_end_date, new_end_time)
        if not availability.available or availability.pricing is None:
            raise PortalBackendError("Vehicle not available for the requested dates", status_code=409)
        booking = self._booking(booking_id)
        contract = booking.contract or Contract()
        extension = ContractExtension(
            extension_number=len(contract.extensions) + 1,
            additional_days=availability.pricing.additional_days,
            total_amount=availability.pricing.total_amount,
            payment_status="PAID" if payment_method == PaymentMethod.CARD_NOW else "PENDING",
        )
        self._bookings[booking.id] = replace(
            booking,
            contract=replace(
                contract,
                current_end_date=new_end_date,
                current_end_time=new_end_time,
                extensions=contract.extensions + (extension,),
            ),
        )
        return extension

    async def get_profile(self, customer_id: str) -> CustomerProfile:
        self._enter("get_profile")
        if str(customer_id) != self._profile.id:
            raise PortalNotFoundError("Profile not found", status_code=404)
        return replace(self._profile, active_bookings_count=self._active_count())

    async def update_profile(self, customer_id: str, changes: dict[str, Any]) -> None:
        self._enter("update_profile")
        if str(customer_id) != self._profile.id:
            raise PortalNotFoundError("Profile not found", status_code=404)
        mapping = {
            "firstName": "first_name",
            "lastName": "last_name",
            "phone": "phone",
            "address": "address",
            "postalCode": "postal_code",
            "city": "city",
            "country": "country",
            "language": "language",
        }
        updates = {mapping[k]: v for k, v in changes.items() if k in mapping}
        self._profile = replace(self._profile, **updates)

    async def request_data_deletion(self, customer_id: str) -> str:
        self._enter("request_data_deletion")
        if self._active_count() > 0:
            raise PortalBackendError("Active bookings must be completed first", status_code=409)
        return "Deletion request registered"

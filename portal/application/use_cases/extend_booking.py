from __future__ import annotations

import logging
import time as clock
from dataclasses import dataclass, replace
from datetime import date, time
from decimal import Decimal
from typing import Any, Callable

from portal.application.exceptions import (
    InvalidTransitionError,
    PortalBackendError,
    PortalValidationError,
)
from portal.application.ports.portal_api import PortalApiPort
from portal.application.utils.booking_state import evaluate
from portal.application.utils.duration import additional_days, days_between, is_forward_extension
from portal.application.utils.pricing import billable_days, estimate, per_day_rate
from portal.domain.entities.booking import Booking
from portal.domain.entities.extension_session import (
    ExtensionSession,
    ExtensionStep,
    PaymentMethod,
)


@dataclass(frozen=True)
class ExtensionSummary:
    new_end_date: date
    new_end_time: time
    total_days: int
    additional_days: int
    total_amount: Decimal
    payment_method: PaymentMethod
    paid: bool
    extension_number: int


class ExtensionWorkflow:
    """
    Drives the extend-booking flow for one booking:
    form -> checking -> available | unavailable -> payment -> success.

    Each step that talks to the portal API marks the session as submitting
    until the call settles; any action attempted meanwhile is rejected.
    Backend failures never escape: they land on `session.error`.
    """

    def __init__(
        self,
        api: PortalApiPort,
        booking: Booking,
        session: ExtensionSession | None = None,
        on_change: Callable[[ExtensionSession], None] | None = None,
    ) -> None:
        self._api = api
        self._booking = booking
        self._on_change = on_change
        self._logger = logging.getLogger(__name__)
        if session is None:
            end_date, end_time = self.current_end
            session = ExtensionSession(booking_id=booking.id, new_end_date=end_date, new_end_time=end_time)
        self._session = session

    @property
    def booking(self) -> Booking:
        return self._booking

    @property
    def session(self) -> ExtensionSession:
        return self._session

    @property
    def current_end(self) -> tuple[date, time]:
        contract = self._booking.contract
        if contract and contract.current_end_date:
            return contract.current_end_date, contract.current_end_time or self._booking.end_time
        return self._booking.end_date, self._booking.end_time

    @property
    def original_days(self) -> int:
        return days_between(self._booking.start_date, self.current_end[0])

    @property
    def new_total_days(self) -> int:
        if self._session.new_end_date is None:
            return self.original_days
        return days_between(self._booking.start_date, self._session.new_end_date)

    @property
    def additional_days(self) -> int:
        return additional_days(self.original_days, self.new_total_days)

    @property
    def is_forward(self) -> bool:
        new_end_date, new_end_time = self._session.new_end_date, self._session.new_end_time
        if new_end_date is None or new_end_time is None:
            return False
        return is_forward_extension(*self.current_end, new_end_date, new_end_time)

    @property
    def can_check_availability(self) -> bool:
        return (
            self._session.step == ExtensionStep.FORM
            and not self._session.submitting
            and evaluate(self._booking).can_extend
            and self.is_forward
            and self.additional_days > 0
        )

    @property
    def estimated_price(self) -> int:
        """Advisory figure shown while editing; the backend pricing replaces it once known."""
        if self.additional_days <= 0:
            return 0
        booked_days = billable_days(days_between(self._booking.start_date, self._booking.end_date))
        return estimate(per_day_rate(self._booking.total_price, booked_days), self.additional_days)

    @property
    def amount_due(self) -> Decimal:
        if self._session.pricing is not None:
            return self._session.pricing.total_amount
        return Decimal(self.estimated_price)

    @property
    def payment_options(self) -> list[PaymentMethod]:
        if self._session.step not in (ExtensionStep.AVAILABLE, ExtensionStep.PAYMENT):
            return []
        options = [PaymentMethod.CARD_NOW]
        if self._session.agency_payment_available:
            options.append(PaymentMethod.PAY_AT_AGENCY)
        return options

    def _update(self, **changes: Any) -> ExtensionSession:
        previous = self._session.step
        self._session = replace(self._session, updated_at=clock.time(), **changes)
        if self._session.step != previous:
            self._logger.info(
                "Extension step changed",
                extra={"booking_id": self._booking.id, "step": self._session.step.value, "previous": previous.value},
            )
        if self._on_change is not None:
            self._on_change(self._session)
        return self._session

    def _require(self, *steps: ExtensionStep) -> None:
        if self._session.submitting:
            raise InvalidTransitionError("A request for this extension is already in progress")
        if self._session.step not in steps:
            allowed = ", ".join(s.value for s in steps)
            raise InvalidTransitionError(f"Action not allowed in step '{self._session.step.value}' (expected {allowed})")

    def edit(self, new_end_date: date, new_end_time: time) -> ExtensionSession:
        self._require(ExtensionStep.FORM)
        return self._update(new_end_date=new_end_date, new_end_time=new_end_time, error=None, pricing=None)

    async def check_availability(self) -> ExtensionSession:
        self._require(ExtensionStep.FORM)
        if not evaluate(self._booking).can_extend:
            raise PortalValidationError("This booking cannot be extended", code="extend.notAllowed")
        if not (self.is_forward and self.additional_days > 0):
            raise PortalValidationError("The new end date must be after the current one", code="extend.notForward")

        new_end_date, new_end_time = self._session.new_end_date, self._session.new_end_time
        self._update(step=ExtensionStep.CHECKING, submitting=True, error=None, pricing=None, payment_method=None)

        changes: dict[str, Any] = {"step": ExtensionStep.FORM}
        try:
            availability = await self._api.check_extension(self._booking.id, new_end_date, new_end_time)
            if availability.available:
                changes = {
                    "step": ExtensionStep.AVAILABLE,
                    "pricing": availability.pricing,
                    "agency_payment_available": availability.agency_payment_available,
                }
            else:
                changes = {"step": ExtensionStep.UNAVAILABLE}
        except PortalBackendError as exc:
            self._logger.warning(
                "Extension availability check failed",
                extra={"booking_id": self._booking.id, "error": exc.message},
            )
            changes["error"] = exc.message
        finally:
            self._update(submitting=False, **changes)
        return self._session

    def choose_other_dates(self) -> ExtensionSession:
        self._require(ExtensionStep.UNAVAILABLE)
        return self._update(step=ExtensionStep.FORM, error=None)

    def select_payment_method(self, method: PaymentMethod) -> ExtensionSession:
        self._require(ExtensionStep.AVAILABLE)
        if method == PaymentMethod.PAY_AT_AGENCY and not self._session.agency_payment_available:
            raise PortalValidationError(
                "Paying at the agency is not available for this extension",
                code="extend.agencyUnavailable",
            )
        return self._update(step=ExtensionStep.PAYMENT, payment_method=method, error=None)

    def back(self) -> ExtensionSession:
        self._require(ExtensionStep.PAYMENT)
        return self._update(step=ExtensionStep.AVAILABLE, error=None)

    async def confirm(self) -> ExtensionSession:
        self._require(ExtensionStep.PAYMENT)
        method = self._session.payment_method
        if method is None:
            raise InvalidTransitionError("No payment method selected")

        self._update(submitting=True, error=None)
        changes: dict[str, Any] = {}
        try:
            extension = await self._api.confirm_extension(
                self._booking.id,
                self._session.new_end_date,
                self._session.new_end_time,
                method,
            )
            changes = {"step": ExtensionStep.SUCCESS, "result": extension}
        except PortalBackendError as exc:
            self._logger.warning(
                "Extension confirmation failed",
                extra={"booking_id": self._booking.id, "error": exc.message},
            )
            changes = {"error": exc.message}
        finally:
            self._update(submitting=False, **changes)
        return self._session

    def summary(self) -> ExtensionSummary:
        session = self._session
        if session.step != ExtensionStep.SUCCESS or session.result is None:
            raise InvalidTransitionError("Extension is not confirmed yet")
        result = session.result
        if result.payment_status:
            paid = result.payment_status.upper() == "PAID"
        else:
            paid = session.payment_method == PaymentMethod.CARD_NOW
        return ExtensionSummary(
            new_end_date=session.new_end_date,
            new_end_time=session.new_end_time,
            total_days=self.new_total_days,
            additional_days=result.additional_days,
            total_amount=result.total_amount,
            payment_method=session.payment_method,
            paid=paid,
            extension_number=result.extension_number,
        )

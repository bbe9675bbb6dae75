"""
Tests for the extend-booking state machine.
"""

from __future__ import annotations

import asyncio
from dataclasses import replace
from datetime import date, time
from decimal import Decimal

import pytest
import respx

from portal.application.exceptions import InvalidTransitionError, PortalValidationError
from portal.application.use_cases.extend_booking import ExtensionWorkflow
from portal.domain.entities.booking import BookingStatus, Contract
from portal.domain.entities.extension_session import (
    ExtensionAvailability,
    ExtensionPricing,
    ExtensionStep,
    PaymentMethod,
)
from portal.infrastructure.portal_api.http_client import HttpPortalApi
from portal.infrastructure.portal_api.mock_api import MockPortalApi


class PricedApi(MockPortalApi):
    """Backend that quotes its own price, independent of the local estimate."""

    def __init__(self, bookings, total: str = "175", agency: bool = True) -> None:
        super().__init__(bookings=bookings)
        self._total = Decimal(total)
        self._agency = agency

    async def check_extension(self, booking_id, new_end_date, new_end_time):
        self._enter("check_extension")
        return ExtensionAvailability(
            available=True,
            pricing=ExtensionPricing(additional_days=3, total_amount=self._total),
            agency_payment_available=self._agency,
        )


class SlowApi(MockPortalApi):
    def __init__(self, bookings) -> None:
        super().__init__(bookings=bookings)
        self.release = asyncio.Event()
        self.started = asyncio.Event()

    async def check_extension(self, booking_id, new_end_date, new_end_time):
        self.started.set()
        await self.release.wait()
        return await super().check_extension(booking_id, new_end_date, new_end_time)


def _workflow(booking, api=None, **kwargs) -> ExtensionWorkflow:
    api = api or MockPortalApi(bookings=[booking])
    return ExtensionWorkflow(api, booking, **kwargs)


def test_new_session_starts_on_form_at_current_end(booking_factory):
    workflow = _workflow(booking_factory())

    assert workflow.session.step == ExtensionStep.FORM
    assert workflow.session.new_end_date == date(2026, 1, 15)
    assert workflow.original_days == 5
    assert workflow.additional_days == 0
    assert workflow.can_check_availability is False


def test_editing_dates_updates_projection_and_estimate(booking_factory):
    workflow = _workflow(booking_factory())
    workflow.edit(date(2026, 1, 18), time(10, 0))

    assert workflow.new_total_days == 8
    assert workflow.additional_days == 3
    assert workflow.estimated_price == 150
    assert workflow.can_check_availability is True


def test_contract_current_end_is_the_reference(booking_factory):
    booking = booking_factory(
        contract=Contract(current_end_date=date(2026, 1, 17), current_end_time=time(12, 0)),
    )
    workflow = _workflow(booking)

    assert workflow.current_end == (date(2026, 1, 17), time(12, 0))
    workflow.edit(date(2026, 1, 17), time(18, 0))
    assert workflow.is_forward is True
    assert workflow.additional_days == 0
    assert workflow.can_check_availability is False


@pytest.mark.asyncio
async def test_later_time_on_same_day_is_not_checkable(booking_factory):
    booking = booking_factory()
    api = MockPortalApi(bookings=[booking])
    workflow = _workflow(booking, api)
    workflow.edit(date(2026, 1, 15), time(18, 0))

    assert workflow.is_forward is True
    assert workflow.can_check_availability is False
    with pytest.raises(PortalValidationError):
        await workflow.check_availability()
    assert "check_extension" not in api.calls
    assert workflow.session.step == ExtensionStep.FORM


@pytest.mark.asyncio
async def test_earlier_end_is_rejected_before_any_request(booking_factory):
    booking = booking_factory()
    api = MockPortalApi(bookings=[booking])
    workflow = _workflow(booking, api)
    workflow.edit(date(2026, 1, 13), time(10, 0))

    with pytest.raises(PortalValidationError) as exc_info:
        await workflow.check_availability()
    assert exc_info.value.code == "extend.notForward"
    assert api.calls == []


@pytest.mark.asyncio
async def test_closed_booking_cannot_be_checked(booking_factory):
    workflow = _workflow(booking_factory(status=BookingStatus.COMPLETED))
    workflow.edit(date(2026, 1, 18), time(10, 0))

    assert workflow.can_check_availability is False
    with pytest.raises(PortalValidationError):
        await workflow.check_availability()


@pytest.mark.asyncio
async def test_available_extension_carries_backend_pricing(booking_factory):
    booking = booking_factory()
    workflow = _workflow(booking, PricedApi([booking], total="175"))
    workflow.edit(date(2026, 1, 18), time(10, 0))

    session = await workflow.check_availability()

    assert session.step == ExtensionStep.AVAILABLE
    assert session.submitting is False
    assert session.pricing.total_amount == Decimal("175")
    assert workflow.estimated_price == 150
    assert workflow.amount_due == Decimal("175")
    assert workflow.payment_options == [PaymentMethod.CARD_NOW, PaymentMethod.PAY_AT_AGENCY]


@pytest.mark.asyncio
async def test_unavailable_extension_cannot_skip_to_payment(booking_factory):
    booking = booking_factory()
    api = MockPortalApi(bookings=[booking])
    api.block_extensions_after(date(2026, 1, 16))
    workflow = _workflow(booking, api)
    workflow.edit(date(2026, 1, 18), time(10, 0))

    session = await workflow.check_availability()
    assert session.step == ExtensionStep.UNAVAILABLE

    with pytest.raises(InvalidTransitionError):
        workflow.select_payment_method(PaymentMethod.CARD_NOW)
    with pytest.raises(InvalidTransitionError):
        await workflow.confirm()

    session = workflow.choose_other_dates()
    assert session.step == ExtensionStep.FORM
    assert session.new_end_date == date(2026, 1, 18)


@pytest.mark.asyncio
async def test_check_failure_returns_to_form_with_error(booking_factory):
    booking = booking_factory()
    api = MockPortalApi(bookings=[booking])
    api.fail("check_extension", "Vehicle under maintenance")
    workflow = _workflow(booking, api)
    workflow.edit(date(2026, 1, 18), time(10, 0))

    session = await workflow.check_availability()

    assert session.step == ExtensionStep.FORM
    assert session.error == "Vehicle under maintenance"
    assert session.submitting is False
    assert workflow.can_check_availability is True


@pytest.mark.asyncio
async def test_agency_payment_only_when_offered(booking_factory):
    booking = booking_factory(checked_in=True)
    workflow = _workflow(booking, PricedApi([booking], agency=False))
    workflow.edit(date(2026, 1, 18), time(10, 0))
    await workflow.check_availability()

    assert workflow.payment_options == [PaymentMethod.CARD_NOW]
    with pytest.raises(PortalValidationError):
        workflow.select_payment_method(PaymentMethod.PAY_AT_AGENCY)
    assert workflow.session.step == ExtensionStep.AVAILABLE


@pytest.mark.asyncio
async def test_back_from_payment_returns_to_choice(booking_factory):
    booking = booking_factory()
    workflow = _workflow(booking)
    workflow.edit(date(2026, 1, 18), time(10, 0))
    await workflow.check_availability()

    workflow.select_payment_method(PaymentMethod.PAY_AT_AGENCY)
    assert workflow.session.step == ExtensionStep.PAYMENT
    session = workflow.back()
    assert session.step == ExtensionStep.AVAILABLE


@pytest.mark.asyncio
async def test_confirm_failure_stays_on_payment_without_retry(booking_factory):
    booking = booking_factory()
    api = MockPortalApi(bookings=[booking])
    workflow = _workflow(booking, api)
    workflow.edit(date(2026, 1, 18), time(10, 0))
    await workflow.check_availability()
    workflow.select_payment_method(PaymentMethod.CARD_NOW)
    api.fail("confirm_extension", "Card declined")

    session = await workflow.confirm()

    assert session.step == ExtensionStep.PAYMENT
    assert session.error == "Card declined"
    assert session.submitting is False
    assert api.calls.count("confirm_extension") == 1


@pytest.mark.asyncio
async def test_successful_card_extension(booking_factory):
    booking = booking_factory()
    workflow = _workflow(booking)
    workflow.edit(date(2026, 1, 18), time(10, 0))
    await workflow.check_availability()
    workflow.select_payment_method(PaymentMethod.CARD_NOW)

    session = await workflow.confirm()
    assert session.step == ExtensionStep.SUCCESS

    summary = workflow.summary()
    assert summary.new_end_date == date(2026, 1, 18)
    assert summary.total_days == 8
    assert summary.additional_days == 3
    assert summary.total_amount == Decimal("150")
    assert summary.extension_number == 1
    assert summary.paid is True


@pytest.mark.asyncio
async def test_agency_extension_is_pending_payment(booking_factory):
    booking = booking_factory()
    workflow = _workflow(booking)
    workflow.edit(date(2026, 1, 17), time(10, 0))
    await workflow.check_availability()
    workflow.select_payment_method(PaymentMethod.PAY_AT_AGENCY)
    await workflow.confirm()

    summary = workflow.summary()
    assert summary.paid is False
    assert summary.payment_method == PaymentMethod.PAY_AT_AGENCY


@pytest.mark.asyncio
async def test_success_is_terminal(booking_factory):
    booking = booking_factory()
    workflow = _workflow(booking)
    workflow.edit(date(2026, 1, 18), time(10, 0))
    await workflow.check_availability()
    workflow.select_payment_method(PaymentMethod.CARD_NOW)
    await workflow.confirm()

    with pytest.raises(InvalidTransitionError):
        workflow.edit(date(2026, 1, 20), time(10, 0))
    with pytest.raises(InvalidTransitionError):
        await workflow.confirm()


@pytest.mark.asyncio
async def test_second_check_while_in_flight_is_rejected(booking_factory):
    booking = booking_factory()
    api = SlowApi([booking])
    workflow = _workflow(booking, api)
    workflow.edit(date(2026, 1, 18), time(10, 0))

    pending = asyncio.create_task(workflow.check_availability())
    await api.started.wait()

    assert workflow.session.step == ExtensionStep.CHECKING
    assert workflow.session.submitting is True
    assert workflow.can_check_availability is False
    with pytest.raises(InvalidTransitionError):
        await workflow.check_availability()

    api.release.set()
    session = await pending
    assert session.step == ExtensionStep.AVAILABLE
    assert session.submitting is False


@pytest.mark.asyncio
async def test_every_transition_is_published(booking_factory):
    booking = booking_factory()
    published = []
    workflow = _workflow(booking, on_change=published.append)
    workflow.edit(date(2026, 1, 18), time(10, 0))
    await workflow.check_availability()

    steps = [(s.step, s.submitting) for s in published]
    assert steps == [
        (ExtensionStep.FORM, False),
        (ExtensionStep.CHECKING, True),
        (ExtensionStep.AVAILABLE, False),
    ]


@pytest.mark.asyncio
@respx.mock
async def test_available_without_backend_price_returns_to_form(booking_factory):
    respx.post("https://portal.test/api/customer-portal/bookings/42/extend/check").respond(
        200, json={"available": True, "agencyPaymentAvailable": True}
    )
    workflow = _workflow(booking_factory(), HttpPortalApi(base_url="https://portal.test"))
    workflow.edit(date(2026, 1, 18), time(10, 0))

    session = await workflow.check_availability()

    assert session.step == ExtensionStep.FORM
    assert session.pricing is None
    assert session.error
    assert session.submitting is False
    with pytest.raises(InvalidTransitionError):
        workflow.select_payment_method(PaymentMethod.CARD_NOW)


class UnstampedApi(MockPortalApi):
    """Backend whose confirmation carries no payment status."""

    async def confirm_extension(self, booking_id, new_end_date, new_end_time, payment_method):
        extension = await super().confirm_extension(booking_id, new_end_date, new_end_time, payment_method)
        return replace(extension, payment_status=None)


@pytest.mark.asyncio
@pytest.mark.parametrize("method, paid", [(PaymentMethod.CARD_NOW, True), (PaymentMethod.PAY_AT_AGENCY, False)])
async def test_missing_payment_status_follows_payment_method(booking_factory, method, paid):
    booking = booking_factory()
    workflow = _workflow(booking, UnstampedApi([booking]))
    workflow.edit(date(2026, 1, 18), time(10, 0))
    await workflow.check_availability()
    workflow.select_payment_method(method)
    await workflow.confirm()

    assert workflow.summary().paid is paid

from __future__ import annotations

from datetime import time
from decimal import Decimal

from portal.api.v1.schemas import (
    BookingOptionSchema,
    BookingSchema,
    CancellationSchema,
    ContractSchema,
    ExtensionPricingSchema,
    ExtensionRecordSchema,
    ExtensionSessionSchema,
    ExtensionSummarySchema,
    PermissionsSchema,
    ProfileSchema,
)
from portal.application.use_cases.bookings import BookingView
from portal.application.use_cases.extend_booking import ExtensionWorkflow
from portal.application.use_cases.profile import ProfileView
from portal.application.utils.vehicle_names import resolve_vehicle_name
from portal.domain.entities.extension_session import ExtensionStep, PaymentMethod
from portal.infrastructure.i18n.translator import Translator


def _hhmm(value: time) -> str:
    return value.strftime("%H:%M")


def _amount(value: Decimal) -> str:
    # "150", not "150.00".
    if value == value.to_integral_value():
        return str(int(value))
    return f"{value:.2f}"


def booking_schema(view: BookingView, tr: Translator, refund_window_hours: int = 48) -> BookingSchema:
    booking = view.booking
    permissions = view.permissions

    cancellation = None
    if view.cancellation is not None:
        quote = view.cancellation
        key = "cancel.refundable" if quote.refundable else "cancel.nonRefundable"
        message = tr.t(key, amount=_amount(booking.paid_amount), hours=refund_window_hours)
        cancellation = CancellationSchema(
            refundable=quote.refundable,
            refund_amount=quote.refund_amount,
            hours_before_start=round(quote.hours_before_start, 2),
            message=f"{message}\n\n{tr.t('cancel.confirmQuestion')}",
        )

    contract = None
    if booking.contract is not None:
        contract = ContractSchema(
            contract_number=booking.contract.contract_number,
            document_url=booking.contract.document_url,
            current_end_date=booking.contract.current_end_date,
            extensions=[
                ExtensionRecordSchema(
                    extension_number=e.extension_number,
                    additional_days=e.additional_days,
                    total_amount=e.total_amount,
                    payment_status=e.payment_status,
                )
                for e in booking.contract.extensions
            ],
        )

    return BookingSchema(
        id=booking.id,
        reference=booking.reference,
        status=booking.status.value,
        vehicle_name=resolve_vehicle_name(booking.vehicle_name, tr.lang),
        start_date=booking.start_date,
        end_date=booking.end_date,
        start_time=_hhmm(booking.start_time),
        end_time=_hhmm(booking.end_time),
        start_date_display=tr.format_date(booking.start_date),
        end_date_display=tr.format_date(booking.end_date),
        total_price=booking.total_price,
        paid_amount=booking.paid_amount,
        deposit_amount=booking.deposit_amount,
        options=[
            BookingOptionSchema(name=o.name, quantity=o.quantity, total_price=o.total_price)
            for o in booking.options
        ],
        contract=contract,
        permissions=PermissionsSchema(
            effective_status=permissions.effective_status,
            status_label=tr.t(f"status.{permissions.effective_status}"),
            can_modify=permissions.can_modify,
            can_cancel=permissions.can_cancel,
            can_extend=permissions.can_extend,
        ),
        cancellation=cancellation,
    )


def extension_schema(session_id: str, workflow: ExtensionWorkflow, tr: Translator) -> ExtensionSessionSchema:
    session = workflow.session
    end_date, end_time = workflow.current_end
    amount = _amount(workflow.amount_due)

    payment_message = None
    if session.payment_method is not None and session.step == ExtensionStep.PAYMENT:
        key = "extend.payment.card" if session.payment_method == PaymentMethod.CARD_NOW else "extend.payment.agency"
        payment_message = tr.t(key, amount=amount)

    result = None
    if session.step == ExtensionStep.SUCCESS:
        summary = workflow.summary()
        key = "extend.success.card" if summary.payment_method == PaymentMethod.CARD_NOW else "extend.success.agency"
        result = ExtensionSummarySchema(
            new_end_date=summary.new_end_date,
            new_end_time=_hhmm(summary.new_end_time),
            new_end_date_display=tr.format_date(summary.new_end_date),
            total_days=summary.total_days,
            additional_days=summary.additional_days,
            total_amount=summary.total_amount,
            payment_method=summary.payment_method,
            paid=summary.paid,
            extension_number=summary.extension_number,
            message=tr.t(key, amount=_amount(summary.total_amount)),
        )

    return ExtensionSessionSchema(
        session_id=session_id,
        booking_id=session.booking_id,
        step=session.step,
        current_end_date=end_date,
        current_end_time=_hhmm(end_time),
        new_end_date=session.new_end_date,
        new_end_time=_hhmm(session.new_end_time) if session.new_end_time else None,
        original_days=workflow.original_days,
        new_total_days=workflow.new_total_days,
        additional_days=workflow.additional_days,
        can_check_availability=workflow.can_check_availability,
        estimated_price=workflow.estimated_price,
        pricing=(
            ExtensionPricingSchema(
                additional_days=session.pricing.additional_days,
                total_amount=session.pricing.total_amount,
            )
            if session.pricing
            else None
        ),
        amount_due=workflow.amount_due,
        agency_payment_available=session.agency_payment_available,
        payment_options=workflow.payment_options,
        payment_method=session.payment_method,
        payment_message=payment_message,
        error=session.error,
        submitting=session.submitting,
        result=result,
    )


def profile_schema(view: ProfileView, tr: Translator, notice: str | None = None) -> ProfileSchema:
    profile = view.profile
    retention = None
    if profile.last_booking_end_date:
        retention = f"{tr.t('profile.retentionWarning')} {tr.format_date(profile.last_booking_end_date)}."
    return ProfileSchema(
        id=profile.id,
        email=profile.email,
        first_name=profile.first_name,
        last_name=profile.last_name,
        phone=profile.phone,
        address=profile.address,
        postal_code=profile.postal_code,
        city=profile.city,
        country=profile.country,
        language=profile.language,
        last_booking_end_date=profile.last_booking_end_date,
        active_bookings_count=profile.active_bookings_count,
        can_request_deletion=view.can_request_deletion,
        retention_notice=retention,
        notice=notice,
    )

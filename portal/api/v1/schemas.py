from datetime import date, time
from decimal import Decimal

from pydantic import BaseModel, Field

from portal.domain.entities.extension_session import ExtensionStep, PaymentMethod


class LoginRequestSchema(BaseModel):
    email: str


class VerifyCodeRequestSchema(BaseModel):
    email: str
    code: str


class CustomerSchema(BaseModel):
    id: str
    first_name: str
    last_name: str
    email: str


class PermissionsSchema(BaseModel):
    effective_status: str
    status_label: str
    can_modify: bool
    can_cancel: bool
    can_extend: bool


class CancellationSchema(BaseModel):
    refundable: bool
    refund_amount: Decimal
    hours_before_start: float
    message: str


class BookingOptionSchema(BaseModel):
    name: str
    quantity: int
    total_price: Decimal


class ExtensionRecordSchema(BaseModel):
    extension_number: int
    additional_days: int
    total_amount: Decimal
    payment_status: str | None = None


class ContractSchema(BaseModel):
    contract_number: str | None = None
    document_url: str | None = None
    current_end_date: date | None = None
    extensions: list[ExtensionRecordSchema] = Field(default_factory=list)


class BookingSchema(BaseModel):
    id: str
    reference: str
    status: str
    vehicle_name: str
    start_date: date
    end_date: date
    start_time: str
    end_time: str
    start_date_display: str
    end_date_display: str
    total_price: Decimal
    paid_amount: Decimal
    deposit_amount: Decimal
    options: list[BookingOptionSchema] = Field(default_factory=list)
    contract: ContractSchema | None = None
    permissions: PermissionsSchema
    cancellation: CancellationSchema | None = None


class BookingListSchema(BaseModel):
    upcoming: list[BookingSchema]
    past: list[BookingSchema]


class DateRangeSchema(BaseModel):
    start_date: date
    end_date: date
    start_time: time
    end_time: time


class ModificationPreviewSchema(BaseModel):
    original_days: int
    new_days: int
    estimated_price: int
    has_changes: bool
    is_valid: bool


class CancelRequestSchema(BaseModel):
    confirmed: bool = False


class ExtensionDatesSchema(BaseModel):
    new_end_date: date
    new_end_time: time


class PaymentMethodSchema(BaseModel):
    method: PaymentMethod


class ExtensionPricingSchema(BaseModel):
    additional_days: int
    total_amount: Decimal


class ExtensionSummarySchema(BaseModel):
    new_end_date: date
    new_end_time: str
    new_end_date_display: str
    total_days: int
    additional_days: int
    total_amount: Decimal
    payment_method: PaymentMethod
    paid: bool
    extension_number: int
    message: str


class ExtensionSessionSchema(BaseModel):
    session_id: str
    booking_id: str
    step: ExtensionStep
    current_end_date: date
    current_end_time: str
    new_end_date: date | None = None
    new_end_time: str | None = None
    original_days: int
    new_total_days: int
    additional_days: int
    can_check_availability: bool
    estimated_price: int
    pricing: ExtensionPricingSchema | None = None
    amount_due: Decimal
    agency_payment_available: bool
    payment_options: list[PaymentMethod] = Field(default_factory=list)
    payment_method: PaymentMethod | None = None
    payment_message: str | None = None
    error: str | None = None
    submitting: bool = False
    result: ExtensionSummarySchema | None = None


class ProfileSchema(BaseModel):
    id: str
    email: str
    first_name: str
    last_name: str
    phone: str
    address: str
    postal_code: str
    city: str
    country: str
    language: str | None = None
    last_booking_end_date: date | None = None
    active_bookings_count: int
    can_request_deletion: bool
    retention_notice: str | None = None
    notice: str | None = None


class ProfileUpdateSchema(BaseModel):
    first_name: str | None = None
    last_name: str | None = None
    phone: str | None = None
    address: str | None = None
    postal_code: str | None = None
    city: str | None = None
    country: str | None = None
    language: str | None = None


class DeletionRequestSchema(BaseModel):
    confirmed: bool = False


class DeletionResultSchema(BaseModel):
    step: str
    message: str | None = None
    error: str | None = None


class AssistanceSchema(BaseModel):
    message: str
    whatsapp_url: str
    phone_url: str
    phone_display: str

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, time
from decimal import Decimal
from enum import Enum

from portal.domain.entities.booking import ContractExtension


class ExtensionStep(str, Enum):
    FORM = "form"
    CHECKING = "checking"
    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"
    PAYMENT = "payment"
    SUCCESS = "success"


class PaymentMethod(str, Enum):
    CARD_NOW = "stripe"
    PAY_AT_AGENCY = "agency"


@dataclass(frozen=True)
class ExtensionPricing:
    additional_days: int
    total_amount: Decimal


@dataclass(frozen=True)
class ExtensionSession:
    booking_id: str
    step: ExtensionStep = ExtensionStep.FORM
    new_end_date: date | None = None
    new_end_time: time | None = None
    pricing: ExtensionPricing | None = None  # set by the availability check, authoritative
    agency_payment_available: bool = False
    payment_method: PaymentMethod | None = None
    result: ContractExtension | None = None
    error: str | None = None
    submitting: bool = False
    updated_at: float | None = None


@dataclass(frozen=True)
class ExtensionAvailability:
    available: bool
    pricing: ExtensionPricing | None = None
    agency_payment_available: bool = False

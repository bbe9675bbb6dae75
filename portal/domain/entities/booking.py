from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, time
from decimal import Decimal
from enum import Enum


class BookingStatus(str, Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"
    COMPLETED = "COMPLETED"


# Display-only status, derived from check-in flags and never sent by the backend.
IN_PROGRESS = "IN_PROGRESS"

CLOSED_STATUSES = frozenset({BookingStatus.CANCELLED, BookingStatus.COMPLETED})


@dataclass(frozen=True)
class BookingOption:
    name: str
    quantity: int
    total_price: Decimal


@dataclass(frozen=True)
class ContractExtension:
    extension_number: int
    additional_days: int
    total_amount: Decimal
    payment_status: str | None = None  # "PAID" | "PENDING"


@dataclass(frozen=True)
class Contract:
    contract_number: str | None = None
    document_url: str | None = None
    current_end_date: date | None = None
    current_end_time: time | None = None
    extensions: tuple[ContractExtension, ...] = ()


@dataclass(frozen=True)
class Booking:
    id: str
    reference: str
    status: BookingStatus
    start_date: date
    end_date: date
    start_time: time
    end_time: time
    checked_in: bool = False
    checked_out: bool = False
    total_price: Decimal = Decimal("0")
    paid_amount: Decimal = Decimal("0")
    deposit_amount: Decimal = Decimal("0")
    options: tuple[BookingOption, ...] = ()
    contract: Contract | None = None
    vehicle_name: dict[str, str] = field(default_factory=dict)

    @property
    def is_closed(self) -> bool:
        return self.status in CLOSED_STATUSES

from __future__ import annotations

from datetime import date, time
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from portal.application.utils.vehicle_names import normalize_vehicle_name
from portal.domain.entities.booking import (
    Booking,
    BookingOption,
    BookingStatus,
    Contract,
    ContractExtension,
)
from portal.domain.entities.customer import Customer, CustomerProfile
from portal.domain.entities.extension_session import ExtensionAvailability, ExtensionPricing


class _Payload(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class ExtensionDTO(_Payload):
    extension_number: int = Field(alias="extensionNumber")
    additional_days: int = Field(0, alias="additionalDays")
    total_amount: Decimal = Field(Decimal("0"), alias="totalAmount")
    payment_status: str | None = Field(None, alias="paymentStatus")

    def to_entity(self) -> ContractExtension:
        return ContractExtension(
            extension_number=self.extension_number,
            additional_days=self.additional_days,
            total_amount=self.total_amount,
            payment_status=self.payment_status,
        )


class ContractDTO(_Payload):
    contract_number: str | None = Field(None, alias="contractNumber")
    document_url: str | None = Field(None, alias="pdfUrl")
    current_end_date: date | None = Field(None, alias="currentEndDate")
    current_end_time: time | None = Field(None, alias="currentEndTime")
    extensions: list[ExtensionDTO] = Field(default_factory=list)

    def to_entity(self) -> Contract:
        return Contract(
            contract_number=self.contract_number,
            document_url=self.document_url,
            current_end_date=self.current_end_date,
            current_end_time=self.current_end_time,
            extensions=tuple(e.to_entity() for e in self.extensions),
        )


class BookingDTO(_Payload):
    id: str
    reference: str = ""
    status: BookingStatus
    checked_in: bool = Field(False, alias="checkedIn")
    checked_out: bool = Field(False, alias="checkedOut")
    start_date: date = Field(alias="startDate")
    end_date: date = Field(alias="endDate")
    start_time: time = Field(alias="startTime")
    end_time: time = Field(alias="endTime")
    total_price: Decimal = Field(Decimal("0"), alias="totalPrice")
    paid_amount: Decimal = Field(Decimal("0"), alias="paidAmount")
    deposit_amount: Decimal = Field(Decimal("0"), alias="depositAmount")
    options: list[dict[str, Any]] = Field(default_factory=list)
    contract: ContractDTO | None = None
    fleet_vehicle: dict[str, Any] | None = Field(None, alias="fleetVehicle")
    vehicle_name: Any = Field(None, alias="vehicleName")

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value: Any) -> str:
        return str(value)

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def _strip_datetime(cls, value: Any) -> Any:
        # Some endpoints send full ISO timestamps for calendar dates.
        if isinstance(value, str) and "T" in value:
            return value.split("T", 1)[0]
        return value

    def _raw_vehicle_name(self) -> Any:
        if self.vehicle_name is not None:
            return self.vehicle_name
        vehicle = (self.fleet_vehicle or {}).get("vehicle") or {}
        return vehicle.get("name")

    def to_entity(self) -> Booking:
        options: list[BookingOption] = []
        for item in self.options:
            option = item.get("option") or {}
            name = option.get("name") if isinstance(option, dict) else None
            options.append(
                BookingOption(
                    name=str(name or item.get("name") or ""),
                    quantity=int(item.get("quantity") or 0),
                    total_price=Decimal(str(item.get("totalPrice") or 0)),
                )
            )

        return Booking(
            id=self.id,
            reference=self.reference,
            status=self.status,
            start_date=self.start_date,
            end_date=self.end_date,
            start_time=self.start_time,
            end_time=self.end_time,
            checked_in=self.checked_in,
            checked_out=self.checked_out,
            total_price=self.total_price,
            paid_amount=self.paid_amount,
            deposit_amount=self.deposit_amount,
            options=tuple(options),
            contract=self.contract.to_entity() if self.contract else None,
            vehicle_name=normalize_vehicle_name(self._raw_vehicle_name()),
        )


class CustomerDTO(_Payload):
    id: str
    first_name: str = Field("", alias="firstName")
    last_name: str = Field("", alias="lastName")
    email: str = ""

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value: Any) -> str:
        return str(value)

    def to_entity(self) -> Customer:
        return Customer(
            id=self.id,
            first_name=self.first_name,
            last_name=self.last_name,
            email=self.email,
        )


class ProfileDTO(_Payload):
    id: str
    email: str = ""
    first_name: str | None = Field(None, alias="firstName")
    last_name: str | None = Field(None, alias="lastName")
    phone: str | None = None
    address: str | None = None
    postal_code: str | None = Field(None, alias="postalCode")
    city: str | None = None
    country: str | None = None
    language: str | None = None
    last_booking_end_date: date | None = Field(None, alias="lastBookingEndDate")
    active_bookings_count: int = Field(0, alias="activeBookingsCount")

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value: Any) -> str:
        return str(value)

    @field_validator("last_booking_end_date", mode="before")
    @classmethod
    def _strip_datetime(cls, value: Any) -> Any:
        if isinstance(value, str) and "T" in value:
            return value.split("T", 1)[0]
        return value

    def to_entity(self) -> CustomerProfile:
        return CustomerProfile(
            id=self.id,
            email=self.email,
            first_name=self.first_name or "",
            last_name=self.last_name or "",
            phone=self.phone or "",
            address=self.address or "",
            postal_code=self.postal_code or "",
            city=self.city or "",
            country=self.country or "",
            language=self.language,
            last_booking_end_date=self.last_booking_end_date,
            active_bookings_count=self.active_bookings_count,
        )


class PricingDTO(_Payload):
    additional_days: int = Field(0, alias="additionalDays")
    total_amount: Decimal = Field(Decimal("0"), alias="totalAmount")

    def to_entity(self) -> ExtensionPricing:
        return ExtensionPricing(additional_days=self.additional_days, total_amount=self.total_amount)


class ExtensionCheckDTO(_Payload):
    available: bool = False
    pricing: PricingDTO | None = None
    agency_payment_available: bool = Field(False, alias="agencyPaymentAvailable")

    @model_validator(mode="after")
    def _available_needs_pricing(self) -> ExtensionCheckDTO:
        if self.available and self.pricing is None:
            raise ValueError("available extension without pricing")
        return self

    def to_entity(self) -> ExtensionAvailability:
        return ExtensionAvailability(
            available=self.available,
            pricing=self.pricing.to_entity() if self.pricing else None,
            agency_payment_available=self.agency_payment_available,
        )

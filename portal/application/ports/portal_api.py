from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date, time
from typing import Any

from portal.domain.entities.booking import Booking, ContractExtension
from portal.domain.entities.customer import Customer, CustomerProfile
from portal.domain.entities.extension_session import ExtensionAvailability, PaymentMethod


class PortalApiPort(ABC):
    @abstractmethod
    async def request_login_code(self, email: str) -> None:
        """Ask the backend to email a one-time login code."""
        raise NotImplementedError

    @abstractmethod
    async def verify_login_code(self, email: str, code: str) -> Customer:
        raise NotImplementedError

    @abstractmethod
    async def list_bookings(self, customer_id: str) -> list[Booking]:
        raise NotImplementedError

    @abstractmethod
    async def get_booking(self, booking_id: str) -> Booking:
        """Raises PortalNotFoundError when the booking does not exist."""
        raise NotImplementedError

    @abstractmethod
    async def modify_booking(
        self,
        booking_id: str,
        start_date: date,
        end_date: date,
        start_time: time,
        end_time: time,
    ) -> Booking | None:
        raise NotImplementedError

    @abstractmethod
    async def cancel_booking(self, booking_id: str) -> Booking | None:
        raise NotImplementedError

    @abstractmethod
    async def check_extension(self, booking_id: str, new_end_date: date, new_end_time: time) -> ExtensionAvailability:
        raise NotImplementedError

    @abstractmethod
    async def confirm_extension(
        self,
        booking_id: str,
        new_end_date: date,
        new_end_time: time,
        payment_method: PaymentMethod,
    ) -> ContractExtension:
        raise NotImplementedError

    @abstractmethod
    async def get_profile(self, customer_id: str) -> CustomerProfile:
        raise NotImplementedError

    @abstractmethod
    async def update_profile(self, customer_id: str, changes: dict[str, Any]) -> None:
        """Send only the editable fields present in `changes` (camelCase keys)."""
        raise NotImplementedError

    @abstractmethod
    async def request_data_deletion(self, customer_id: str) -> str:
        """Returns the backend's confirmation message."""
        raise NotImplementedError

from __future__ import annotations

import logging
from datetime import date, time
from typing import Any
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from portal.application.dto.portal_payloads import (
    BookingDTO,
    CustomerDTO,
    ExtensionCheckDTO,
    ExtensionDTO,
    ProfileDTO,
)
from portal.application.exceptions import PortalBackendError, PortalNotFoundError
from portal.application.ports.portal_api import PortalApiPort
from portal.core.config import settings
from portal.domain.entities.booking import Booking, ContractExtension
from portal.domain.entities.customer import Customer, CustomerProfile
from portal.domain.entities.extension_session import ExtensionAvailability, PaymentMethod

API_PREFIX = "/api/customer-portal"
FALLBACK_ERROR = "Request failed"

PROFILE_FIELDS = ("firstName", "lastName", "phone", "address", "postalCode", "city", "country", "language")


def _hhmm(value: time) -> str:
    return value.strftime("%H:%M")


class HttpPortalApi(PortalApiPort):
    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        http: httpx.AsyncClient | None = None,
    ) -> None:
        base_url = base_url or settings.PORTAL_API_URL
        if not base_url:
            raise ValueError("PORTAL_API_URL is required for the HTTP portal API")
        self._base_url = base_url.rstrip("/") + API_PREFIX
        self._http = http or httpx.AsyncClient(
            base_url=self._base_url,
            timeout=timeout or settings.PORTAL_API_TIMEOUT,
            headers={"Content-Type": "application/json"},
        )
        self._logger = logging.getLogger(__name__)

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        try:
            response = await self._http.request(method, path, json=json, params=params)
        except httpx.HTTPError as exc:
            self._logger.error("Portal API unreachable", extra={"path": path, "error": str(exc)})
            raise PortalBackendError(str(exc) or FALLBACK_ERROR) from exc

        try:
            data = response.json()
        except ValueError:
            data = None

        if response.status_code >= 400:
            message = FALLBACK_ERROR
            if isinstance(data, dict) and data.get("error"):
                message = str(data["error"])
            self._logger.error(
                "Portal API request failed",
                extra={"status": response.status_code, "path": path, "error": message},
            )
            if response.status_code == 404:
                raise PortalNotFoundError(message, status_code=404)
            raise PortalBackendError(message, status_code=response.status_code)

        return data

    def _parse(self, dto: type, payload: Any) -> Any:
        try:
            return dto.model_validate(payload).to_entity()
        except ValidationError as exc:
            self._logger.error("Unexpected portal API payload", extra={"error": str(exc)})
            raise PortalBackendError("Unexpected response from booking service") from exc

    async def request_login_code(self, email: str) -> None:
        await self._request("POST", "/login", json={"email": email})

    async def verify_login_code(self, email: str, code: str) -> Customer:
        data = await self._request("POST", "/verify-code", json={"email": email, "code": code})
        customer = data.get("customer") if isinstance(data, dict) else None
        if not customer:
            raise PortalBackendError("Unexpected response from booking service")
        return self._parse(CustomerDTO, customer)

    async def list_bookings(self, customer_id: str) -> list[Booking]:
        data = await self._request("GET", "/bookings", params={"customerId": customer_id})
        if isinstance(data, dict):
            data = data.get("bookings", [])
        return [self._parse(BookingDTO, item) for item in data or []]

    async def get_booking(self, booking_id: str) -> Booking:
        data = await self._request("GET", f"/bookings/{quote(str(booking_id), safe='')}")
        if not data:
            raise PortalNotFoundError("Booking not found", status_code=404)
        return self._parse(BookingDTO, data)

    async def modify_booking(
        self,
        booking_id: str,
        start_date: date,
        end_date: date,
        start_time: time,
        end_time: time,
    ) -> Booking | None:
        payload = {
            "startDate": start_date.isoformat(),
            "endDate": end_date.isoformat(),
            "startTime": _hhmm(start_time),
            "endTime": _hhmm(end_time),
        }
        data = await self._request("PUT", f"/bookings/{quote(str(booking_id), safe='')}/modify", json=payload)
        return self._parse_optional_booking(data)

    async def cancel_booking(self, booking_id: str) -> Booking | None:
        data = await self._request("PUT", f"/bookings/{quote(str(booking_id), safe='')}/cancel")
        return self._parse_optional_booking(data)

    def _parse_optional_booking(self, data: Any) -> Booking | None:
        # Mutations may echo the booking, wrap it, or return nothing useful.
        if isinstance(data, dict) and isinstance(data.get("booking"), dict):
            data = data["booking"]
        if isinstance(data, dict) and "status" in data and "startDate" in data:
            return self._parse(BookingDTO, data)
        return None

    async def check_extension(self, booking_id: str, new_end_date: date, new_end_time: time) -> ExtensionAvailability:
        data = await self._request(
            "POST",
            f"/bookings/{quote(str(booking_id), safe='')}/extend/check",
            json={"newEndDate": new_end_date.isoformat(), "newEndTime": _hhmm(new_end_time)},
        )
        return self._parse(ExtensionCheckDTO, data or {})

    async def confirm_extension(
        self,
        booking_id: str,
        new_end_date: date,
        new_end_time: time,
        payment_method: PaymentMethod,
    ) -> ContractExtension:
        data = await self._request(
            "POST",
            f"/bookings/{quote(str(booking_id), safe='')}/extend/confirm",
            json={
                "newEndDate": new_end_date.isoformat(),
                "newEndTime": _hhmm(new_end_time),
                "paymentMethod": payment_method.value,
            },
        )
        extension = data.get("extension") if isinstance(data, dict) else None
        if not extension:
            raise PortalBackendError("Unexpected response from booking service")
        return self._parse(ExtensionDTO, extension)

    async def get_profile(self, customer_id: str) -> CustomerProfile:
        data = await self._request("GET", f"/profile/{quote(str(customer_id), safe='')}")
        if not data:
            raise PortalNotFoundError("Profile not found", status_code=404)
        return self._parse(ProfileDTO, data)

    async def update_profile(self, customer_id: str, changes: dict[str, Any]) -> None:
        payload = {key: value for key, value in changes.items() if key in PROFILE_FIELDS}
        await self._request("PUT", f"/profile/{quote(str(customer_id), safe='')}", json=payload)

    async def request_data_deletion(self, customer_id: str) -> str:
        data = await self._request("POST", f"/profile/{quote(str(customer_id), safe='')}/delete-request")
        if isinstance(data, dict):
            return str(data.get("message") or "")
        return ""

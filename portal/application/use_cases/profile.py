from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any

from portal.application.exceptions import PortalBackendError, PortalValidationError
from portal.application.ports.portal_api import PortalApiPort
from portal.domain.entities.customer import CustomerProfile

EDITABLE_FIELDS = ("firstName", "lastName", "phone", "address", "postalCode", "city", "country", "language")


class DeletionStep(str, Enum):
    IDLE = "idle"
    CONFIRM = "confirm"
    DONE = "done"


@dataclass(frozen=True)
class ProfileView:
    profile: CustomerProfile
    can_request_deletion: bool


class DataDeletionFlow:
    """idle -> confirm -> done; a failed request drops back to idle with the error."""

    def __init__(self, api: PortalApiPort, profile: CustomerProfile) -> None:
        self._api = api
        self._profile = profile
        self.step = DeletionStep.IDLE
        self.error: str | None = None
        self.message: str | None = None
        self.submitting = False
        self._logger = logging.getLogger(__name__)

    @property
    def can_request(self) -> bool:
        return self._profile.active_bookings_count == 0

    def start(self) -> None:
        if self.step != DeletionStep.IDLE:
            return
        if not self.can_request:
            raise PortalValidationError(
                "Data deletion is not possible while bookings are active",
                code="profile.activeBookings",
            )
        self.error = None
        self.step = DeletionStep.CONFIRM

    def abort(self) -> None:
        if self.step == DeletionStep.CONFIRM:
            self.step = DeletionStep.IDLE

    async def confirm(self) -> DeletionStep:
        if self.step != DeletionStep.CONFIRM or self.submitting:
            return self.step
        self.submitting = True
        try:
            self.message = await self._api.request_data_deletion(self._profile.id)
            self.step = DeletionStep.DONE
            self._logger.info("Data deletion requested", extra={"customer_id": self._profile.id})
        except PortalBackendError as exc:
            self.error = exc.message
            self.step = DeletionStep.IDLE
        finally:
            self.submitting = False
        return self.step


class ProfileUseCase:
    def __init__(self, api: PortalApiPort) -> None:
        self._api = api
        self._logger = logging.getLogger(__name__)

    async def get_profile(self, customer_id: str) -> ProfileView:
        profile = await self._api.get_profile(customer_id)
        return ProfileView(profile=profile, can_request_deletion=profile.active_bookings_count == 0)

    async def update_profile(self, customer_id: str, changes: dict[str, Any]) -> ProfileView:
        payload = {key: value for key, value in changes.items() if key in EDITABLE_FIELDS and value is not None}
        await self._api.update_profile(customer_id, payload)
        self._logger.info("Profile updated", extra={"customer_id": customer_id})
        return await self.get_profile(customer_id)

    async def request_deletion(self, customer_id: str, confirmed: bool) -> DataDeletionFlow:
        view = await self.get_profile(customer_id)
        flow = DataDeletionFlow(self._api, view.profile)
        flow.start()
        if not confirmed:
            return flow
        await flow.confirm()
        return flow

from __future__ import annotations

import logging
import re

from portal.application.exceptions import PortalValidationError
from portal.application.ports.portal_api import PortalApiPort
from portal.domain.entities.customer import Customer

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
CODE_RE = re.compile(r"^[0-9]{6}$")


class LoginUseCase:
    def __init__(self, api: PortalApiPort) -> None:
        self._api = api
        self._logger = logging.getLogger(__name__)

    async def request_code(self, email: str) -> None:
        email = (email or "").strip()
        if not EMAIL_RE.match(email):
            raise PortalValidationError("Invalid email address", code="login.invalidEmail")
        await self._api.request_login_code(email)
        self._logger.info("Login code requested")

    async def verify_code(self, email: str, code: str) -> Customer:
        email = (email or "").strip()
        code = (code or "").strip()
        if not EMAIL_RE.match(email):
            raise PortalValidationError("Invalid email address", code="login.invalidEmail")
        if not CODE_RE.match(code):
            raise PortalValidationError("The code must have 6 digits", code="login.invalidCode")
        customer = await self._api.verify_login_code(email, code)
        self._logger.info("Customer logged in", extra={"customer_id": customer.id})
        return customer

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from portal.application.exceptions import (
    InvalidTransitionError,
    PortalBackendError,
    PortalNotFoundError,
    PortalValidationError,
)
from portal.core.config import settings
from portal.infrastructure.i18n.translator import Translator, select_language

logger = logging.getLogger(__name__)


def _translator(request: Request) -> Translator:
    return Translator(
        select_language(
            request.query_params.get("lang"),
            request.headers.get("accept-language"),
            supported=settings.supported_languages,
            default=settings.DEFAULT_LANGUAGE,
        )
    )


def _error(status_code: int, detail: str, code: str | None = None) -> JSONResponse:
    body: dict[str, str] = {"detail": detail}
    if code:
        body["code"] = code
    return JSONResponse(body, status_code=status_code)


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(PortalValidationError)
    async def validation_error_handler(request: Request, exc: PortalValidationError) -> JSONResponse:
        detail = _translator(request).t(exc.code) if exc.code else exc.message
        return _error(422, detail, exc.code)

    @app.exception_handler(PortalNotFoundError)
    async def not_found_handler(request: Request, exc: PortalNotFoundError) -> JSONResponse:
        key = "profile.notFound" if "/profile" in request.url.path else "booking.notFound"
        return _error(404, _translator(request).t(key), "notFound")

    @app.exception_handler(InvalidTransitionError)
    async def invalid_transition_handler(request: Request, exc: InvalidTransitionError) -> JSONResponse:
        return _error(409, str(exc), "invalidTransition")

    @app.exception_handler(PortalBackendError)
    async def backend_error_handler(request: Request, exc: PortalBackendError) -> JSONResponse:
        logger.warning("Backend error surfaced", extra={"status": exc.status_code, "error": exc.message})
        return _error(502, exc.message, "backend")

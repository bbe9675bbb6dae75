from functools import lru_cache
import logging
from zoneinfo import ZoneInfo

from fastapi import Depends, Header, Query

from portal.core.config import settings
from portal.application.ports.portal_api import PortalApiPort
from portal.application.ports.session_store import ExtensionSessionStorePort
from portal.application.use_cases.bookings import BookingsUseCase
from portal.application.use_cases.login import LoginUseCase
from portal.application.use_cases.modify_booking import ModifyBookingUseCase
from portal.application.use_cases.profile import ProfileUseCase
from portal.infrastructure.i18n.translator import Translator, select_language
from portal.infrastructure.portal_api.http_client import HttpPortalApi
from portal.infrastructure.portal_api.mock_api import MockPortalApi
from portal.infrastructure.store.memory_store import MemoryExtensionSessionStore


logger = logging.getLogger(__name__)


@lru_cache
def get_portal_api() -> PortalApiPort:
    if not settings.PORTAL_API_URL:
        if settings.ENV.lower() in {"dev", "local"}:
            logger.info("Using MockPortalApi (PORTAL_API_URL missing, ENV=dev/local)")
            return MockPortalApi()
        raise ValueError("PORTAL_API_URL is required outside dev/local.")
    logger.info("Using HttpPortalApi", extra={"base_url": settings.PORTAL_API_URL})
    return HttpPortalApi()


@lru_cache
def get_session_store() -> ExtensionSessionStorePort:
    return MemoryExtensionSessionStore()


def get_timezone() -> ZoneInfo:
    return ZoneInfo(settings.BUSINESS_TIMEZONE)


def get_translator(
    lang: str | None = Query(None),
    accept_language: str | None = Header(None),
) -> Translator:
    return Translator(
        select_language(
            lang,
            accept_language,
            supported=settings.supported_languages,
            default=settings.DEFAULT_LANGUAGE,
        )
    )


def get_login_use_case(api: PortalApiPort = Depends(get_portal_api)) -> LoginUseCase:
    return LoginUseCase(api=api)


def get_bookings_use_case(api: PortalApiPort = Depends(get_portal_api)) -> BookingsUseCase:
    return BookingsUseCase(
        api=api,
        timezone=get_timezone(),
        refund_window_hours=settings.REFUND_WINDOW_HOURS,
    )


def get_modify_booking_use_case(
    api: PortalApiPort = Depends(get_portal_api),
    bookings: BookingsUseCase = Depends(get_bookings_use_case),
) -> ModifyBookingUseCase:
    return ModifyBookingUseCase(api=api, bookings=bookings)


def get_profile_use_case(api: PortalApiPort = Depends(get_portal_api)) -> ProfileUseCase:
    return ProfileUseCase(api=api)

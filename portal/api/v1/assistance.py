from fastapi import APIRouter, Depends, Query

from portal.api.v1.schemas import AssistanceSchema
from portal.application.ports.portal_api import PortalApiPort
from portal.application.utils.assistance import build_links, build_message, maps_link
from portal.core.config import settings
from portal.infrastructure.i18n.translator import Translator
from portal.wiring.dependencies import get_portal_api, get_translator

router = APIRouter()


@router.get("/assistance", response_model=AssistanceSchema)
async def assistance_links(
    customer_name: str | None = Query(None, alias="customerName"),
    customer_email: str | None = Query(None, alias="customerEmail"),
    booking_id: str | None = Query(None, alias="bookingId"),
    latitude: float | None = None,
    longitude: float | None = None,
    api: PortalApiPort = Depends(get_portal_api),
    tr: Translator = Depends(get_translator),
):
    booking = await api.get_booking(booking_id) if booking_id else None
    location = maps_link(latitude, longitude) if latitude is not None and longitude is not None else None
    message = build_message(customer_name, customer_email, booking, location, locale=tr.lang)
    links = build_links(settings.ASSISTANCE_PHONE, message)
    return AssistanceSchema(
        message=links.message,
        whatsapp_url=links.whatsapp_url,
        phone_url=links.phone_url,
        phone_display=settings.ASSISTANCE_PHONE_DISPLAY,
    )

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import quote

from portal.application.utils.vehicle_names import resolve_vehicle_name
from portal.domain.entities.booking import Booking

# Same unescaped set as encodeURIComponent.
URI_COMPONENT_SAFE = "!~*'()"


@dataclass(frozen=True)
class AssistanceLinks:
    message: str
    whatsapp_url: str
    phone_url: str


def maps_link(latitude: float, longitude: float) -> str:
    return f"https://maps.google.com/maps?q={latitude},{longitude}"


def build_message(
    customer_name: str | None = None,
    customer_email: str | None = None,
    booking: Booking | None = None,
    location: str | None = None,
    locale: str = "es",
) -> str:
    msg = "*ASISTENCIA SOLICITADA*\n\n"
    if customer_name:
        msg += f"Cliente: {customer_name}\n"
    if customer_email:
        msg += f"Email: {customer_email}\n"
    if booking:
        msg += f"\n*Vehiculo:* {resolve_vehicle_name(booking.vehicle_name, locale)}\n"
        msg += f"Ref: {booking.reference}\n"
        msg += (
            f"{booking.start_date.isoformat()} {booking.start_time.strftime('%H:%M')} → "
            f"{booking.end_date.isoformat()} {booking.end_time.strftime('%H:%M')}\n"
        )
    if location:
        msg += f"\n*Ubicacion:* {location}\n"
    return msg


def whatsapp_url(phone: str, message: str) -> str:
    digits = phone.replace("+", "").replace(" ", "")
    return f"https://wa.me/{digits}?text={quote(message, safe=URI_COMPONENT_SAFE)}"


def phone_url(phone: str) -> str:
    return f"tel:{phone.replace(' ', '')}"


def build_links(phone: str, message: str) -> AssistanceLinks:
    return AssistanceLinks(message=message, whatsapp_url=whatsapp_url(phone, message), phone_url=phone_url(phone))

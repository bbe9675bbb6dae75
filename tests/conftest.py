from __future__ import annotations

from dataclasses import replace
from datetime import date, time
from decimal import Decimal
from zoneinfo import ZoneInfo

import pytest

from portal.domain.entities.booking import Booking, BookingStatus

MADRID = ZoneInfo("Europe/Madrid")


def make_booking(**overrides) -> Booking:
    booking = Booking(
        id="42",
        reference="VR-2026-0042",
        status=BookingStatus.CONFIRMED,
        start_date=date(2026, 1, 10),
        end_date=date(2026, 1, 15),
        start_time=time(10, 0),
        end_time=time(10, 0),
        total_price=Decimal("250"),
        paid_amount=Decimal("75"),
        deposit_amount=Decimal("100"),
        vehicle_name={"es": "Scooter eléctrico", "en": "Electric scooter"},
    )
    return replace(booking, **overrides)


@pytest.fixture
def booking_factory():
    return make_booking


@pytest.fixture
def madrid() -> ZoneInfo:
    return MADRID

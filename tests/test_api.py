import asyncio
from datetime import date, timedelta

import httpx
import pytest
from fastapi.testclient import TestClient

from portal.domain.entities.booking import BookingStatus
from portal.infrastructure.portal_api.mock_api import MockPortalApi
from portal.infrastructure.store.memory_store import MemoryExtensionSessionStore
from portal.main import app
from portal.wiring.dependencies import get_portal_api, get_session_store

from conftest import make_booking

TODAY = date.today()


@pytest.fixture
def api():
    return MockPortalApi(today=TODAY)


@pytest.fixture
def client(api):
    store = MemoryExtensionSessionStore()
    app.dependency_overrides[get_portal_api] = lambda: api
    app.dependency_overrides[get_session_store] = lambda: store
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


# --- auth ------------------------------------------------------------------


def test_login_and_verify(client):
    assert client.post("/api/v1/login", json={"email": "ana@example.com"}).status_code == 204

    res = client.post("/api/v1/verify-code", json={"email": "ana@example.com", "code": "123456"})
    assert res.status_code == 200
    assert res.json()["id"] == "1"


def test_login_invalid_email_is_translated(client):
    res = client.post("/api/v1/login?lang=en", json={"email": "nope"})
    assert res.status_code == 422
    assert res.json() == {"detail": "Enter a valid email", "code": "login.invalidEmail"}


def test_verify_backend_error_is_502(client):
    res = client.post("/api/v1/verify-code", json={"email": "ana@example.com", "code": "123456"})
    assert res.status_code == 502
    assert res.json()["detail"] == "Invalid or expired code"


# --- bookings --------------------------------------------------------------


def test_list_bookings(client):
    res = client.get("/api/v1/bookings", params={"customerId": "1", "lang": "en"})
    assert res.status_code == 200
    data = res.json()

    assert [b["id"] for b in data["upcoming"]] == ["2", "1"]
    assert [b["id"] for b in data["past"]] == ["3"]
    in_progress = data["upcoming"][0]["permissions"]
    assert in_progress["effective_status"] == "IN_PROGRESS"
    assert in_progress["status_label"] == "In progress"
    assert in_progress["can_cancel"] is False
    assert in_progress["can_extend"] is True


def test_booking_detail(client):
    res = client.get("/api/v1/bookings/1", params={"lang": "en"})
    assert res.status_code == 200
    data = res.json()

    start = TODAY + timedelta(days=5)
    assert data["vehicle_name"] == "Electric scooter"
    assert data["start_date_display"] == start.strftime("%d/%m/%Y")
    assert data["start_time"] == "10:00"
    assert data["permissions"]["status_label"] == "Confirmed"
    assert data["cancellation"]["refundable"] is True
    assert "€45" in data["cancellation"]["message"]
    assert data["cancellation"]["message"].endswith("Confirm cancellation?")


def test_booking_detail_uses_accept_language(client):
    res = client.get("/api/v1/bookings/1", headers={"Accept-Language": "fr-FR,fr;q=0.9"})
    assert res.json()["vehicle_name"] == "Scooter électrique"


def test_missing_booking_is_404(client):
    res = client.get("/api/v1/bookings/999", params={"lang": "en"})
    assert res.status_code == 404
    assert res.json() == {"detail": "Booking not found", "code": "notFound"}


def test_cancel_requires_confirmation(client, api):
    res = client.post("/api/v1/bookings/1/cancel?lang=en", json={})
    assert res.status_code == 422
    assert res.json()["code"] == "cancel.confirmationRequired"
    assert "cancel_booking" not in api.calls


def test_cancel_confirmed(client):
    res = client.post("/api/v1/bookings/1/cancel", json={"confirmed": True})
    assert res.status_code == 200
    data = res.json()
    assert data["status"] == "CANCELLED"
    assert data["permissions"]["can_cancel"] is False
    assert data["cancellation"] is None


def test_cancel_in_progress_booking_is_rejected(client):
    res = client.post("/api/v1/bookings/2/cancel", json={"confirmed": True})
    assert res.status_code == 422
    assert res.json()["code"] == "cancel.notAllowed"


def test_modification_estimate(client):
    body = {
        "start_date": (TODAY + timedelta(days=5)).isoformat(),
        "end_date": (TODAY + timedelta(days=9)).isoformat(),
        "start_time": "10:00",
        "end_time": "10:00",
    }
    res = client.post("/api/v1/bookings/1/modify/estimate", json=body)
    assert res.status_code == 200
    assert res.json() == {
        "original_days": 3,
        "new_days": 4,
        "estimated_price": 200,
        "has_changes": True,
        "is_valid": True,
    }


def test_modify_booking(client):
    body = {
        "start_date": (TODAY + timedelta(days=5)).isoformat(),
        "end_date": (TODAY + timedelta(days=9)).isoformat(),
        "start_time": "10:00",
        "end_time": "12:00",
    }
    res = client.put("/api/v1/bookings/1/modify", json=body)
    assert res.status_code == 200
    assert res.json()["end_time"] == "12:00"
    assert res.json()["end_date"] == body["end_date"]


# --- extensions ------------------------------------------------------------


def test_extension_flow(client):
    res = client.post("/api/v1/bookings/2/extensions?lang=en")
    assert res.status_code == 201
    session = res.json()
    sid = session["session_id"]
    assert session["step"] == "form"
    assert session["current_end_time"] == "18:00"
    assert session["can_check_availability"] is False

    new_end = TODAY + timedelta(days=4)
    res = client.put(f"/api/v1/extensions/{sid}/dates", json={"new_end_date": new_end.isoformat(), "new_end_time": "18:00"})
    session = res.json()
    assert session["additional_days"] == 2
    assert session["estimated_price"] == 60
    assert session["can_check_availability"] is True

    session = client.post(f"/api/v1/extensions/{sid}/check").json()
    assert session["step"] == "available"
    assert session["agency_payment_available"] is False
    assert session["payment_options"] == ["stripe"]

    res = client.post(f"/api/v1/extensions/{sid}/payment-method", json={"method": "agency"})
    assert res.status_code == 422
    assert res.json()["code"] == "extend.agencyUnavailable"

    session = client.post(f"/api/v1/extensions/{sid}/payment-method?lang=en", json={"method": "stripe"}).json()
    assert session["step"] == "payment"
    assert session["payment_message"] == "Your card will be charged €60 now."

    session = client.post(f"/api/v1/extensions/{sid}/confirm?lang=en").json()
    assert session["step"] == "success"
    assert session["submitting"] is False
    assert session["result"]["paid"] is True
    assert session["result"]["extension_number"] == 1
    assert session["result"]["new_end_date_display"] == new_end.strftime("%d/%m/%Y")
    assert session["result"]["message"] == "Your payment of €60 has been processed."

    assert client.get(f"/api/v1/extensions/{sid}").json()["step"] == "success"


def test_extension_unavailable_then_other_dates(client, api):
    api.block_extensions_after(TODAY + timedelta(days=9))
    sid = client.post("/api/v1/bookings/1/extensions").json()["session_id"]
    new_end = TODAY + timedelta(days=12)
    client.put(f"/api/v1/extensions/{sid}/dates", json={"new_end_date": new_end.isoformat(), "new_end_time": "10:00"})

    assert client.post(f"/api/v1/extensions/{sid}/check").json()["step"] == "unavailable"

    res = client.post(f"/api/v1/extensions/{sid}/payment-method", json={"method": "stripe"})
    assert res.status_code == 409
    assert res.json()["code"] == "invalidTransition"

    session = client.post(f"/api/v1/extensions/{sid}/other-dates").json()
    assert session["step"] == "form"
    assert session["new_end_date"] == new_end.isoformat()


def test_extension_confirm_failure_stays_on_payment(client, api):
    sid = client.post("/api/v1/bookings/1/extensions").json()["session_id"]
    new_end = TODAY + timedelta(days=10)
    client.put(f"/api/v1/extensions/{sid}/dates", json={"new_end_date": new_end.isoformat(), "new_end_time": "10:00"})
    client.post(f"/api/v1/extensions/{sid}/check")
    client.post(f"/api/v1/extensions/{sid}/payment-method", json={"method": "agency"})
    api.fail("confirm_extension", "Card declined")

    session = client.post(f"/api/v1/extensions/{sid}/confirm").json()
    assert session["step"] == "payment"
    assert session["error"] == "Card declined"
    assert session["submitting"] is False

    assert client.post(f"/api/v1/extensions/{sid}/back").json()["step"] == "available"


def test_extension_not_allowed_for_completed_booking(client):
    res = client.post("/api/v1/bookings/3/extensions")
    assert res.status_code == 422
    assert res.json()["code"] == "extend.notAllowed"


def test_discarded_extension_is_gone(client):
    sid = client.post("/api/v1/bookings/1/extensions").json()["session_id"]
    assert client.delete(f"/api/v1/extensions/{sid}").status_code == 204
    assert client.get(f"/api/v1/extensions/{sid}").status_code == 404


# --- profile ---------------------------------------------------------------


def test_profile(client):
    res = client.get("/api/v1/profile/1", params={"lang": "en"})
    assert res.status_code == 200
    data = res.json()
    assert data["active_bookings_count"] == 2
    assert data["can_request_deletion"] is False
    assert data["retention_notice"].startswith("Your data will be kept until")


def test_missing_profile_is_404(client):
    res = client.get("/api/v1/profile/99", params={"lang": "en"})
    assert res.status_code == 404
    assert res.json()["detail"] == "Profile not found"


def test_update_profile(client):
    res = client.put("/api/v1/profile/1", json={"city": "Valencia", "postal_code": "46001"})
    assert res.status_code == 200
    data = res.json()
    assert data["city"] == "Valencia"
    assert data["postal_code"] == "46001"
    assert data["notice"] == "Perfil actualizado"


def test_deletion_blocked_by_active_bookings(client):
    res = client.post("/api/v1/profile/1/delete-request", json={"confirmed": True})
    assert res.status_code == 422
    assert res.json()["code"] == "profile.activeBookings"


class TestDeletionWithoutActiveBookings:
    @pytest.fixture
    def api(self):
        return MockPortalApi(bookings=[make_booking(id="7", status=BookingStatus.COMPLETED)])

    def test_deletion_needs_confirmation(self, client, api):
        res = client.post("/api/v1/profile/1/delete-request", json={})
        assert res.status_code == 200
        assert res.json()["step"] == "confirm"
        assert "request_data_deletion" not in api.calls

    def test_deletion_confirmed(self, client):
        res = client.post("/api/v1/profile/1/delete-request", json={"confirmed": True})
        assert res.status_code == 200
        assert res.json() == {"step": "done", "message": "Deletion request registered", "error": None}

    def test_deletion_failure_is_reported(self, client, api):
        api.fail("request_data_deletion", "Service unavailable")
        res = client.post("/api/v1/profile/1/delete-request", json={"confirmed": True})
        assert res.json() == {"step": "idle", "message": None, "error": "Service unavailable"}


# --- assistance ------------------------------------------------------------


def test_assistance_links(client):
    res = client.get(
        "/api/v1/assistance",
        params={"customerName": "Juan García", "bookingId": "1", "latitude": 39.47, "longitude": -0.376},
    )
    assert res.status_code == 200
    data = res.json()
    assert "Cliente: Juan García" in data["message"]
    assert "Ref: VR-2026-0001" in data["message"]
    assert "https://maps.google.com/maps?q=39.47,-0.376" in data["message"]
    assert data["whatsapp_url"].startswith("https://wa.me/34655489614?text=")
    assert data["phone_url"] == "tel:+34655489614"
    assert data["phone_display"] == "655 489 614"


class HeldCheckApi(MockPortalApi):
    """Holds every availability check until released."""

    def __init__(self) -> None:
        super().__init__(today=TODAY)
        self.started = asyncio.Event()
        self.release = asyncio.Event()

    async def check_extension(self, booking_id, new_end_date, new_end_time):
        self.started.set()
        await self.release.wait()
        return await super().check_extension(booking_id, new_end_date, new_end_time)


@pytest.mark.asyncio
async def test_session_cannot_change_while_check_is_in_flight():
    api = HeldCheckApi()
    store = MemoryExtensionSessionStore()
    app.dependency_overrides[get_portal_api] = lambda: api
    app.dependency_overrides[get_session_store] = lambda: store
    try:
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://portal.test") as client:
            sid = (await client.post("/api/v1/bookings/1/extensions")).json()["session_id"]
            dates = {"new_end_date": (TODAY + timedelta(days=10)).isoformat(), "new_end_time": "10:00"}
            await client.put(f"/api/v1/extensions/{sid}/dates", json=dates)

            pending = asyncio.create_task(client.post(f"/api/v1/extensions/{sid}/check"))
            await api.started.wait()

            res = await client.put(f"/api/v1/extensions/{sid}/dates", json=dates)
            assert res.status_code == 409
            res = await client.post(f"/api/v1/extensions/{sid}/check")
            assert res.status_code == 409
            assert (await client.get(f"/api/v1/extensions/{sid}")).json()["submitting"] is True

            api.release.set()
            session = (await pending).json()
            assert session["step"] == "available"
            assert session["submitting"] is False
    finally:
        app.dependency_overrides.clear()

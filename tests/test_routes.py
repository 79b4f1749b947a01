"""
Route-level tests: full booking workflow over HTTP and error mapping.
"""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from expert_booking.application.use_cases.browse_experts import BrowseExpertsUseCase
from expert_booking.application.use_cases.manage_bookings import ManageBookingsUseCase
from expert_booking.application.use_cases.sync_booking_events import SyncBookingEventsUseCase
from expert_booking.application.use_cases.workflows import WorkflowService
from expert_booking.infrastructure.api.mock_auth_api import MockAuthApi
from expert_booking.infrastructure.api.mock_data import MOCK_USER_EMAIL, MOCK_USER_PASSWORD
from expert_booking.infrastructure.events.memory_event_bus import MemoryEventBus
from expert_booking.infrastructure.store.memory_session_store import MemorySessionRegistry
from expert_booking.infrastructure.store.memory_workflow_store import MemoryWorkflowStore
from expert_booking.main import app
from expert_booking.wiring import dependencies


@pytest.fixture
def client(api, today):
    store = MemoryWorkflowStore()
    bus = MemoryEventBus()
    SyncBookingEventsUseCase(store=store).attach(bus)
    browse = BrowseExpertsUseCase(api=api)
    browse.attach(bus)
    registry = MemorySessionRegistry()

    app.dependency_overrides[dependencies.get_workflow_service] = lambda: WorkflowService(
        api=api, store=store, today=lambda: today
    )
    app.dependency_overrides[dependencies.get_event_bus] = lambda: bus
    app.dependency_overrides[dependencies.get_manage_bookings_use_case] = lambda: ManageBookingsUseCase(api=api)
    app.dependency_overrides[dependencies.get_browse_experts_use_case] = lambda: browse
    app.dependency_overrides[dependencies.get_auth_api] = MockAuthApi
    app.dependency_overrides[dependencies.get_session_registry] = lambda: registry
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def _start(client: TestClient) -> str:
    response = client.post("/workflows", json={"expert_id": "exp-1"})
    assert response.status_code == 201
    return response.json()["id"]


def _to_payment(client: TestClient, workflow_id: str, day) -> dict:
    client.post(f"/workflows/{workflow_id}/service", json={"service_id": "consult"})
    slots = client.post(f"/workflows/{workflow_id}/date", json={"date": day.isoformat()}).json()["slots"]
    client.post(f"/workflows/{workflow_id}/slot", json={"slot_id": slots[0]["id"]})
    response = client.post(
        f"/workflows/{workflow_id}/details",
        json={"participant_count": 2, "location": "online", "notes": "Agenda attached"},
    )
    assert response.status_code == 200
    return response.json()


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_booking_flow_over_http(client, api, monday):
    workflow_id = _start(client)

    body = client.post(f"/workflows/{workflow_id}/service", json={"service_id": "consult"}).json()
    assert body["step"] == "date"
    assert body["action"] == "ask_date"

    body = client.post(f"/workflows/{workflow_id}/date", json={"date": monday.isoformat()}).json()
    assert body["action"] == "suggest_slots"
    assert [s["id"] for s in body["slots"]][:2] == [
        f"{monday.isoformat()}-09-00",
        f"{monday.isoformat()}-10-15",
    ]

    body = client.post(f"/workflows/{workflow_id}/slot", json={"slot_id": body["slots"][0]["id"]}).json()
    assert body["step"] == "details"

    body = client.post(
        f"/workflows/{workflow_id}/details",
        json={"participant_count": 2, "location": "in-person"},
    ).json()
    assert body["step"] == "payment"
    assert body["draft"]["location"] == "in-person"

    body = client.post(f"/workflows/{workflow_id}/payment").json()
    assert body["step"] == "confirmation"
    assert body["booking"]["status"] == "pending"
    assert body["draft"] is None
    assert len(api.create_calls) == 1

    assert client.get(f"/workflows/{workflow_id}").json()["booking"]["id"] == body["booking"]["id"]


def test_empty_day_reports_message(client, sunday):
    workflow_id = _start(client)
    client.post(f"/workflows/{workflow_id}/service", json={"service_id": "consult"})

    body = client.post(f"/workflows/{workflow_id}/date", json={"date": sunday.isoformat()}).json()

    assert body["action"] == "no_slots"
    assert body["message"]
    assert body["slots"] == []
    assert body["step"] == "date"


def test_guard_failure_maps_to_400(client):
    workflow_id = _start(client)

    response = client.post(f"/workflows/{workflow_id}/service", json={"service_id": "nope"})

    assert response.status_code == 400
    assert client.get(f"/workflows/{workflow_id}").json()["step"] == "service"


def test_wrong_step_maps_to_409(client):
    workflow_id = _start(client)

    assert client.post(f"/workflows/{workflow_id}/payment").status_code == 409
    assert client.post(f"/workflows/{workflow_id}/back").status_code == 409


def test_unknown_workflow_maps_to_404(client):
    assert client.get("/workflows/does-not-exist").status_code == 404


def test_unknown_expert_maps_to_404(client):
    assert client.post("/workflows", json={"expert_id": "ghost"}).status_code == 404


def test_upstream_failure_maps_to_502_and_keeps_draft(client, api, monday):
    workflow_id = _start(client)
    _to_payment(client, workflow_id, monday)
    api.failures = 1

    response = client.post(f"/workflows/{workflow_id}/payment")
    assert response.status_code == 502
    assert response.json()["detail"] == "Service unavailable"

    body = client.get(f"/workflows/{workflow_id}").json()
    assert body["step"] == "payment"
    assert body["draft"]["participant_count"] == 2
    assert body["last_error"] == "Service unavailable"

    assert client.post(f"/workflows/{workflow_id}/payment").json()["step"] == "confirmation"


def test_closed_workflow_is_gone(client):
    workflow_id = _start(client)

    assert client.delete(f"/workflows/{workflow_id}").status_code == 204
    assert client.get(f"/workflows/{workflow_id}").status_code == 404


def test_pushed_event_updates_workflow_booking(client, monday):
    workflow_id = _start(client)
    _to_payment(client, workflow_id, monday)
    booking_id = client.post(f"/workflows/{workflow_id}/payment").json()["booking"]["id"]

    response = client.post("/events", json={"event": "booking:cancelled", "data": booking_id})

    assert response.status_code == 200
    assert response.json() == {"event": "booking:cancelled", "delivered": 1}
    assert client.get(f"/workflows/{workflow_id}").json()["booking"]["status"] == "cancelled"


def test_unknown_event_kind_is_rejected(client):
    assert client.post("/events", json={"event": "chat:message", "data": {}}).status_code == 422


def test_malformed_event_payload_maps_to_400(client):
    response = client.post("/events", json={"event": "booking:updated", "data": {"id": "b-1", "startTime": "soon"}})

    assert response.status_code == 400


def test_experts_and_availability(client, monday):
    body = client.get("/experts").json()
    assert body["total"] == 1
    assert body["experts"][0]["services"][0]["id"] == "consult"

    assert client.get("/experts/exp-1").json()["timezone"] == "UTC"
    assert client.get("/experts/ghost").status_code == 404

    availability = client.get("/experts/exp-1/availability", params={"date": monday.isoformat()}).json()
    assert availability["available_slots"][0] == "09:00"
    assert availability["duration"] == 60
    assert availability["stale"] is False


def test_booking_cancel_and_reschedule(client, monday):
    workflow_id = _start(client)
    _to_payment(client, workflow_id, monday)
    booking = client.post(f"/workflows/{workflow_id}/payment").json()["booking"]

    listed = client.get("/bookings", params={"status": "pending"}).json()
    assert [b["id"] for b in listed["bookings"]] == [booking["id"]]
    assert client.get("/bookings", params={"status": "bogus"}).status_code == 400

    response = client.post(
        f"/bookings/{booking['id']}/reschedule",
        json={"start_time": f"{monday.isoformat()}T14:00:00", "end_time": f"{monday.isoformat()}T13:00:00"},
    )
    assert response.status_code == 400

    response = client.post(
        f"/bookings/{booking['id']}/reschedule",
        json={"start_time": f"{monday.isoformat()}T14:00:00", "end_time": f"{monday.isoformat()}T15:00:00"},
    )
    assert response.json()["status"] == "rescheduled"

    assert client.post(f"/bookings/{booking['id']}/cancel").json()["status"] == "cancelled"
    assert client.post(f"/bookings/{booking['id']}/cancel").status_code == 400
    assert client.get("/bookings/missing").status_code == 404


def test_auth_login_me_logout(client):
    assert client.get("/auth/me").status_code == 401

    response = client.post("/auth/login", json={"email": MOCK_USER_EMAIL, "password": "wrong-password"})
    assert response.status_code == 401

    response = client.post("/auth/login", json={"email": MOCK_USER_EMAIL, "password": MOCK_USER_PASSWORD})
    assert response.status_code == 200
    assert response.json()["email"] == MOCK_USER_EMAIL
    assert client.get("/auth/me").json()["email"] == MOCK_USER_EMAIL

    assert client.post("/auth/logout").status_code == 204
    assert client.get("/auth/me").status_code == 401


def test_register_rejects_unknown_role(client):
    response = client.post(
        "/auth/register",
        json={"name": "Newcomer", "email": "new@example.com", "password": "secret123", "role": "admin"},
    )
    assert response.status_code == 400


def test_sessions_are_scoped_to_each_caller(client):
    login = {"email": MOCK_USER_EMAIL, "password": MOCK_USER_PASSWORD}
    assert client.post("/auth/login", json=login).status_code == 200

    with TestClient(app) as other:
        assert other.get("/auth/me").status_code == 401

        assert other.post("/auth/login", json=login).status_code == 200
        assert other.post("/auth/logout").status_code == 204
        assert other.get("/auth/me").status_code == 401

    assert client.get("/auth/me").json()["email"] == MOCK_USER_EMAIL


def test_session_header_identifies_caller(client):
    response = client.post("/auth/login", json={"email": MOCK_USER_EMAIL, "password": MOCK_USER_PASSWORD})
    session_id = response.headers[dependencies.SESSION_HEADER]

    with TestClient(app) as other:
        me = other.get("/auth/me", headers={dependencies.SESSION_HEADER: session_id})
        assert me.status_code == 200
        assert other.get("/auth/me").status_code == 401


def test_expert_status_event_updates_listing(client):
    assert client.get("/experts/exp-1").json()["status"] == "offline"

    response = client.post("/events", json={"event": "expert:status", "data": {"expertId": "exp-1", "status": "busy"}})

    assert response.json() == {"event": "expert:status", "delivered": 1}
    assert client.get("/experts/exp-1").json()["status"] == "busy"
    assert client.get("/experts").json()["experts"][0]["status"] == "busy"

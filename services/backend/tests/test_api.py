"""HTTP layer: routing, request/response formatting and error mapping"""
from datetime import time, timedelta

import httpx
import pytest
import pytest_asyncio

from main import app

from tests.conftest import T0

INDIVIDUAL = {
    "resident_name": "Ada Obi",
    "visitor_name": "Chidi Eze",
    "address": "Block 4",
    "estate_id": "estate-1",
    "created_by": "resident-1",
    "start_date_time": (T0 - timedelta(hours=1)).isoformat(),
    "end_date_time": (T0 + timedelta(hours=4)).isoformat(),
}


@pytest_asyncio.fixture
async def client(core):
    # The lifespan is not run; the core is wired against the test database
    app.state.access_core = core
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


async def test_health(client):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


async def test_create_and_scan_individual_invite(client):
    response = await client.post("/api/v1/invites/individual", json=INDIVIDUAL)
    assert response.status_code == 201
    invite = response.json()
    assert invite["kind"] == "one_time"
    assert invite["status"] == "pending"
    assert invite["scan_uri"].startswith("gatekeeper://invite?")

    response = await client.post("/api/v1/scan/", json={"identifier": invite["scan_uri"], "action": "checkin"})
    assert response.status_code == 200
    assert response.json()["status"] == "checked-in"

    response = await client.post("/api/v1/scan/", json={"otp": invite["otp"], "action": "checkout"})
    assert response.json()["status"] == "checked-out"

    response = await client.post("/api/v1/scan/", json={"otp": invite["otp"], "action": "checkout"})
    assert response.status_code == 409
    assert response.json()["code"] == "invalid_transition"

    response = await client.get("/api/v1/notifications/resident-1")
    titles = [n["title"] for n in response.json()]
    assert titles.count("Visitor Checked In") == 1
    assert titles.count("Visitor Checked Out") == 1


async def test_scan_errors_are_mapped(client):
    invite = (await client.post("/api/v1/invites/individual", json=INDIVIDUAL)).json()

    response = await client.post("/api/v1/scan/", json={"otp": "000000x", "action": "checkin"})
    assert response.status_code == 404
    assert response.json()["code"] == "invite_not_found"

    response = await client.post(
        "/api/v1/scan/", json={"id": invite["id"], "otp": "000000", "action": "checkin"}
    )
    assert response.status_code == 400
    assert response.json()["code"] == "invalid_otp"

    response = await client.post("/api/v1/scan/", json={"action": "checkin"})
    assert response.status_code == 422


async def test_outside_window_is_conflict(client):
    payload = {
        **INDIVIDUAL,
        "start_date_time": (T0 + timedelta(hours=1)).isoformat(),
        "end_date_time": (T0 + timedelta(hours=2)).isoformat(),
    }
    invite = (await client.post("/api/v1/invites/individual", json=payload)).json()

    response = await client.post("/api/v1/scan/", json={"otp": invite["otp"], "action": "checkin"})
    assert response.status_code == 409
    assert response.json()["code"] == "outside_validity_window"


async def test_invalid_window_rejected(client):
    payload = {**INDIVIDUAL, "end_date_time": INDIVIDUAL["start_date_time"]}
    response = await client.post("/api/v1/invites/utility", json=payload)
    assert response.status_code == 422
    assert response.json()["code"] == "invalid_invite_window"


async def test_group_invite_and_listing(client):
    response = await client.post("/api/v1/invites/group", json={
        "resident_name": "Ada Obi",
        "group_name": "Birthday guests",
        "address": "Block 4",
        "estate_id": "estate-1",
        "created_by": "resident-1",
        "visit_date": T0.date().isoformat(),
        "start_time": time(9, 0).isoformat(),
        "end_time": time(23, 0).isoformat(),
    })
    assert response.status_code == 201
    group = response.json()

    scan = await client.post("/api/v1/scan/", json={"identifier": group["scan_uri"], "action": "checkin"})
    assert scan.json()["members_checked_in"] == 1

    await client.post("/api/v1/invites/utility", json=INDIVIDUAL)

    response = await client.get("/api/v1/invites/", params={"address": "Block 4", "user_id": "resident-1"})
    assert sorted(i["kind"] for i in response.json()) == ["group", "recurring"]

    response = await client.get("/api/v1/invites/all", headers={"x-estate-id": "estate-2"})
    assert response.json() == []
    response = await client.get("/api/v1/invites/all")
    assert len(response.json()) == 2


async def test_delete_invite(client):
    invite = (await client.post("/api/v1/invites/individual", json=INDIVIDUAL)).json()

    response = await client.delete(f"/api/v1/invites/{invite['id']}", params={"user_id": "resident-2"})
    assert response.status_code == 403
    assert response.json()["code"] == "invite_not_owned"

    response = await client.delete(f"/api/v1/invites/{invite['id']}", params={"user_id": "resident-1"})
    assert response.status_code == 204

    response = await client.delete(f"/api/v1/invites/{invite['id']}", params={"user_id": "resident-1"})
    assert response.status_code == 404


async def test_manual_sweep(client, clock):
    await client.post("/api/v1/invites/individual", json=INDIVIDUAL)
    clock.advance(hours=5)

    response = await client.post("/api/v1/invites/sweep")
    assert response.json() == {"deleted": 1}


async def test_device_routes(client):
    for device_id in ("phone", "tablet", "laptop"):
        response = await client.post("/api/v1/devices/", json={"user_id": "user-1", "device_id": device_id})
        assert response.status_code == 201

    response = await client.post("/api/v1/devices/", json={"user_id": "user-1", "device_id": "desktop"})
    assert response.status_code == 409
    assert response.json()["code"] == "device_limit_exceeded"

    response = await client.get("/api/v1/devices/user-1")
    assert len(response.json()) == 3

    response = await client.get("/api/v1/devices/user-1/active", params={"device_id": "phone"})
    assert response.json() == {"active": True}

    response = await client.delete("/api/v1/devices/user-1/phone")
    assert response.status_code == 204
    response = await client.get("/api/v1/devices/user-1/active", params={"device_id": "phone"})
    assert response.json() == {"active": False}

    response = await client.post("/api/v1/devices/inactive/sweep")
    assert response.json() == {"removed": 0}


async def test_sign_in_and_out(client):
    current = (await client.get("/api/v1/devices/current-id")).json()["device_id"]

    response = await client.post("/api/v1/sessions/sign-in", json={"user_id": "user-1"})
    assert response.status_code == 200
    body = response.json()
    assert body["device"]["device_id"] == current
    assert body["session"]["revoked_at"] is None

    response = await client.post("/api/v1/sessions/sign-out", json={"user_id": "user-1"})
    assert response.status_code == 204
    response = await client.get("/api/v1/devices/user-1")
    assert response.json() == []


async def test_notification_routes(client, core):
    notification = await core.notification_store.create("resident-1", "Hello", "World")

    response = await client.patch(f"/api/v1/notifications/{notification.id}/read")
    assert response.status_code == 204
    assert (await client.get("/api/v1/notifications/resident-1")).json()[0]["read"] is True

    response = await client.delete(f"/api/v1/notifications/{notification.id}")
    assert response.status_code == 204
    response = await client.delete(f"/api/v1/notifications/{notification.id}")
    assert response.status_code == 404

    await core.notification_store.create("resident-1", "Again", "World")
    response = await client.delete("/api/v1/notifications/user/resident-1")
    assert response.json() == {"deleted": 1}


async def test_group_invite_times_with_offsets_are_stored_estate_local(client):
    group = {
        "resident_name": "Ada Obi",
        "group_name": "Birthday guests",
        "address": "Block 4",
        "estate_id": "estate-1",
        "created_by": "resident-1",
        "visit_date": T0.date().isoformat(),
    }

    # 09:00+05:00 is 05:00 in Lagos (UTC+1)
    response = await client.post(
        "/api/v1/invites/group",
        json={**group, "start_time": "09:00:00+05:00", "end_time": "23:00:00+05:00"},
    )
    assert response.status_code == 201
    assert response.json()["start_date_time"] == "2025-06-01T05:00:00"
    assert response.json()["end_date_time"] == "2025-06-01T19:00:00"

    response = await client.post(
        "/api/v1/invites/group",
        json={**group, "start_time": "09:00:00+05:00", "end_time": "23:00:00"},
    )
    assert response.status_code == 201
    assert response.json()["start_date_time"] == "2025-06-01T05:00:00"
    assert response.json()["end_date_time"] == "2025-06-01T23:00:00"


async def test_individual_invite_times_with_offsets_are_stored_estate_local(client):
    payload = {
        **INDIVIDUAL,
        "start_date_time": "2025-06-01T09:00:00+05:00",
        "end_date_time": "2025-06-01T12:00:00",
    }
    response = await client.post("/api/v1/invites/individual", json=payload)
    assert response.status_code == 201
    assert response.json()["start_date_time"] == "2025-06-01T05:00:00"
    assert response.json()["end_date_time"] == "2025-06-01T12:00:00"

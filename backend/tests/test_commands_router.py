"""Integration tests for command endpoints and the command lifecycle."""

import threading
from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from config import COMMAND_RATE_LIMIT
from models.command import Command
from models.device import Device
from models.user import User
from routers.commands import limiter
from services.command_dispatcher import SimulatedCommandDispatcher, get_command_dispatcher
from tests.conftest import RecordingDispatcher


class TrackingSimulatedDispatcher(SimulatedCommandDispatcher):
    """Simulated dispatcher that keeps its timers so tests can wait on them.

    Timer callbacks are serialized because the in-memory test database sits
    on a single shared connection.
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.timers = []
        self._lock = threading.Lock()

    def mark_executed(self, command_id):
        with self._lock:
            return super().mark_executed(command_id)

    def dispatch(self, command):
        timer = super().dispatch(command)
        self.timers.append(timer)
        return timer


@pytest.fixture
def rate_limited(monkeypatch):
    """Turn the shared limiter on with empty counters for one test."""
    monkeypatch.setattr(limiter, "enabled", True)
    limiter.reset()

    yield limiter

    limiter.reset()


def _add_command(db_session: Session, device: Device, command_type: str, created_at: datetime) -> Command:
    command = Command(device_id=device.id, command_type=command_type, created_at=created_at)
    db_session.add(command)
    db_session.commit()
    db_session.refresh(command)
    return command


# ============================================================================
# Create
# ============================================================================

@pytest.mark.integration
class TestCreateCommand:
    """Test POST /api/devices/{id}/commands endpoint."""

    def test_returns_pending_command_and_dispatches_it(
        self,
        client: TestClient,
        auth_headers: dict,
        test_device: Device,
        dispatcher: RecordingDispatcher,
    ):
        response = client.post(
            f"/api/devices/{test_device.id}/commands",
            json={"commandType": "lock"},
            headers=auth_headers,
        )

        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "pending"
        assert data["commandType"] == "lock"
        assert data["deviceId"] == test_device.id
        assert data["executedAt"] is None
        assert dispatcher.dispatched == [data["id"]]

    @pytest.mark.parametrize("payload", [{}, {"commandType": ""}, {"commandType": 7}])
    def test_invalid_payload_returns_400(
        self,
        client: TestClient,
        auth_headers: dict,
        test_device: Device,
        dispatcher: RecordingDispatcher,
        payload: dict,
    ):
        response = client.post(
            f"/api/devices/{test_device.id}/commands",
            json=payload,
            headers=auth_headers,
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Invalid request data"
        assert dispatcher.dispatched == []

    def test_other_users_device_returns_403(
        self,
        client: TestClient,
        db_session: Session,
        auth_headers: dict,
        other_device: Device,
        dispatcher: RecordingDispatcher,
    ):
        response = client.post(
            f"/api/devices/{other_device.id}/commands",
            json={"commandType": "wipe"},
            headers=auth_headers,
        )

        assert response.status_code == 403
        assert db_session.query(Command).count() == 0
        assert dispatcher.dispatched == []

    def test_unknown_device_returns_404(self, client: TestClient, auth_headers: dict):
        response = client.post(
            "/api/devices/9999/commands",
            json={"commandType": "alarm"},
            headers=auth_headers,
        )

        assert response.status_code == 404

    def test_rate_limit_is_per_user(
        self,
        client: TestClient,
        auth_headers: dict,
        other_auth_headers: dict,
        test_device: Device,
        other_device: Device,
        dispatcher: RecordingDispatcher,
        rate_limited,
    ):
        allowed = int(COMMAND_RATE_LIMIT.split("/")[0])

        for _ in range(allowed):
            response = client.post(
                f"/api/devices/{test_device.id}/commands",
                json={"commandType": "alarm"},
                headers=auth_headers,
            )
            assert response.status_code == 201

        response = client.post(
            f"/api/devices/{test_device.id}/commands",
            json={"commandType": "alarm"},
            headers=auth_headers,
        )

        assert response.status_code == 429
        assert response.json()["message"].startswith("Rate limit exceeded: ")
        assert len(dispatcher.dispatched) == allowed

        response = client.post(
            f"/api/devices/{other_device.id}/commands",
            json={"commandType": "lock"},
            headers=other_auth_headers,
        )
        assert response.status_code == 201


# ============================================================================
# List
# ============================================================================

@pytest.mark.integration
class TestListCommands:
    """Test GET /api/devices/{id}/commands and GET /api/commands endpoints."""

    def test_device_commands_newest_first_with_limit(
        self,
        client: TestClient,
        db_session: Session,
        auth_headers: dict,
        test_device: Device,
    ):
        base = datetime(2024, 5, 1, 12, 0)
        ids = [
            _add_command(db_session, test_device, kind, base + timedelta(minutes=i)).id
            for i, kind in enumerate(["alarm", "lock", "photo"])
        ]

        response = client.get(f"/api/devices/{test_device.id}/commands", headers=auth_headers)
        assert [c["id"] for c in response.json()] == list(reversed(ids))

        response = client.get(
            f"/api/devices/{test_device.id}/commands",
            params={"limit": 2},
            headers=auth_headers,
        )
        assert [c["id"] for c in response.json()] == [ids[2], ids[1]]

    def test_user_commands_span_all_owned_devices_only(
        self,
        client: TestClient,
        db_session: Session,
        auth_headers: dict,
        test_user: User,
        test_device: Device,
        other_device: Device,
    ):
        second_device = Device(
            user_id=test_user.id,
            name="Laptop",
            device_type="laptop",
            platform="Windows",
        )
        db_session.add(second_device)
        db_session.commit()

        base = datetime(2024, 5, 1, 12, 0)
        first = _add_command(db_session, test_device, "lock", base)
        second = _add_command(db_session, second_device, "alarm", base + timedelta(minutes=1))
        _add_command(db_session, other_device, "wipe", base + timedelta(minutes=2))

        response = client.get("/api/commands", headers=auth_headers)

        assert response.status_code == 200
        assert [c["id"] for c in response.json()] == [second.id, first.id]

        response = client.get("/api/commands", params={"limit": 1}, headers=auth_headers)
        assert [c["id"] for c in response.json()] == [second.id]

        response = client.get(
            "/api/commands",
            params={"limit": "99999999999999999999"},
            headers=auth_headers,
        )
        assert [c["id"] for c in response.json()] == [second.id, first.id]

    def test_unauthenticated_returns_401(self, client: TestClient):
        response = client.get("/api/commands")

        assert response.status_code == 401


# ============================================================================
# Lifecycle
# ============================================================================

@pytest.mark.integration
class TestCommandLifecycle:
    """End-to-end: register a device, send a command, watch it execute."""

    def test_command_is_executed_after_delay(
        self,
        client: TestClient,
        db_session: Session,
        session_factory,
        auth_headers: dict,
    ):
        from main import app

        simulated = TrackingSimulatedDispatcher(session_factory, delay_seconds=0.2)
        app.dependency_overrides[get_command_dispatcher] = lambda: simulated

        device = client.post(
            "/api/devices",
            json={"name": "Test", "deviceType": "smartphone", "platform": "Android"},
            headers=auth_headers,
        )
        assert device.status_code == 201
        assert device.json()["status"] == "offline"
        device_id = device.json()["id"]

        created = client.post(
            f"/api/devices/{device_id}/commands",
            json={"commandType": "lock"},
            headers=auth_headers,
        )
        assert created.status_code == 201
        assert created.json()["status"] == "pending"

        for timer in simulated.timers:
            timer.join(timeout=5)
        # The timer committed through its own session
        db_session.expire_all()

        response = client.get(f"/api/devices/{device_id}/commands", headers=auth_headers)
        assert response.status_code == 200
        [command] = response.json()
        assert command["id"] == created.json()["id"]
        assert command["status"] == "executed"
        assert command["executedAt"] is not None
        assert command["executedAt"] >= command["createdAt"]

    def test_concurrent_commands_resolve_independently(
        self,
        client: TestClient,
        db_session: Session,
        session_factory,
        auth_headers: dict,
        test_device: Device,
    ):
        from main import app

        simulated = TrackingSimulatedDispatcher(session_factory, delay_seconds=0.5)
        app.dependency_overrides[get_command_dispatcher] = lambda: simulated

        for kind in ["alarm", "photo", "recording"]:
            response = client.post(
                f"/api/devices/{test_device.id}/commands",
                json={"commandType": kind},
                headers=auth_headers,
            )
            assert response.status_code == 201

        for timer in simulated.timers:
            timer.join(timeout=5)
        db_session.expire_all()

        response = client.get(f"/api/devices/{test_device.id}/commands", headers=auth_headers)
        statuses = {c["commandType"]: c["status"] for c in response.json()}
        assert statuses == {"alarm": "executed", "photo": "executed", "recording": "executed"}

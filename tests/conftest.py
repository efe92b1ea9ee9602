"""Shared fixtures: an in-memory Supabase stand-in and a recording notifier."""

from __future__ import annotations

from pathlib import Path
import sys
from typing import Any, Callable

import pytest
from fastapi.testclient import TestClient
from postgrest.exceptions import APIError

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from Auth.notifier import Notification, NotificationResult  # noqa: E402
from config import Settings  # noqa: E402
from Database.deps import get_db, get_notifier, get_settings  # noqa: E402
from main import create_app  # noqa: E402
from utils import utcnow_iso  # noqa: E402

PRIMARY_KEYS = {
    "users": "user_id",
    "hotels": "Hotel_id",
    "rooms": "Room_id",
    "bookings": "Booking_id",
    "payments": "Payment_id",
    "customer_support_tickets": "Ticket_id",
}

UNIQUE_COLUMNS = {
    "users": ("Email",),
    "payments": ("Transaction_id",),
}


class FakeSupabaseResponse:
    """Minimal Supabase-like response wrapper."""

    def __init__(self, data: list[dict[str, Any]]) -> None:
        self.data = data


def unique_violation() -> APIError:
    return APIError(
        {
            "message": "duplicate key value violates unique constraint",
            "code": "23505",
            "hint": None,
            "details": None,
        }
    )


class FakeTable:
    """In-memory table with a Supabase-like interface."""

    def __init__(self, db: "FakeDB", name: str) -> None:
        self._db = db
        self._name = name
        self._store = db.tables[name]
        self._action: str | None = None
        self._filters: list[tuple[str, Any]] = []
        self._payload: dict[str, Any] | list[dict[str, Any]] | None = None

    def select(self, *_: str) -> "FakeTable":
        self._action = "select"
        return self

    def insert(self, payload: dict[str, Any] | list[dict[str, Any]]) -> "FakeTable":
        self._action = "insert"
        self._payload = payload
        return self

    def update(self, payload: dict[str, Any]) -> "FakeTable":
        self._action = "update"
        self._payload = payload
        return self

    def delete(self) -> "FakeTable":
        self._action = "delete"
        return self

    def eq(self, column: str, value: Any) -> "FakeTable":
        self._filters.append((column, value))
        return self

    def _filter_rows(self) -> list[dict[str, Any]]:
        return [
            row
            for row in self._store
            if all(str(row.get(column)) == str(value) for column, value in self._filters)
        ]

    def _check_unique(self, row: dict[str, Any]) -> None:
        for column in UNIQUE_COLUMNS.get(self._name, ()):
            if any(existing.get(column) == row.get(column) for existing in self._store):
                raise unique_violation()

    def execute(self) -> FakeSupabaseResponse:
        if self._action == "select":
            data = [dict(row) for row in self._filter_rows()]
        elif self._action == "insert":
            rows = self._payload if isinstance(self._payload, list) else [self._payload]  # type: ignore[list-item]
            data = []
            for payload in rows:
                row = dict(payload)  # type: ignore[arg-type]
                self._check_unique(row)
                row.setdefault(PRIMARY_KEYS[self._name], self._db.next_id(self._name))
                self._store.append(row)
                data.append(dict(row))
        elif self._action == "update":
            matched = self._filter_rows()
            for row in matched:
                row.update(self._payload or {})  # type: ignore[arg-type]
            data = [dict(row) for row in matched]
        elif self._action == "delete":
            matched = self._filter_rows()
            for row in matched:
                self._store.remove(row)
            data = [dict(row) for row in matched]
        else:
            raise ValueError("Unsupported action for FakeTable.")

        # reset state for the next call
        self._action = None
        self._filters = []
        self._payload = None
        return FakeSupabaseResponse(data)


class FakeDB:
    """Simplified Supabase client exposing the minimal table(...) API."""

    table_class: type[FakeTable] = FakeTable

    def __init__(self) -> None:
        self.tables: dict[str, list[dict[str, Any]]] = {name: [] for name in PRIMARY_KEYS}
        self._sequences = {name: 0 for name in PRIMARY_KEYS}

    def next_id(self, name: str) -> int:
        self._sequences[name] += 1
        return self._sequences[name]

    def table(self, name: str) -> FakeTable:
        if name not in self.tables:
            raise ValueError(f"Unknown table {name}")
        return self.table_class(self, name)

    def seed(self, name: str, **row: Any) -> dict[str, Any]:
        """Store a row directly, bypassing the API, and return it."""
        now = utcnow_iso()
        record = {"Created_at": now, "Updated_at": now, **row}
        return self.table(name).insert(record).execute().data[0]


class RecordingNotifier:
    """Notifier that keeps every message instead of sending it."""

    def __init__(self) -> None:
        self.sent: list[Notification] = []

    def send(self, notification: Notification) -> NotificationResult:
        self.sent.append(notification)
        return NotificationResult(delivered=True)


class FailingNotifier:
    """Notifier whose transport blows up on every send."""

    def send(self, notification: Notification) -> NotificationResult:
        raise ConnectionError("SMTP server unreachable")


@pytest.fixture()
def fake_db() -> FakeDB:
    return FakeDB()


@pytest.fixture()
def settings() -> Settings:
    return Settings(jwt_secret="test-secret", bcrypt_rounds=4)


@pytest.fixture()
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture()
def make_client() -> Callable[..., TestClient]:
    """Factory building a TestClient around the given fakes."""

    def _make(db: Any, settings: Settings, notifier: Any) -> TestClient:
        app = create_app(settings)
        app.dependency_overrides[get_db] = lambda: db
        app.dependency_overrides[get_settings] = lambda: settings
        app.dependency_overrides[get_notifier] = lambda: notifier
        # no context manager: the lifespan would open a real Supabase client
        return TestClient(app)

    return _make


@pytest.fixture()
def client(make_client, fake_db, settings, notifier) -> TestClient:
    """Create a TestClient with the fake database, settings and notifier."""
    return make_client(fake_db, settings, notifier)


def seed_user(db: FakeDB, **overrides: Any) -> dict[str, Any]:
    row = {
        "First_name": "Ada",
        "Last_name": "Lovelace",
        "Email": "ada@example.com",
        "Password": "not-a-real-hash",
        "Contact_phone": 5550000,
        "Address": "12 Analytical Row",
        "Role": "user",
        "isVerified": True,
        "verificationCode": None,
    }
    row.update(overrides)
    return db.seed("users", **row)


def seed_hotel(db: FakeDB, **overrides: Any) -> dict[str, Any]:
    row = {
        "Name": "Palace",
        "Location": "Nairobi",
        "Address": "1 Kenyatta Ave",
        "Contact_phone": 700100200,
        "Category": "Luxury",
        "Rating": 4.5,
    }
    row.update(overrides)
    return db.seed("hotels", **row)


def seed_room(db: FakeDB, hotel_id: int, **overrides: Any) -> dict[str, Any]:
    row = {
        "Hotel_id": hotel_id,
        "Room_type": "Double",
        "Price_per_night": 120.0,
        "Capacity": 2,
        "Amenities": "WiFi",
        "is_available": True,
    }
    row.update(overrides)
    return db.seed("rooms", **row)


def seed_booking(db: FakeDB, user_id: int, room_id: int, **overrides: Any) -> dict[str, Any]:
    row = {
        "user_id": user_id,
        "Room_id": room_id,
        "Check_in_date": "2026-03-01",
        "Check_out_date": "2026-03-04",
        "Total_amount": 360.0,
        "Booking_status": "Pending",
    }
    row.update(overrides)
    return db.seed("bookings", **row)

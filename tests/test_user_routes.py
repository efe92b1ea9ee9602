"""Endpoint tests for the user router using a fake Supabase client."""

from __future__ import annotations

from fastapi.testclient import TestClient

from conftest import FakeDB, FakeTable, seed_user

USERS = "/api/users"


def test_health_check(client: TestClient) -> None:
    response = client.get(f"{USERS}/health")

    assert response.status_code == 200
    assert response.json()["message"] == "User service is healthy"


def test_list_users_hides_credentials(client: TestClient, fake_db: FakeDB) -> None:
    seed_user(fake_db, verificationCode="4000", isVerified=False)
    seed_user(fake_db, Email="bob@example.com", First_name="Bob")

    response = client.get(USERS)

    assert response.status_code == 200
    users = response.json()["users"]
    assert [user["Email"] for user in users] == ["ada@example.com", "bob@example.com"]
    assert all("Password" not in user and "verificationCode" not in user for user in users)


def test_get_user_by_id(client: TestClient, fake_db: FakeDB) -> None:
    created = seed_user(fake_db, Email="bob@example.com", First_name="Bob")

    fetched = client.get(f"{USERS}/{created['user_id']}")

    assert fetched.status_code == 200
    assert fetched.json()["user"]["user_id"] == created["user_id"]
    assert fetched.json()["user"]["First_name"] == "Bob"


def test_get_user_missing(client: TestClient) -> None:
    response = client.get(f"{USERS}/42")

    assert response.status_code == 404
    assert response.json()["detail"] == "User not found"


def test_get_user_rejects_invalid_id(client: TestClient) -> None:
    for bad_id in ("not-a-number", "0", "-3"):
        response = client.get(f"{USERS}/{bad_id}")

        assert response.status_code == 400
        assert response.json()["detail"] == "The supplied user id is not a valid identifier."


def test_update_user_requires_at_least_one_field(client: TestClient, fake_db: FakeDB) -> None:
    created = seed_user(fake_db)

    update = client.patch(f"{USERS}/{created['user_id']}", json={})

    assert update.status_code == 400
    assert "At least one field" in update.json()["detail"]


def test_update_user_applies_changes_and_stamps_updated_at(client: TestClient, fake_db: FakeDB) -> None:
    created = seed_user(fake_db)

    update = client.patch(
        f"{USERS}/{created['user_id']}", json={"Address": "221B Baker St", "Role": "admin"}
    )
    body = update.json()

    assert update.status_code == 200
    assert body["user"]["Address"] == "221B Baker St"
    assert body["user"]["Role"] == "admin"
    assert fake_db.tables["users"][0]["Updated_at"] >= created["Updated_at"]


def test_update_user_clears_nullable_fields(client: TestClient, fake_db: FakeDB) -> None:
    created = seed_user(fake_db, Last_name="Original", Address="1 Old Road", Role="admin")

    update = client.patch(
        f"{USERS}/{created['user_id']}",
        json={"Contact_phone": 5551234, "Last_name": None, "Address": None, "Role": None},
    )
    body = update.json()

    assert update.status_code == 200
    assert body["user"]["Contact_phone"] == 5551234
    assert body["user"]["Last_name"] is None
    assert body["user"]["Address"] is None
    assert body["user"]["Role"] == "admin"


def test_update_user_with_only_null_role_is_empty(client: TestClient, fake_db: FakeDB) -> None:
    created = seed_user(fake_db)

    update = client.patch(f"{USERS}/{created['user_id']}", json={"Role": None})

    assert update.status_code == 400
    assert update.json()["detail"] == "At least one field must be provided for update."


def test_update_user_cannot_touch_credentials(client: TestClient, fake_db: FakeDB) -> None:
    created = seed_user(fake_db)

    update = client.patch(f"{USERS}/{created['user_id']}", json={"Password": "new", "isVerified": False})

    assert update.status_code == 400
    assert fake_db.tables["users"][0]["Password"] == "not-a-real-hash"


def test_update_user_rejects_unknown_role(client: TestClient, fake_db: FakeDB) -> None:
    created = seed_user(fake_db)

    update = client.patch(f"{USERS}/{created['user_id']}", json={"Role": "root"})

    assert update.status_code == 400


def test_delete_user_returns_confirmation_message(client: TestClient, fake_db: FakeDB) -> None:
    created = seed_user(fake_db)

    deletion = client.delete(f"{USERS}/{created['user_id']}")

    assert deletion.status_code == 200
    assert deletion.json()["message"] == f"User {created['user_id']} deleted"
    assert fake_db.tables["users"] == []


def test_delete_missing_user(client: TestClient) -> None:
    assert client.delete(f"{USERS}/5").status_code == 404


def test_list_users_reports_database_failure(make_client, settings, notifier) -> None:
    class FailingTable(FakeTable):
        def execute(self):
            raise ConnectionError("database unavailable")

    class FailingDB(FakeDB):
        table_class = FailingTable

    client = make_client(FailingDB(), settings, notifier)

    response = client.get(USERS)

    assert response.status_code == 500
    assert response.json()["detail"] == "Unable to retrieve users due to an internal error."

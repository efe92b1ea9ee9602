"""Endpoint tests for the customer support ticket router."""

from __future__ import annotations

from fastapi.testclient import TestClient

from conftest import FakeDB, seed_user

TICKETS = "/api/tickets"


def _open_ticket(client: TestClient, user_id: int) -> dict:
    response = client.post(
        TICKETS, json={"user_id": user_id, "Subject": "Help", "Description": "Lost key"}
    )
    assert response.status_code == 201
    return response.json()["ticket"]


def test_ticket_lifecycle(client: TestClient, fake_db: FakeDB) -> None:
    user = seed_user(fake_db)

    created = client.post(
        TICKETS,
        json={"user_id": user["user_id"], "Subject": "Noisy AC", "Description": "Room 12 AC rattles"},
    )
    ticket_id = created.json()["ticket"]["Ticket_id"]
    resolved = client.patch(f"{TICKETS}/{ticket_id}", json={"Status": "Resolved"})
    listed = client.get(TICKETS)
    deletion = client.delete(f"{TICKETS}/{ticket_id}")

    assert created.status_code == 201
    assert created.json()["ticket"]["Status"] == "Open"
    assert resolved.json()["ticket"]["Status"] == "Resolved"
    assert len(listed.json()["tickets"]) == 1
    assert deletion.json()["message"] == f"Ticket {ticket_id} deleted"


def test_ticket_requires_existing_user(client: TestClient) -> None:
    response = client.post(TICKETS, json={"user_id": 3, "Subject": "Help", "Description": "Lost key"})

    assert response.status_code == 404
    assert response.json()["detail"] == "User not found"


def test_get_ticket_invalid_and_missing(client: TestClient) -> None:
    assert client.get(f"{TICKETS}/0").status_code == 400
    assert client.get(f"{TICKETS}/9").json()["detail"] == "No ticket found with id 9"


def test_ticket_rejects_unknown_status(client: TestClient, fake_db: FakeDB) -> None:
    created = _open_ticket(client, seed_user(fake_db)["user_id"])

    update = client.patch(f"{TICKETS}/{created['Ticket_id']}", json={"Status": "Escalated"})

    assert update.status_code == 400
    assert client.get(f"{TICKETS}/{created['Ticket_id']}").json()["ticket"]["Status"] == "Open"

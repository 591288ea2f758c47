"""HTTP surface: routing, camelCase payloads, error envelopes and identity."""

import json

import anyio
import httpx
import pytest
from fastapi.testclient import TestClient

from hackops import app
from hackops.core.config import settings
from hackops.core.security import encode_token
from hackops.services.workspace import WorkspaceRegistry


@pytest.fixture()
def client(session_factory, monkeypatch):
    monkeypatch.setattr(settings, "REMOTE_URL", "")
    previous = app.state.registry
    app.state.registry = WorkspaceRegistry(session_factory, settings)
    try:
        yield TestClient(app)
    finally:
        app.state.registry = previous


def test_todo_lifecycle(client):
    created = client.post("/api/v1/todos", json={"title": "Book venue"})
    assert created.status_code == 201
    todo = created.json()
    assert todo["completed"] is False
    assert "createdAt" in todo

    toggled = client.post(f"/api/v1/todos/{todo['id']}/toggle").json()
    assert toggled["completed"] is True

    decision = client.post(f"/api/v1/todos/{todo['id']}/decisions", json={"text": "Library hall"})
    assert decision.status_code == 201

    summary = client.get("/api/v1/todos/summary").json()
    assert summary == {"total": 1, "completed": 1, "open": 0}

    assert client.delete(f"/api/v1/todos/{todo['id']}").json() == {"status": "deleted"}
    assert client.get("/api/v1/todos").json() == []


def test_errors_use_the_envelope(client):
    missing = client.post("/api/v1/todos/nope/toggle")
    assert missing.status_code == 404
    assert missing.json()["code"] == "not_found"

    blank = client.post("/api/v1/todos", json={"title": "  "})
    assert blank.status_code == 422
    assert blank.json() == {"code": "invalid_input", "message": "title is required"}

    malformed = client.post("/api/v1/todos", json={})
    assert malformed.status_code == 422
    assert malformed.json()["code"] == "validation_error"


def test_budget_summary_groups_categories(client):
    client.post("/api/v1/budget", json={"type": "income", "description": "Sponsor", "amount": 500, "category": "Sponsorship"})
    client.post("/api/v1/budget", json={"type": "expense", "description": "Pizza", "amount": 120, "category": "Food & Drinks"})

    summary = client.get("/api/v1/budget/summary").json()

    assert summary["balance"] == 380
    assert [c["category"] for c in summary["categories"]] == ["Food & Drinks", "Sponsorship"]
    assert "Venue" in client.get("/api/v1/budget/categories").json()


def test_reservation_flow_reports_availability(client):
    board = client.post("/api/v1/hardware", json={"name": "Arduino", "quantity": 2}).json()
    ada = client.post("/api/v1/participants", json={"name": "Ada", "skills": ["Hardware"]}).json()

    reservation = client.post(
        "/api/v1/reservations",
        json={"hardwareId": board["id"], "participantId": ada["id"], "quantity": 2, "status": "pending"},
    )
    assert reservation.status_code == 201
    body = reservation.json()
    assert body["hardwareName"] == "Arduino"
    assert body["participantName"] == "Ada"

    item = client.get(f"/api/v1/hardware/{board['id']}").json()
    assert item["available"] == 0
    assert item["reserved"] == 2
    assert client.get("/api/v1/hardware", params={"available_only": True}).json() == []

    too_many = client.post(
        "/api/v1/reservations",
        json={"hardwareId": board["id"], "participantId": ada["id"], "quantity": 1},
    )
    assert too_many.status_code == 422

    approved = client.post(f"/api/v1/reservations/{body['id']}/approve").json()
    assert approved["status"] == "approved"
    returned = client.post(f"/api/v1/reservations/{body['id']}/return").json()
    assert returned["status"] == "returned"
    assert client.get(f"/api/v1/hardware/{board['id']}").json()["available"] == 2


def test_teams_and_members(client):
    team = client.post("/api/v1/teams", json={"name": "Robots"}).json()
    ada = client.post("/api/v1/participants", json={"name": "Ada"}).json()

    assigned = client.put(f"/api/v1/participants/{ada['id']}/team", json={"teamId": team["id"]}).json()
    assert assigned["teamId"] == team["id"]
    assert client.get("/api/v1/teams").json()[0]["memberCount"] == 1
    assert len(client.get("/api/v1/teams/colors").json()) == 8

    client.delete(f"/api/v1/teams/{team['id']}")
    assert client.get("/api/v1/participants/summary").json()["unassigned"] == 1


def test_backup_export_and_import(client):
    client.post("/api/v1/todos", json={"title": "Book venue"})

    exported = client.get("/api/v1/backup/export")
    assert exported.status_code == 200
    assert exported.headers["content-disposition"].startswith('attachment; filename="hackathon-backup-')
    backup = exported.json()
    assert backup["version"] == "1.1"

    backup["data"]["todos"] = []
    imported = client.post("/api/v1/backup/import", content=json.dumps(backup))
    assert imported.status_code == 200
    assert imported.json()["counts"]["todos"] == 0
    assert client.get("/api/v1/todos").json() == []

    broken = client.post("/api/v1/backup/preview", content="{oops")
    assert broken.status_code == 400
    assert broken.json() == {"code": "invalid_backup", "message": "Failed to parse backup file"}


def test_bearer_token_selects_the_workspace(client):
    token = encode_token("organizer-42", name="Grace")
    headers = {"Authorization": f"Bearer {token}"}

    client.post("/api/v1/todos", json={"title": "Only mine"}, headers=headers)

    assert [t["title"] for t in client.get("/api/v1/todos", headers=headers).json()] == ["Only mine"]
    assert client.get("/api/v1/todos").json() == []


def test_invalid_or_missing_token(client, monkeypatch):
    bad = client.get("/api/v1/todos", headers={"Authorization": "Bearer not-a-jwt"})
    assert bad.status_code == 401
    assert bad.json()["message"] == "Invalid token"

    monkeypatch.setattr(settings, "AUTH_REQUIRED", True)
    anonymous = client.get("/api/v1/todos")
    assert anonymous.status_code == 401
    assert anonymous.headers["www-authenticate"] == "Bearer"


def test_request_id_header_is_echoed(client):
    response = client.get("/api/v1/budget/categories", headers={"X-Request-ID": "abc123"})
    assert response.headers["X-Request-ID"] == "abc123"


def test_shutdown_closes_the_registry(session_factory, monkeypatch):
    monkeypatch.setattr(settings, "REMOTE_URL", "")
    http = httpx.AsyncClient()
    previous = app.state.registry
    app.state.registry = WorkspaceRegistry(session_factory, settings, http=http)
    try:
        with TestClient(app) as client:
            assert client.get("/api/v1/todos").status_code == 200
        assert http.is_closed
    finally:
        app.state.registry = previous


@pytest.mark.anyio
async def test_overlapping_requests_do_not_undo_each_other(session_factory, table_server, monkeypatch):
    monkeypatch.setattr(settings, "REMOTE_URL", "https://tables.example.test")
    monkeypatch.setattr(settings, "REMOTE_ENTITIES", "todos")
    first_received = anyio.Event()
    release_first = anyio.Event()

    async def slow_then_failing(request):
        if request.method == "POST" and json.loads(request.content)["title"] == "First":
            first_received.set()
            await release_first.wait()
            return httpx.Response(500, json={"message": "remote store unavailable"})
        return table_server.handle(request)

    previous = app.state.registry
    remote_http = httpx.AsyncClient(transport=httpx.MockTransport(slow_then_failing))
    app.state.registry = WorkspaceRegistry(session_factory, settings, http=remote_http)
    responses = {}
    try:
        async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://hackops.test") as api:

            async def add(title):
                responses[title] = await api.post("/api/v1/todos", json={"title": title})

            async with anyio.create_task_group() as tg:
                tg.start_soon(add, "First")
                await first_received.wait()
                tg.start_soon(add, "Second")
                await anyio.sleep(0.05)
                release_first.set()

            listed = await api.get("/api/v1/todos")
    finally:
        await remote_http.aclose()
        app.state.registry = previous

    assert responses["First"].status_code == 502
    assert responses["Second"].status_code == 201
    assert [t["title"] for t in listed.json()] == ["Second"]
    assert [row["title"] for row in table_server.tables["todos"]] == ["Second"]

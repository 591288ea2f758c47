import httpx
import pytest

from hackops.remote.client import RemoteStoreError, TableClient, row_from
from hackops.schemas.hardware import Hardware

pytestmark = pytest.mark.anyio


async def test_select_renders_filters_and_headers(table_client, table_server):
    table_server.seed("hardware", name="Arduino", quantity=5, user_id="u1")
    table_server.seed("hardware", name="Pi", quantity=2, user_id="u2")

    rows = await table_client.select("hardware", filters={"user_id": "u1"}, order="created_at.desc")

    assert [r["name"] for r in rows] == ["Arduino"]
    request = table_server.requests[-1]
    assert request.url.path == "/rest/v1/hardware"
    assert request.url.params["user_id"] == "eq.u1"
    assert request.url.params["order"] == "created_at.desc"
    assert request.headers["apikey"] == "anon-key"
    assert request.headers["Authorization"] == "Bearer user-token"


async def test_insert_returns_server_assigned_fields(table_client, table_server):
    row = await table_client.insert("teams", {"name": "Robots", "user_id": "u1"})

    assert row["id"].startswith("teams-")
    assert row["created_at"]
    assert table_server.requests[-1].headers["Prefer"] == "return=representation"


async def test_update_with_null_and_bool_filters(table_client, table_server):
    table_server.seed("participants", name="Ada", team_id="t1", checked_in=False, user_id="u1")
    table_server.seed("participants", name="Lin", team_id=None, checked_in=True, user_id="u1")

    rows = await table_client.update("participants", {"checked_in": True}, filters={"team_id": "t1"})
    assert [r["name"] for r in rows] == ["Ada"]

    unassigned = await table_client.select("participants", filters={"team_id": None, "checked_in": True})
    assert [r["name"] for r in unassigned] == ["Lin"]
    assert table_server.requests[-1].url.params["team_id"] == "is.null"
    assert table_server.requests[-1].url.params["checked_in"] == "eq.true"


async def test_error_response_raises_remote_store_error(table_client, table_server):
    table_server.fail(503)

    with pytest.raises(RemoteStoreError) as excinfo:
        await table_client.select("todos")

    assert excinfo.value.status_code == 503
    assert "remote store unavailable" in str(excinfo.value)


async def test_update_one_without_match_raises(table_client):
    with pytest.raises(RemoteStoreError):
        await table_client.update_one("todos", {"title": "x"}, filters={"id": "missing"})


async def test_transport_error_is_wrapped():
    def broken(request):
        raise httpx.ConnectError("connection refused", request=request)

    async with httpx.AsyncClient(transport=httpx.MockTransport(broken)) as http:
        client = TableClient(http, base_url="https://tables.example.test")
        with pytest.raises(RemoteStoreError) as excinfo:
            await client.select("todos")
    assert excinfo.value.status_code is None


async def test_delete_requires_filter(table_client):
    with pytest.raises(ValueError):
        await table_client.delete("todos", filters={})


def test_row_from_drops_identity_and_empty_fields():
    item = Hardware(name="Soldering iron", quantity=3)

    assert row_from(item, user_id="u1") == {
        "name": "Soldering iron",
        "description": "",
        "quantity": 3,
        "user_id": "u1",
    }

"""Shared fixtures: in-memory local storage and a fake hosted table API."""

import json
import os
import sys
from itertools import count
from pathlib import Path

import httpx
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("DATA_DIR", str(ROOT / "data"))
os.environ.setdefault("DATABASE_URL", "sqlite://")

from hackops.db.session import Base
from hackops.models import local_storage as local_storage_model  # noqa: F401
from hackops.remote.client import TableClient
from hackops.services.storage import LocalStorage


@pytest.fixture()
def anyio_backend():
    return "asyncio"


@pytest.fixture()
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    try:
        yield factory
    finally:
        engine.dispose()


@pytest.fixture()
def local_storage(session_factory):
    return LocalStorage(session_factory, "organizer-1")


def _render(value):
    if isinstance(value, bool):
        return str(value).lower()
    return str(value)


class FakeTableServer:
    """Just enough PostgREST for the table client: eq/is.null filters, ordering and embeds."""

    def __init__(self):
        self.tables: dict[str, list[dict]] = {}
        self.requests: list[httpx.Request] = []
        self.failures: list[tuple[int, str | None, str | None]] = []
        self._ids = count(1)
        self._clock = count(1)

    def seed(self, table, **row):
        row.setdefault("id", f"{table}-{next(self._ids)}")
        row.setdefault("created_at", f"2024-05-01T10:00:{next(self._clock):02d}Z")
        self.tables.setdefault(table, []).append(row)
        return row

    def fail(self, status_code=500, *, method=None, table=None):
        """Fail the next request (optionally only one matching ``method``/``table``)."""
        self.failures.append((status_code, method, table))

    def _take_failure(self, method, table):
        for index, (status_code, wanted_method, wanted_table) in enumerate(self.failures):
            if wanted_method in (None, method) and wanted_table in (None, table):
                del self.failures[index]
                return status_code
        return None

    @staticmethod
    def _matches(row, params):
        for column, expr in params.items():
            if column in ("select", "order"):
                continue
            op, _, value = expr.partition(".")
            if op == "is" and value == "null":
                if row.get(column) is not None:
                    return False
            elif op == "eq":
                if row.get(column) is None or _render(row.get(column)) != value:
                    return False
        return True

    def _embed(self, table, row, select):
        if "decisions(*)" in select and table == "todos":
            decisions = [d for d in self.tables.get("decisions", []) if d.get("todo_id") == row["id"]]
            return {**row, "decisions": decisions}
        return dict(row)

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        table = request.url.path.rsplit("/", 1)[-1]
        status_code = self._take_failure(request.method, table)
        if status_code is not None:
            return httpx.Response(status_code, json={"message": "remote store unavailable"})
        params = dict(request.url.params)
        rows = self.tables.setdefault(table, [])
        if request.method == "GET":
            matched = [self._embed(table, r, params.get("select", "*")) for r in rows if self._matches(r, params)]
            order = params.get("order")
            if order:
                column, _, direction = order.partition(".")
                matched.sort(key=lambda r: r.get(column) or "", reverse=direction == "desc")
            return httpx.Response(200, json=matched)
        if request.method == "POST":
            payload = json.loads(request.content)
            row = self.seed(table, **payload)
            if table == "todos":
                row.setdefault("completed", False)
            return httpx.Response(201, json=[row])
        if request.method == "PATCH":
            payload = json.loads(request.content)
            updated = []
            for row in rows:
                if self._matches(row, params):
                    row.update(payload)
                    updated.append(dict(row))
            return httpx.Response(200, json=updated)
        if request.method == "DELETE":
            self.tables[table] = [r for r in rows if not self._matches(r, params)]
            return httpx.Response(204)
        return httpx.Response(405)


@pytest.fixture()
def table_server():
    return FakeTableServer()


@pytest.fixture()
async def table_client(table_server):
    async with httpx.AsyncClient(transport=httpx.MockTransport(table_server.handle)) as http:
        yield TableClient(http, base_url="https://tables.example.test", api_key="anon-key", access_token="user-token")

"""Thin async client for the hosted, PostgREST-style table API.

Each entity lives in its own table. Rows are scoped to a user through a
``user_id`` column and carry server-assigned ``id`` and ``created_at`` values.
The client only knows four verbs (select, insert, update, delete) with
equality filters; everything entity-specific lives in ``hackops.crud``.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

import httpx

logger = logging.getLogger(__name__)


class RemoteStoreError(Exception):
    """Raised when the table API is unreachable or answers with an error."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def _filter_value(value: Any) -> str:
    if value is None:
        return "is.null"
    if isinstance(value, bool):
        return f"eq.{str(value).lower()}"
    return f"eq.{value}"


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        for key in ("message", "error", "hint", "details"):
            if body.get(key):
                return str(body[key])
    return response.reason_phrase or f"HTTP {response.status_code}"


def _raise_for_status(response: httpx.Response, context: str) -> None:
    if response.is_success:
        return
    message = _error_message(response)
    if response.status_code in (401, 403):
        logger.warning("Table API rejected credentials during %s", context)
    else:
        logger.error("Table API error %s during %s: %s", response.status_code, context, message)
    raise RemoteStoreError(f"{context}: {message}", status_code=response.status_code)


class TableClient:
    def __init__(
        self,
        http: httpx.AsyncClient,
        *,
        base_url: str,
        api_key: str = "",
        access_token: str | None = None,
    ) -> None:
        self.http = http
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.access_token = access_token

    def _url(self, table: str) -> str:
        return f"{self.base_url}/rest/v1/{table}"

    def _headers(self, prefer: str | None = None) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.api_key:
            headers["apikey"] = self.api_key
        token = self.access_token or self.api_key
        if token:
            headers["Authorization"] = f"Bearer {token}"
        if prefer:
            headers["Prefer"] = prefer
        return headers

    @staticmethod
    def _params(
        filters: Mapping[str, Any] | None = None,
        *,
        columns: str | None = None,
        order: str | None = None,
    ) -> dict[str, str]:
        params: dict[str, str] = {}
        if columns:
            params["select"] = columns
        for column, value in (filters or {}).items():
            params[column] = _filter_value(value)
        if order:
            params["order"] = order
        return params

    async def _request(
        self,
        method: str,
        table: str,
        *,
        params: dict[str, str],
        json: Any = None,
        prefer: str | None = None,
    ) -> Any:
        context = f"{method} {table}"
        try:
            response = await self.http.request(
                method,
                self._url(table),
                params=params,
                json=json,
                headers=self._headers(prefer),
            )
        except httpx.HTTPError as exc:
            logger.error("Table API request failed during %s: %s", context, exc)
            raise RemoteStoreError(f"{context}: {exc}") from exc
        _raise_for_status(response, context)
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise RemoteStoreError(f"{context}: response was not JSON", status_code=response.status_code) from exc

    async def select(
        self,
        table: str,
        *,
        filters: Mapping[str, Any] | None = None,
        order: str | None = None,
        columns: str = "*",
    ) -> list[dict[str, Any]]:
        rows = await self._request("GET", table, params=self._params(filters, columns=columns, order=order))
        return list(rows or [])

    async def insert(self, table: str, row: Mapping[str, Any]) -> dict[str, Any]:
        rows = await self._request(
            "POST",
            table,
            params=self._params(columns="*"),
            json=dict(row),
            prefer="return=representation",
        )
        return self._single(rows, f"POST {table}")

    async def update(
        self,
        table: str,
        values: Mapping[str, Any],
        *,
        filters: Mapping[str, Any],
    ) -> list[dict[str, Any]]:
        rows = await self._request(
            "PATCH",
            table,
            params=self._params(filters, columns="*"),
            json=dict(values),
            prefer="return=representation",
        )
        return list(rows or [])

    async def update_one(
        self,
        table: str,
        values: Mapping[str, Any],
        *,
        filters: Mapping[str, Any],
    ) -> dict[str, Any]:
        rows = await self.update(table, values, filters=filters)
        return self._single(rows, f"PATCH {table}")

    async def delete(self, table: str, *, filters: Mapping[str, Any]) -> None:
        if not filters:
            # An unfiltered DELETE would empty the table.
            raise ValueError("delete requires at least one filter")
        await self._request("DELETE", table, params=self._params(filters))

    @staticmethod
    def _single(rows: Any, context: str) -> dict[str, Any]:
        if isinstance(rows, dict):
            return rows
        if not rows:
            raise RemoteStoreError(f"{context}: no row returned", status_code=404)
        return rows[0]


def row_from(record, *, exclude: set[str] | None = None, user_id: str | None = None) -> dict[str, Any]:
    """Build an insert/update payload (snake_case columns) from a pydantic record."""

    skip = {"id", "created_at"} | set(exclude or ())
    row = record.model_dump(exclude=skip, exclude_none=True)
    if user_id is not None:
        row["user_id"] = user_id
    return row

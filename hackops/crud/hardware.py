from __future__ import annotations

from typing import Any

from ..remote.client import TableClient, row_from
from ..schemas.hardware import Hardware

TABLE = "hardware"


async def list_hardware(client: TableClient, user_id: str) -> list[Hardware]:
    """Return the user's hardware items, newest first."""
    rows = await client.select(TABLE, filters={"user_id": user_id}, order="created_at.desc")
    return [Hardware.model_validate(row) for row in rows]


async def create_hardware(client: TableClient, user_id: str, item: Hardware) -> Hardware:
    row = await client.insert(TABLE, row_from(item, user_id=user_id))
    return Hardware.model_validate(row)


async def update_hardware(client: TableClient, item_id: str, changes: dict[str, Any]) -> Hardware:
    row = await client.update_one(TABLE, changes, filters={"id": item_id})
    return Hardware.model_validate(row)


async def delete_hardware(client: TableClient, item_id: str) -> None:
    await client.delete(TABLE, filters={"id": item_id})

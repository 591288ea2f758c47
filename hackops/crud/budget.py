from __future__ import annotations

from typing import Any

from ..remote.client import TableClient, row_from
from ..schemas.budget import BudgetEntry

TABLE = "budget_entries"


async def list_budget_entries(client: TableClient, user_id: str) -> list[BudgetEntry]:
    rows = await client.select(TABLE, filters={"user_id": user_id}, order="created_at.desc")
    return [BudgetEntry.model_validate(row) for row in rows]


async def create_budget_entry(client: TableClient, user_id: str, entry: BudgetEntry) -> BudgetEntry:
    row = await client.insert(TABLE, row_from(entry, user_id=user_id))
    return BudgetEntry.model_validate(row)


async def update_budget_entry(client: TableClient, entry_id: str, changes: dict[str, Any]) -> BudgetEntry:
    row = await client.update_one(TABLE, changes, filters={"id": entry_id})
    return BudgetEntry.model_validate(row)


async def delete_budget_entry(client: TableClient, entry_id: str) -> None:
    await client.delete(TABLE, filters={"id": entry_id})

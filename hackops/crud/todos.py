"""Remote access for the ``todos`` and ``decisions`` tables."""

from __future__ import annotations

from ..remote.client import TableClient
from ..schemas.todo import Decision, Todo

TODOS = "todos"
DECISIONS = "decisions"


def _to_todo(row: dict) -> Todo:
    todo = Todo.model_validate(row)
    # Embedded decisions arrive in no particular order.
    todo.decisions.sort(key=lambda d: d.created_at)
    return todo


async def list_todos(client: TableClient, user_id: str) -> list[Todo]:
    rows = await client.select(
        TODOS,
        columns="*, decisions(*)",
        filters={"user_id": user_id},
        order="created_at.desc",
    )
    return [_to_todo(row) for row in rows]


async def create_todo(client: TableClient, user_id: str, title: str) -> Todo:
    row = await client.insert(TODOS, {"title": title, "user_id": user_id})
    row.setdefault("decisions", [])
    return _to_todo(row)


async def set_todo_completed(client: TableClient, todo_id: str, completed: bool) -> None:
    await client.update(TODOS, {"completed": completed}, filters={"id": todo_id})


async def rename_todo(client: TableClient, todo_id: str, title: str) -> None:
    await client.update_one(TODOS, {"title": title}, filters={"id": todo_id})


async def delete_todo(client: TableClient, todo_id: str) -> None:
    await client.delete(TODOS, filters={"id": todo_id})


async def list_decisions(client: TableClient, todo_id: str) -> list[Decision]:
    rows = await client.select(DECISIONS, filters={"todo_id": todo_id}, order="created_at.desc")
    return [Decision.model_validate(row) for row in rows]


async def create_decision(client: TableClient, todo_id: str, text: str) -> Decision:
    row = await client.insert(DECISIONS, {"text": text, "todo_id": todo_id})
    return Decision.model_validate(row)


async def update_decision(client: TableClient, decision_id: str, text: str) -> Decision:
    row = await client.update_one(DECISIONS, {"text": text}, filters={"id": decision_id})
    return Decision.model_validate(row)


async def delete_decision(client: TableClient, decision_id: str) -> None:
    await client.delete(DECISIONS, filters={"id": decision_id})

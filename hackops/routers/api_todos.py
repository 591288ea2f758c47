from __future__ import annotations

from fastapi import APIRouter, Depends

from ..deps.workspace import get_workspace
from ..schemas.todo import Decision, DecisionCreate, Todo, TodoCreate, TodoSummary, TodoUpdate
from ..services.workspace import Workspace

router = APIRouter(prefix="/api/v1/todos", tags=["todos"])


@router.get("", response_model=list[Todo])
async def api_list(ws: Workspace = Depends(get_workspace)):
    return ws.todos.items


@router.get("/summary", response_model=TodoSummary)
async def api_summary(ws: Workspace = Depends(get_workspace)):
    total = len(ws.todos.items)
    completed = ws.todos.completed_count
    return TodoSummary(total=total, completed=completed, open=total - completed)


@router.post("", response_model=Todo, status_code=201)
async def api_create(payload: TodoCreate, ws: Workspace = Depends(get_workspace)):
    return await ws.todos.add(payload.title)


@router.patch("/{todo_id}", response_model=Todo)
async def api_update(todo_id: str, payload: TodoUpdate, ws: Workspace = Depends(get_workspace)):
    todo = ws.todos.todos.get(todo_id)
    if payload.title is not None:
        todo = await ws.todos.rename(todo_id, payload.title)
    if payload.completed is not None and payload.completed != todo.completed:
        todo = await ws.todos.toggle(todo_id)
    return todo


@router.post("/{todo_id}/toggle", response_model=Todo)
async def api_toggle(todo_id: str, ws: Workspace = Depends(get_workspace)):
    return await ws.todos.toggle(todo_id)


@router.delete("/{todo_id}")
async def api_delete(todo_id: str, ws: Workspace = Depends(get_workspace)):
    await ws.todos.delete(todo_id)
    return {"status": "deleted"}


@router.post("/{todo_id}/decisions", response_model=Decision, status_code=201)
async def api_add_decision(todo_id: str, payload: DecisionCreate, ws: Workspace = Depends(get_workspace)):
    return await ws.todos.add_decision(todo_id, payload.text)


@router.patch("/{todo_id}/decisions/{decision_id}", response_model=Decision)
async def api_edit_decision(
    todo_id: str,
    decision_id: str,
    payload: DecisionCreate,
    ws: Workspace = Depends(get_workspace),
):
    return await ws.todos.edit_decision(todo_id, decision_id, payload.text)


@router.delete("/{todo_id}/decisions/{decision_id}")
async def api_delete_decision(todo_id: str, decision_id: str, ws: Workspace = Depends(get_workspace)):
    await ws.todos.delete_decision(todo_id, decision_id)
    return {"status": "deleted"}

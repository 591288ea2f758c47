from __future__ import annotations

from typing import Optional

from pydantic import Field

from .common import CamelModel, Record


class Decision(Record):
    text: str


class Todo(Record):
    title: str
    completed: bool = False
    decisions: list[Decision] = Field(default_factory=list)


class TodoCreate(CamelModel):
    title: str


class TodoUpdate(CamelModel):
    title: Optional[str] = None
    completed: Optional[bool] = None


class DecisionCreate(CamelModel):
    text: str


class TodoSummary(CamelModel):
    total: int
    completed: int
    open: int

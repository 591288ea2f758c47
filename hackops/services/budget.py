from __future__ import annotations

import math
from typing import Optional

from ..crud import budget as remote_budget
from ..schemas.budget import BudgetEntry
from .state import EntityList, optimistic, require_text

CATEGORIES = [
    "Sponsorship",
    "Registration",
    "Food & Drinks",
    "Venue",
    "Prizes",
    "Hardware",
    "Marketing",
    "Transportation",
    "Other",
]

ENTRY_TYPES = ("income", "expense")


def _entry_type(value: Optional[str]) -> str:
    if value not in ENTRY_TYPES:
        raise ValueError("type must be income or expense")
    return value


def _amount(value: object) -> float:
    if value is None or value == "":
        raise ValueError("amount is required")
    try:
        amount = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise ValueError("amount must be a number") from exc
    if not math.isfinite(amount):
        raise ValueError("amount must be a number")
    return amount


class BudgetLedger:
    """Income and expense entries with running totals."""

    def __init__(self, entries: EntityList[BudgetEntry], *, user_id: str) -> None:
        self.entries = entries
        self.user_id = user_id

    @property
    def items(self) -> list[BudgetEntry]:
        return self.entries.items

    @property
    def total_income(self) -> float:
        return sum(e.amount for e in self.items if e.type == "income")

    @property
    def total_expenses(self) -> float:
        return sum(e.amount for e in self.items if e.type == "expense")

    @property
    def balance(self) -> float:
        return self.total_income - self.total_expenses

    def by_category(self) -> dict[str, dict[str, float]]:
        totals: dict[str, dict[str, float]] = {}
        for entry in self.items:
            bucket = totals.setdefault(entry.category, {"income": 0.0, "expense": 0.0})
            bucket[entry.type] += entry.amount
        return dict(sorted(totals.items()))

    async def add(self, entry_type: str, description: str, amount: object, category: str) -> BudgetEntry:
        entry = BudgetEntry(
            type=_entry_type(entry_type),
            description=require_text(description, "description"),
            amount=_amount(amount),
            category=require_text(category, "category"),
        )
        async with optimistic(self.entries, action="budget.add"):
            self.entries.items.append(entry)
            if self.entries.remote is not None:
                saved = await remote_budget.create_budget_entry(self.entries.remote, self.user_id, entry)
                self.entries.swap(entry.id, saved)
                entry = saved
        return entry

    async def edit(
        self,
        entry_id: str,
        *,
        entry_type: Optional[str] = None,
        description: Optional[str] = None,
        amount: object = None,
        category: Optional[str] = None,
    ) -> BudgetEntry:
        entry = self.entries.get(entry_id)
        changes: dict[str, object] = {}
        if entry_type is not None:
            changes["type"] = _entry_type(entry_type)
        if description is not None:
            changes["description"] = require_text(description, "description")
        if amount is not None:
            changes["amount"] = _amount(amount)
        if category is not None:
            changes["category"] = require_text(category, "category")
        if not changes:
            return entry
        async with optimistic(self.entries, action="budget.edit"):
            for key, value in changes.items():
                setattr(entry, key, value)
            if self.entries.remote is not None:
                await remote_budget.update_budget_entry(self.entries.remote, entry_id, changes)
        return entry

    async def delete(self, entry_id: str) -> None:
        self.entries.get(entry_id)
        async with optimistic(self.entries, action="budget.delete"):
            self.entries.remove(entry_id)
            if self.entries.remote is not None:
                await remote_budget.delete_budget_entry(self.entries.remote, entry_id)

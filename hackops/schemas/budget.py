from __future__ import annotations

from typing import Literal, Optional

from .common import CamelModel, Record

EntryType = Literal["income", "expense"]


class BudgetEntry(Record):
    type: EntryType
    description: str
    amount: float
    category: str


class BudgetEntryCreate(CamelModel):
    type: EntryType = "expense"
    description: str
    amount: Optional[float] = None
    category: str = ""


class BudgetEntryUpdate(CamelModel):
    type: Optional[EntryType] = None
    description: Optional[str] = None
    amount: Optional[float] = None
    category: Optional[str] = None


class CategoryTotals(CamelModel):
    category: str
    income: float = 0.0
    expense: float = 0.0


class BudgetSummary(CamelModel):
    total_income: float
    total_expenses: float
    balance: float
    categories: list[CategoryTotals]

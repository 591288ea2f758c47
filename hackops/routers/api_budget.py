from __future__ import annotations

from fastapi import APIRouter, Depends

from ..deps.workspace import get_workspace
from ..schemas.budget import BudgetEntry, BudgetEntryCreate, BudgetEntryUpdate, BudgetSummary, CategoryTotals
from ..services.budget import CATEGORIES
from ..services.workspace import Workspace

router = APIRouter(prefix="/api/v1/budget", tags=["budget"])


@router.get("", response_model=list[BudgetEntry])
async def api_list(ws: Workspace = Depends(get_workspace)):
    return ws.budget.items


@router.get("/categories", response_model=list[str])
async def api_categories():
    return CATEGORIES


@router.get("/summary", response_model=BudgetSummary)
async def api_summary(ws: Workspace = Depends(get_workspace)):
    ledger = ws.budget
    return BudgetSummary(
        total_income=ledger.total_income,
        total_expenses=ledger.total_expenses,
        balance=ledger.balance,
        categories=[
            CategoryTotals(category=name, income=totals["income"], expense=totals["expense"])
            for name, totals in ledger.by_category().items()
        ],
    )


@router.post("", response_model=BudgetEntry, status_code=201)
async def api_create(payload: BudgetEntryCreate, ws: Workspace = Depends(get_workspace)):
    return await ws.budget.add(payload.type, payload.description, payload.amount, payload.category)


@router.patch("/{entry_id}", response_model=BudgetEntry)
async def api_update(entry_id: str, payload: BudgetEntryUpdate, ws: Workspace = Depends(get_workspace)):
    return await ws.budget.edit(
        entry_id,
        entry_type=payload.type,
        description=payload.description,
        amount=payload.amount,
        category=payload.category,
    )


@router.delete("/{entry_id}")
async def api_delete(entry_id: str, ws: Workspace = Depends(get_workspace)):
    await ws.budget.delete(entry_id)
    return {"status": "deleted"}

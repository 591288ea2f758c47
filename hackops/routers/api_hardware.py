from __future__ import annotations

from fastapi import APIRouter, Depends

from ..deps.workspace import get_workspace
from ..schemas.hardware import Hardware, HardwareCreate, HardwareOut, HardwareSummary, HardwareUpdate
from ..services.hardware import HardwareInventory
from ..services.workspace import Workspace

router = APIRouter(prefix="/api/v1/hardware", tags=["hardware"])


def _to_out(inventory: HardwareInventory, item: Hardware) -> HardwareOut:
    return HardwareOut(
        id=item.id,
        created_at=item.created_at,
        name=item.name,
        description=item.description,
        quantity=item.quantity,
        available=inventory.available(item),
        reserved=inventory.reserved(item),
    )


@router.get("", response_model=list[HardwareOut])
async def api_list(available_only: bool = False, ws: Workspace = Depends(get_workspace)):
    inventory = ws.inventory
    items = inventory.reservable() if available_only else inventory.items
    return [_to_out(inventory, item) for item in items]


@router.get("/summary", response_model=HardwareSummary)
async def api_summary(ws: Workspace = Depends(get_workspace)):
    inventory = ws.inventory
    return HardwareSummary(
        total_items=inventory.total_quantity,
        total_available=inventory.total_available,
        reservable=[item.id for item in inventory.reservable()],
    )


@router.get("/{item_id}", response_model=HardwareOut)
async def api_get(item_id: str, ws: Workspace = Depends(get_workspace)):
    return _to_out(ws.inventory, ws.inventory.hardware.get(item_id))


@router.post("", response_model=HardwareOut, status_code=201)
async def api_create(payload: HardwareCreate, ws: Workspace = Depends(get_workspace)):
    item = await ws.inventory.add(payload.name, payload.description, payload.quantity)
    return _to_out(ws.inventory, item)


@router.patch("/{item_id}", response_model=HardwareOut)
async def api_update(item_id: str, payload: HardwareUpdate, ws: Workspace = Depends(get_workspace)):
    item = await ws.inventory.edit(
        item_id,
        name=payload.name,
        description=payload.description,
        quantity=payload.quantity,
    )
    return _to_out(ws.inventory, item)


@router.delete("/{item_id}")
async def api_delete(item_id: str, ws: Workspace = Depends(get_workspace)):
    await ws.inventory.delete(item_id)
    return {"status": "deleted"}

from __future__ import annotations

from fastapi import APIRouter, Depends

from ..deps.workspace import get_workspace
from ..schemas.reservation import Reservation, ReservationCreate, ReservationOut, ReservationUpdate
from ..services.reservations import ReservationDesk
from ..services.workspace import Workspace

router = APIRouter(prefix="/api/v1/reservations", tags=["reservations"])


def _to_out(desk: ReservationDesk, reservation: Reservation) -> ReservationOut:
    return ReservationOut(
        **reservation.model_dump(),
        hardware_name=desk.hardware_name(reservation.hardware_id),
        participant_name=desk.participant_name(reservation.participant_id),
    )


@router.get("", response_model=list[ReservationOut])
async def api_list(ws: Workspace = Depends(get_workspace)):
    desk = ws.reservations
    return [_to_out(desk, r) for r in desk.items]


@router.post("", response_model=ReservationOut, status_code=201)
async def api_create(payload: ReservationCreate, ws: Workspace = Depends(get_workspace)):
    reservation = await ws.reservations.create(
        payload.hardware_id,
        payload.participant_id,
        payload.quantity,
        status=payload.status,
    )
    return _to_out(ws.reservations, reservation)


@router.patch("/{reservation_id}", response_model=ReservationOut)
async def api_update(reservation_id: str, payload: ReservationUpdate, ws: Workspace = Depends(get_workspace)):
    reservation = await ws.reservations.edit_quantity(reservation_id, payload.quantity)
    return _to_out(ws.reservations, reservation)


@router.post("/{reservation_id}/approve", response_model=ReservationOut)
async def api_approve(reservation_id: str, ws: Workspace = Depends(get_workspace)):
    reservation = await ws.reservations.approve(reservation_id)
    return _to_out(ws.reservations, reservation)


@router.post("/{reservation_id}/return", response_model=ReservationOut)
async def api_return(reservation_id: str, ws: Workspace = Depends(get_workspace)):
    reservation = await ws.reservations.return_hardware(reservation_id)
    return _to_out(ws.reservations, reservation)


@router.delete("/{reservation_id}")
async def api_delete(reservation_id: str, ws: Workspace = Depends(get_workspace)):
    await ws.reservations.delete(reservation_id)
    return {"status": "deleted"}

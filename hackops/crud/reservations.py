from __future__ import annotations

from ..remote.client import TableClient, row_from
from ..schemas.reservation import Reservation, ReservationStatus

TABLE = "reservations"


async def list_reservations(client: TableClient, user_id: str) -> list[Reservation]:
    rows = await client.select(TABLE, filters={"user_id": user_id}, order="created_at.desc")
    return [Reservation.model_validate(row) for row in rows]


async def create_reservation(client: TableClient, user_id: str, reservation: Reservation) -> Reservation:
    row = await client.insert(TABLE, row_from(reservation, user_id=user_id))
    return Reservation.model_validate(row)


async def update_reservation_status(client: TableClient, reservation_id: str, status: ReservationStatus) -> None:
    await client.update(TABLE, {"status": status}, filters={"id": reservation_id})


async def update_reservation_quantity(client: TableClient, reservation_id: str, quantity: int) -> None:
    await client.update(TABLE, {"quantity": quantity}, filters={"id": reservation_id})


async def delete_reservation(client: TableClient, reservation_id: str) -> None:
    await client.delete(TABLE, filters={"id": reservation_id})


async def restore_reservation(client: TableClient, user_id: str, reservation: Reservation) -> Reservation:
    """Re-insert a deleted row with its original id and timestamp."""
    row = row_from(reservation, user_id=user_id)
    row.update(id=reservation.id, created_at=reservation.created_at)
    inserted = await client.insert(TABLE, row)
    return Reservation.model_validate(inserted)

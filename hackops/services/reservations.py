"""Hardware reservations made on behalf of participants.

In stored availability mode a reservation change also moves the hardware's
``available`` counter. The reservation row is written first; if the counter
write then fails, the reservation write is undone remotely before the local
rollback, so neither table keeps half of the change.
"""

from __future__ import annotations

import logging
from functools import partial
from typing import Any, Awaitable, Callable, Optional

from ..crud import reservations as remote_reservations
from ..remote.client import RemoteStoreError
from ..schemas.hardware import Hardware
from ..schemas.reservation import Reservation
from .availability import check_capacity
from .hardware import HardwareInventory
from .roster import Roster
from .state import EntityList, optimistic

logger = logging.getLogger(__name__)

UNKNOWN = "Unknown"

Undo = Optional[Callable[[], Awaitable[Any]]]


def _positive(value: object) -> int:
    if isinstance(value, bool):
        raise ValueError("quantity must be a whole number")
    try:
        quantity = int(value)  # type: ignore[call-overload]
    except (TypeError, ValueError) as exc:
        raise ValueError("quantity must be a whole number") from exc
    if quantity < 1:
        raise ValueError("quantity must be at least 1")
    return quantity


class ReservationDesk:
    def __init__(
        self,
        reservations: EntityList[Reservation],
        inventory: HardwareInventory,
        roster: Roster,
        *,
        user_id: str,
    ) -> None:
        self.reservations = reservations
        self.inventory = inventory
        self.roster = roster
        self.user_id = user_id

    @property
    def items(self) -> list[Reservation]:
        return self.reservations.items

    def participant_name(self, participant_id: str) -> str:
        participant = self.roster.participants.find(participant_id)
        return participant.name if participant else UNKNOWN

    def hardware_name(self, hardware_id: str) -> str:
        item = self.inventory.hardware.find(hardware_id)
        return item.name if item else UNKNOWN

    async def _shift(self, item: Hardware, delta: int, undo: Undo, *, action: str) -> None:
        try:
            await self.inventory.shift_available(item, delta)
        except RemoteStoreError:
            if undo is not None:
                try:
                    await undo()
                except RemoteStoreError as exc:
                    logger.error(
                        "sync.compensation_failed",
                        extra={"extra_data": {"action": action, "status": exc.status_code, "error": exc.message}},
                    )
            raise

    async def create(
        self,
        hardware_id: str,
        participant_id: str,
        quantity: object = 1,
        status: str = "approved",
    ) -> Reservation:
        if status not in ("pending", "approved"):
            raise ValueError("new reservations must be pending or approved")
        item = self.inventory.hardware.get(hardware_id)
        self.roster.participants.get(participant_id)
        count = _positive(quantity)
        available = self.inventory.available(item)
        if count > available:
            raise ValueError(f"only {available} unit(s) of {item.name} available")
        if status == "approved":
            check_capacity(item, self.items, count)

        reservation = Reservation(
            hardware_id=hardware_id,
            participant_id=participant_id,
            quantity=count,
            status=status,
        )
        remote = self.reservations.remote
        async with optimistic(self.reservations, self.inventory.hardware, action="reservations.create"):
            self.reservations.items.append(reservation)
            undo: Undo = None
            if remote is not None:
                saved = await remote_reservations.create_reservation(remote, self.user_id, reservation)
                self.reservations.swap(reservation.id, saved)
                reservation = saved
                undo = partial(remote_reservations.delete_reservation, remote, saved.id)
            await self._shift(item, -count, undo, action="reservations.create")
        return reservation

    async def approve(self, reservation_id: str) -> Reservation:
        reservation = self.reservations.get(reservation_id)
        if reservation.status != "pending":
            raise ValueError(f"only pending reservations can be approved (status is {reservation.status})")
        item = self.inventory.hardware.get(reservation.hardware_id)
        check_capacity(item, self.items, reservation.quantity, exclude=reservation.id)
        async with optimistic(self.reservations, action="reservations.approve"):
            reservation.status = "approved"
            if self.reservations.remote is not None:
                await remote_reservations.update_reservation_status(
                    self.reservations.remote, reservation_id, "approved"
                )
        return reservation

    async def return_hardware(self, reservation_id: str) -> Reservation:
        reservation = self.reservations.get(reservation_id)
        if reservation.status == "returned":
            raise ValueError("reservation has already been returned")
        item = self.inventory.hardware.find(reservation.hardware_id)
        previous = reservation.status
        remote = self.reservations.remote
        async with optimistic(self.reservations, self.inventory.hardware, action="reservations.return"):
            reservation.status = "returned"
            undo: Undo = None
            if remote is not None:
                await remote_reservations.update_reservation_status(remote, reservation_id, "returned")
                undo = partial(remote_reservations.update_reservation_status, remote, reservation_id, previous)
            if item is not None:
                await self._shift(item, reservation.quantity, undo, action="reservations.return")
        return reservation

    async def edit_quantity(self, reservation_id: str, quantity: object) -> Reservation:
        reservation = self.reservations.get(reservation_id)
        item = self.inventory.hardware.get(reservation.hardware_id)
        count = _positive(quantity)
        active = reservation.status != "returned"
        # A reservation's own units are free to re-use when resizing it.
        limit = self.inventory.available(item) + (reservation.quantity if active else 0)
        if count > limit:
            raise ValueError(f"only {limit} unit(s) of {item.name} available")
        if reservation.status == "approved":
            check_capacity(item, self.items, count, exclude=reservation.id)
        if count == reservation.quantity:
            return reservation

        previous = reservation.quantity
        remote = self.reservations.remote
        async with optimistic(self.reservations, self.inventory.hardware, action="reservations.edit"):
            reservation.quantity = count
            undo: Undo = None
            if remote is not None:
                await remote_reservations.update_reservation_quantity(remote, reservation_id, count)
                undo = partial(remote_reservations.update_reservation_quantity, remote, reservation_id, previous)
            if active:
                await self._shift(item, previous - count, undo, action="reservations.edit")
        return reservation

    async def delete(self, reservation_id: str) -> None:
        reservation = self.reservations.get(reservation_id)
        item = self.inventory.hardware.find(reservation.hardware_id)
        remote = self.reservations.remote
        async with optimistic(self.reservations, self.inventory.hardware, action="reservations.delete"):
            self.reservations.remove(reservation_id)
            undo: Undo = None
            if remote is not None:
                await remote_reservations.delete_reservation(remote, reservation_id)
                undo = partial(remote_reservations.restore_reservation, remote, self.user_id, reservation)
            if item is not None and reservation.status != "returned":
                await self._shift(item, reservation.quantity, undo, action="reservations.delete")

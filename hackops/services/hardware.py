"""Hardware inventory.

Two availability modes are supported. ``stored`` keeps an ``available``
counter on each record and every reservation change shifts it; ``derived``
never stores the counter and computes it from the reservation list.
"""

from __future__ import annotations

from typing import Literal, Optional

from ..crud import hardware as remote_hardware
from ..schemas.hardware import Hardware
from ..schemas.reservation import Reservation
from .availability import active_quantity, derived_available
from .state import EntityList, optimistic, require_text

AvailabilityMode = Literal["stored", "derived"]


def _quantity(value: object) -> int:
    if value is None or value == "":
        raise ValueError("quantity is required")
    if isinstance(value, bool):
        raise ValueError("quantity must be a whole number")
    try:
        quantity = int(value)  # type: ignore[call-overload]
    except (TypeError, ValueError) as exc:
        raise ValueError("quantity must be a whole number") from exc
    if quantity < 0:
        raise ValueError("quantity cannot be negative")
    return quantity


class HardwareInventory:
    def __init__(
        self,
        hardware: EntityList[Hardware],
        reservations: EntityList[Reservation],
        *,
        user_id: str,
        mode: AvailabilityMode = "derived",
    ) -> None:
        self.hardware = hardware
        self.reservations = reservations
        self.user_id = user_id
        self.mode = mode

    @property
    def items(self) -> list[Hardware]:
        return self.hardware.items

    @property
    def stored(self) -> bool:
        return self.mode == "stored"

    def available(self, item: Hardware) -> int:
        if self.stored:
            return item.quantity if item.available is None else item.available
        return derived_available(item, self.reservations.items)

    def reserved(self, item: Hardware) -> int:
        return active_quantity(item.id, self.reservations.items)

    @property
    def total_quantity(self) -> int:
        return sum(item.quantity for item in self.items)

    @property
    def total_available(self) -> int:
        return sum(self.available(item) for item in self.items)

    def reservable(self) -> list[Hardware]:
        return [item for item in self.items if self.available(item) > 0]

    async def add(self, name: str, description: str = "", quantity: object = None) -> Hardware:
        name = require_text(name, "name")
        count = _quantity(quantity)
        item = Hardware(
            name=name,
            description=(description or "").strip(),
            quantity=count,
            available=count if self.stored else None,
        )
        async with optimistic(self.hardware, action="hardware.add"):
            self.hardware.items.append(item)
            if self.hardware.remote is not None:
                saved = await remote_hardware.create_hardware(self.hardware.remote, self.user_id, item)
                self.hardware.swap(item.id, saved)
                item = saved
        return item

    async def edit(
        self,
        item_id: str,
        *,
        name: Optional[str] = None,
        description: Optional[str] = None,
        quantity: object = None,
    ) -> Hardware:
        item = self.hardware.get(item_id)
        changes: dict[str, object] = {}
        if name is not None:
            changes["name"] = require_text(name, "name")
        if description is not None:
            changes["description"] = description.strip()
        if quantity is not None:
            count = _quantity(quantity)
            changes["quantity"] = count
            if self.stored:
                changes["available"] = self.available(item) + (count - item.quantity)
        if not changes:
            return item
        async with optimistic(self.hardware, action="hardware.edit"):
            for key, value in changes.items():
                setattr(item, key, value)
            if self.hardware.remote is not None:
                await remote_hardware.update_hardware(self.hardware.remote, item_id, changes)
        return item

    async def delete(self, item_id: str) -> None:
        self.hardware.get(item_id)
        async with optimistic(self.hardware, action="hardware.delete"):
            self.hardware.remove(item_id)
            if self.hardware.remote is not None:
                await remote_hardware.delete_hardware(self.hardware.remote, item_id)

    async def shift_available(self, item: Hardware, delta: int) -> None:
        """Move the stored counter by ``delta``.

        Callers run this inside their own ``optimistic`` block that also
        covers ``self.hardware``; derived mode has nothing to store.
        """

        if not self.stored or not delta:
            return
        item.available = self.available(item) + delta
        if self.hardware.remote is not None:
            await remote_hardware.update_hardware(
                self.hardware.remote, item.id, {"available": item.available}
            )

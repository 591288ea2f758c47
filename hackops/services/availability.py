"""Hardware availability arithmetic.

A reservation holds units until it is returned, so pending and approved
reservations both count against the total quantity.
"""

from __future__ import annotations

from typing import Iterable, Optional

from ..schemas.hardware import Hardware
from ..schemas.reservation import Reservation

ACTIVE_STATUSES = ("pending", "approved")


def active_quantity(hardware_id: str, reservations: Iterable[Reservation], *, exclude: Optional[str] = None) -> int:
    return sum(
        r.quantity
        for r in reservations
        if r.hardware_id == hardware_id and r.status in ACTIVE_STATUSES and r.id != exclude
    )


def approved_quantity(hardware_id: str, reservations: Iterable[Reservation], *, exclude: Optional[str] = None) -> int:
    return sum(
        r.quantity
        for r in reservations
        if r.hardware_id == hardware_id and r.status == "approved" and r.id != exclude
    )


def derived_available(hardware: Hardware, reservations: Iterable[Reservation]) -> int:
    return max(hardware.quantity - active_quantity(hardware.id, reservations), 0)


def check_capacity(
    hardware: Hardware,
    reservations: Iterable[Reservation],
    quantity: int,
    *,
    exclude: Optional[str] = None,
) -> None:
    """Refuse to approve ``quantity`` more units than the item has in total."""

    approved = approved_quantity(hardware.id, reservations, exclude=exclude)
    if approved + quantity > hardware.quantity:
        remaining = max(hardware.quantity - approved, 0)
        raise ValueError(f"only {remaining} unit(s) of {hardware.name} can still be approved")

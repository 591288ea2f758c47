from __future__ import annotations

from typing import Literal

from .common import CamelModel, Record

ReservationStatus = Literal["pending", "approved", "returned"]


class Reservation(Record):
    hardware_id: str
    participant_id: str
    quantity: int
    status: ReservationStatus = "approved"


class ReservationCreate(CamelModel):
    hardware_id: str
    participant_id: str
    quantity: int = 1
    status: Literal["pending", "approved"] = "approved"


class ReservationUpdate(CamelModel):
    quantity: int


class ReservationOut(Reservation):
    hardware_name: str
    participant_name: str

from __future__ import annotations

from typing import Optional

from pydantic import Field

from .common import CamelModel, Record


class Hardware(Record):
    name: str
    description: str = ""
    quantity: int
    # Only maintained when availability is stored rather than derived.
    available: Optional[int] = None


class HardwareCreate(CamelModel):
    name: str
    description: str = ""
    quantity: Optional[int] = None


class HardwareUpdate(CamelModel):
    name: Optional[str] = None
    description: Optional[str] = None
    quantity: Optional[int] = None


class HardwareOut(Record):
    name: str
    description: str
    quantity: int
    available: int
    reserved: int = 0


class HardwareSummary(CamelModel):
    total_items: int
    total_available: int
    reservable: list[str] = Field(default_factory=list)

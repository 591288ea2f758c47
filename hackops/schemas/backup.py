from __future__ import annotations

from typing import Any, Optional

from .common import CamelModel


class BackupData(CamelModel):
    version: str
    exported_at: Optional[str] = None
    data: dict[str, list[Any]]


class BackupPreview(CamelModel):
    version: str
    exported_at: Optional[str] = None
    counts: dict[str, int]

"""JSON backup and restore of a whole workspace.

File layout::

    {"version": "1.1", "exportedAt": "...", "data": {"todos": [...], "budget": [...],
     "hardware": [...], "participants": [...], "reservations": [...], "teams": [...]}}

Import checks the top-level shape and that every section is a list. Record
shapes are not checked up front: when the backup is applied, rows that do not
fit their record type are skipped with a warning and the rest are imported.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any, Optional

from ..core.config import COLLECTIONS
from ..core.errors import BackupFormatError
from ..schemas.backup import BackupData, BackupPreview
from .workspace import Workspace

logger = logging.getLogger(__name__)

BACKUP_VERSION = "1.1"
REQUIRED_SECTIONS = ("todos", "budget", "hardware", "participants", "reservations")


def _now() -> datetime:
    return datetime.now(tz=timezone.utc)


def export_backup(workspace: Workspace, *, now: Optional[datetime] = None) -> dict[str, Any]:
    moment = now or _now()
    return {
        "version": BACKUP_VERSION,
        "exportedAt": moment.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
        "data": {name: workspace.lists[name].dump() for name in COLLECTIONS},
    }


def backup_filename(now: Optional[datetime] = None) -> str:
    return f"hackathon-backup-{(now or _now()).date().isoformat()}.json"


def _normalize_participant(record: Any) -> Any:
    if not isinstance(record, dict):
        return record
    return {
        **record,
        "skills": record.get("skills") or [],
        "checkedIn": record.get("checkedIn") if record.get("checkedIn") is not None else False,
        "teamId": record.get("teamId"),
    }


def parse_backup(text: str | bytes) -> BackupData:
    try:
        raw = json.loads(text)
    except (TypeError, ValueError, UnicodeDecodeError) as exc:
        raise BackupFormatError("Failed to parse backup file") from exc

    if not isinstance(raw, dict) or not raw.get("version") or raw.get("data") in (None, False, 0, ""):
        raise BackupFormatError("Invalid backup file format")
    data = raw["data"]
    if not isinstance(data, dict) or any(not isinstance(data.get(name), list) for name in REQUIRED_SECTIONS):
        raise BackupFormatError("Invalid backup data structure")

    sections = {name: list(data[name]) for name in REQUIRED_SECTIONS}
    sections["teams"] = list(data["teams"]) if isinstance(data.get("teams"), list) else []
    sections["participants"] = [_normalize_participant(p) for p in sections["participants"]]

    exported_at = raw.get("exportedAt")
    return BackupData(
        version=str(raw["version"]),
        exported_at=exported_at if isinstance(exported_at, str) else None,
        data=sections,
    )


def preview(backup: BackupData) -> BackupPreview:
    """Summarise what an import would replace so the user can confirm it."""

    return BackupPreview(
        version=backup.version,
        exported_at=backup.exported_at,
        counts={name: len(backup.data.get(name, [])) for name in COLLECTIONS},
    )


async def apply_backup(workspace: Workspace, backup: BackupData) -> BackupPreview:
    """Replace every collection with the backup's contents.

    Returns the number of records actually imported per section. Remote-backed
    collections are only replaced in memory; the hosted store keeps its rows.
    """

    converted = {
        name: workspace.lists[name].parse(backup.data.get(name, []), source="backup")
        for name in COLLECTIONS
    }
    for name, records in converted.items():
        entity_list = workspace.lists[name]
        entity_list.replace(records)
        await entity_list.persist()

    if workspace.remote_collections:
        logger.warning(
            "backup.remote_not_synced",
            extra={"extra_data": {"collections": workspace.remote_collections}},
        )
    return BackupPreview(
        version=backup.version,
        exported_at=backup.exported_at,
        counts={name: len(records) for name, records in converted.items()},
    )

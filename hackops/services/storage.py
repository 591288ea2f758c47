"""Per-user key/value storage holding one JSON array per collection."""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, Optional

from sqlalchemy.orm import Session, sessionmaker

from ..crud.local_storage import get_item, set_item
from ..schemas.common import new_id, utc_now_iso

logger = logging.getLogger(__name__)

Migrator = Callable[[Any], Any]

STORAGE_KEYS = {
    "todos": "hackathon-todos",
    "budget": "hackathon-budget",
    "hardware": "hackathon-hardware",
    "participants": "hackathon-participants",
    "reservations": "hackathon-reservations",
    "teams": "hackathon-teams",
}


class LocalStorage:
    def __init__(self, session_factory: sessionmaker[Session], owner: str) -> None:
        self._session_factory = session_factory
        self.owner = owner

    def load(self, key: str, default: Any, migrator: Optional[Migrator] = None) -> Any:
        """Read ``key``; a migrator's output is written straight back."""

        with self._session_factory() as db:
            raw = get_item(db, self.owner, key)
        if raw is None:
            return default
        try:
            parsed = json.loads(raw)
        except ValueError as exc:
            logger.error(
                "local_storage.unreadable",
                extra={"extra_data": {"owner": self.owner, "key": key, "error": str(exc)}},
            )
            return default
        if migrator is None:
            return parsed
        value = migrator(parsed)
        self.save(key, value)
        return value

    def save(self, key: str, value: Any) -> None:
        payload = json.dumps(value, ensure_ascii=False)
        with self._session_factory() as db:
            set_item(db, self.owner, key, payload)


def migrate_participants(data: Any) -> list[dict[str, Any]]:
    """Fill in fields that older participant records were saved without."""

    if not isinstance(data, list):
        return []
    migrated = []
    for record in data:
        if not isinstance(record, dict):
            continue
        skills = record.get("skills")
        checked_in = record.get("checkedIn")
        migrated.append(
            {
                **record,
                "id": record.get("id") or new_id(),
                "name": record.get("name") or "",
                "email": record.get("email") or "",
                "skills": skills if isinstance(skills, list) else [],
                "checkedIn": checked_in if isinstance(checked_in, bool) else False,
                "teamId": record.get("teamId"),
                "createdAt": record.get("createdAt") or record.get("created_at") or utc_now_iso(),
            }
        )
    return migrated

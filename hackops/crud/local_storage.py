from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..models.local_storage import StoredValue


def _timestamp() -> str:
    return datetime.now(tz=timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z")


def get_item(db: Session, owner: str, key: str) -> str | None:
    """Return the raw stored text for ``key`` or ``None`` when nothing was saved."""
    stmt = select(StoredValue.value).where(StoredValue.owner == owner, StoredValue.key == key)
    return db.execute(stmt).scalars().first()


def set_item(db: Session, owner: str, key: str, value: str) -> StoredValue:
    item = db.get(StoredValue, (owner, key))
    if item is None:
        item = StoredValue(owner=owner, key=key, value=value, updated_at=_timestamp())
        db.add(item)
    else:
        item.value = value
        item.updated_at = _timestamp()
    db.commit()
    db.refresh(item)
    return item


def remove_item(db: Session, owner: str, key: str) -> None:
    item = db.get(StoredValue, (owner, key))
    if item is not None:
        db.delete(item)
        db.commit()


def list_keys(db: Session, owner: str) -> list[str]:
    stmt = select(StoredValue.key).where(StoredValue.owner == owner).order_by(StoredValue.key)
    return list(db.execute(stmt).scalars().all())

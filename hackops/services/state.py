"""Record lists with optimistic, single-step rollback around remote writes.

A view-model mutates its ``EntityList`` first and mirrors the change to the
table API second. If the remote call fails, every list touched by the action
goes back to the snapshot taken before the mutation. Local-backed lists are
written to storage once the whole action has succeeded.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Awaitable, Callable, Generic, Iterable, Optional, TypeVar

import anyio.to_thread
from pydantic import ValidationError

from ..core.errors import NotFoundError, SyncError
from ..remote.client import RemoteStoreError, TableClient
from ..schemas.common import Record
from .storage import LocalStorage, Migrator

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=Record)
Fetch = Callable[[TableClient, str], Awaitable[list[Any]]]


class EntityList(Generic[T]):
    def __init__(
        self,
        record_type: type[T],
        storage_key: str,
        *,
        user_id: str,
        label: str,
        remote: Optional[TableClient] = None,
        local: Optional[LocalStorage] = None,
        fetch: Optional[Fetch] = None,
        migrator: Optional[Migrator] = None,
        items: Iterable[T] = (),
    ) -> None:
        self.record_type = record_type
        self.storage_key = storage_key
        self.user_id = user_id
        self.label = label
        self.remote = remote
        self.local = local
        self.fetch = fetch
        self.migrator = migrator
        self.items: list[T] = list(items)

    @property
    def is_remote(self) -> bool:
        return self.remote is not None

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self):
        return iter(self.items)

    def find(self, item_id: str) -> Optional[T]:
        return next((item for item in self.items if item.id == item_id), None)

    def get(self, item_id: str) -> T:
        item = self.find(item_id)
        if item is None:
            raise NotFoundError(f"{self.label} {item_id} not found")
        return item

    def swap(self, item_id: str, record: T) -> None:
        """Replace the provisional record ``item_id`` with the stored one."""
        for index, item in enumerate(self.items):
            if item.id == item_id:
                self.items[index] = record
                return

    def remove(self, item_id: str) -> None:
        self.items = [item for item in self.items if item.id != item_id]

    def replace(self, items: Iterable[T]) -> None:
        self.items = list(items)

    def snapshot(self) -> list[T]:
        return [item.model_copy(deep=True) for item in self.items]

    def restore(self, snapshot: list[T]) -> None:
        self.items = snapshot

    def dump(self) -> list[dict[str, Any]]:
        return [item.model_dump(by_alias=True) for item in self.items]

    async def persist(self) -> None:
        # The session is synchronous; keep its I/O off the event loop.
        if self.remote is None and self.local is not None:
            await anyio.to_thread.run_sync(self.local.save, self.storage_key, self.dump())

    def parse(self, rows: Iterable[Any], *, source: str = "local_storage") -> list[T]:
        """Validate rows into records, skipping (and logging) any that do not fit."""
        records = []
        for row in rows:
            try:
                records.append(self.record_type.model_validate(row))
            except ValidationError as exc:
                logger.warning(
                    f"{source}.record_skipped",
                    extra={"extra_data": {"collection": self.label, "key": self.storage_key, "error": str(exc)}},
                )
        return records

    async def load(self) -> None:
        if self.remote is not None and self.fetch is not None:
            try:
                self.items = await self.fetch(self.remote, self.user_id)
            except RemoteStoreError as exc:
                logger.error(
                    "sync.load_failed",
                    extra={"extra_data": {"collection": self.label, "error": str(exc)}},
                )
                raise SyncError(f"{self.label}.load", exc) from exc
        elif self.local is not None:
            raw = await anyio.to_thread.run_sync(self.local.load, self.storage_key, [], self.migrator)
            self.items = self.parse(raw if isinstance(raw, list) else [])


@asynccontextmanager
async def optimistic(*lists: EntityList, action: str) -> AsyncIterator[None]:
    """Run one user action; roll every list back if the remote mirror fails."""

    snapshots = [(entity_list, entity_list.snapshot()) for entity_list in lists]
    try:
        yield
    except RemoteStoreError as exc:
        for entity_list, snapshot in snapshots:
            entity_list.restore(snapshot)
        logger.error(
            "sync.failed",
            extra={"extra_data": {"action": action, "status": exc.status_code, "error": exc.message}},
        )
        raise SyncError(action, exc) from exc
    except Exception:
        for entity_list, snapshot in snapshots:
            entity_list.restore(snapshot)
        raise
    for entity_list, _ in snapshots:
        await entity_list.persist()


def require_text(value: Optional[str], label: str) -> str:
    cleaned = (value or "").strip()
    if not cleaned:
        raise ValueError(f"{label} is required")
    return cleaned

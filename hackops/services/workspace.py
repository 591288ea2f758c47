"""One organiser's collections, wired to their storage backends.

Collections listed in ``REMOTE_ENTITIES`` are read from and mirrored to the
hosted table API; the rest live in local storage. The registry keeps one
loaded workspace per user for the lifetime of the process, which is safe
because the remote store is single-writer-per-user.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

import anyio
import httpx
from sqlalchemy.orm import Session, sessionmaker

from ..core.config import COLLECTIONS, AppSettings
from ..core.security import CurrentUser
from ..crud import budget as remote_budget
from ..crud import hardware as remote_hardware
from ..crud import reservations as remote_reservations
from ..crud import teams as remote_teams
from ..crud import todos as remote_todos
from ..remote.client import TableClient
from ..schemas.budget import BudgetEntry
from ..schemas.hardware import Hardware
from ..schemas.participant import Participant, Team
from ..schemas.reservation import Reservation
from ..schemas.todo import Todo
from .budget import BudgetLedger
from .hardware import AvailabilityMode, HardwareInventory
from .reservations import ReservationDesk
from .roster import Roster
from .state import EntityList
from .storage import STORAGE_KEYS, LocalStorage, migrate_participants
from .todos import TodoBoard

logger = logging.getLogger(__name__)

RECORD_TYPES = {
    "todos": Todo,
    "budget": BudgetEntry,
    "hardware": Hardware,
    "participants": Participant,
    "reservations": Reservation,
    "teams": Team,
}

FETCHERS = {
    "todos": remote_todos.list_todos,
    "budget": remote_budget.list_budget_entries,
    "hardware": remote_hardware.list_hardware,
    "participants": remote_teams.list_participants,
    "reservations": remote_reservations.list_reservations,
    "teams": remote_teams.list_teams,
}


class Workspace:
    def __init__(
        self,
        user_id: str,
        *,
        local: LocalStorage,
        remote: Optional[TableClient] = None,
        remote_entities: Iterable[str] = (),
        availability: AvailabilityMode = "derived",
    ) -> None:
        self.user_id = user_id
        self.local = local
        self.remote = remote
        self.lock = anyio.Lock()
        mirrored = set(remote_entities) if remote is not None else set()

        self.lists: dict[str, EntityList] = {
            name: EntityList(
                RECORD_TYPES[name],
                STORAGE_KEYS[name],
                user_id=user_id,
                label=name,
                remote=remote if name in mirrored else None,
                local=local,
                fetch=FETCHERS[name],
                migrator=migrate_participants if name == "participants" else None,
            )
            for name in COLLECTIONS
        }

        self.todos = TodoBoard(self.lists["todos"], user_id=user_id)
        self.budget = BudgetLedger(self.lists["budget"], user_id=user_id)
        self.inventory = HardwareInventory(
            self.lists["hardware"],
            self.lists["reservations"],
            user_id=user_id,
            mode=availability,
        )
        self.roster = Roster(self.lists["participants"], self.lists["teams"], user_id=user_id)
        self.reservations = ReservationDesk(
            self.lists["reservations"],
            self.inventory,
            self.roster,
            user_id=user_id,
        )

    @property
    def remote_collections(self) -> list[str]:
        return [name for name, entity_list in self.lists.items() if entity_list.is_remote]

    async def load(self) -> None:
        for entity_list in self.lists.values():
            await entity_list.load()
        logger.info(
            "workspace.loaded",
            extra={
                "extra_data": {
                    "user_id": self.user_id,
                    "remote": self.remote_collections,
                    "counts": {name: len(entity_list) for name, entity_list in self.lists.items()},
                }
            },
        )


class WorkspaceRegistry:
    def __init__(
        self,
        session_factory: sessionmaker[Session],
        settings: AppSettings,
        *,
        http: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.session_factory = session_factory
        self.settings = settings
        self._http = http
        self._workspaces: dict[str, Workspace] = {}
        self._loading: dict[str, anyio.Lock] = {}

    def _http_client(self) -> httpx.AsyncClient:
        if self._http is None:
            self._http = httpx.AsyncClient(timeout=httpx.Timeout(self.settings.REMOTE_TIMEOUT))
        return self._http

    def build(self, user: CurrentUser) -> Workspace:
        remote = None
        if self.settings.remote_enabled:
            remote = TableClient(
                self._http_client(),
                base_url=self.settings.REMOTE_URL,
                api_key=self.settings.REMOTE_API_KEY,
                access_token=user.access_token,
            )
        return Workspace(
            user.id,
            local=LocalStorage(self.session_factory, user.id),
            remote=remote,
            remote_entities=self.settings.remote_entities,
            availability=self.settings.HARDWARE_AVAILABILITY,
        )

    async def get(self, user: CurrentUser) -> Workspace:
        # Concurrent first requests for one user must share a single load.
        lock = self._loading.setdefault(user.id, anyio.Lock())
        async with lock:
            workspace = self._workspaces.get(user.id)
            if workspace is None:
                workspace = self.build(user)
                await workspace.load()
                self._workspaces[user.id] = workspace
            elif workspace.remote is not None and user.access_token:
                workspace.remote.access_token = user.access_token
        return workspace

    async def aclose(self) -> None:
        self._workspaces.clear()
        self._loading.clear()
        if self._http is not None:
            await self._http.aclose()
            self._http = None

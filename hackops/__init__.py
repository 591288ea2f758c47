"""Application wiring for the HackOps planning service.

Importing this package builds the FastAPI app: configuration is read, the
local-storage tables are created, the per-user workspace registry is attached
to ``app.state`` (closed again on shutdown) and every API router is
mounted. ``hackops.main`` adds logging, the health check and metrics on top.
"""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI

from .core.config import settings
from .core.errors import register_exception_handlers
from .db.session import Base, SessionLocal, engine
from .middlewares import RequestIdMiddleware
from .services.workspace import WorkspaceRegistry

# Registers the table with the metadata before ``create_all``.
from .models import local_storage as _local_storage  # noqa: F401


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    await app.state.registry.aclose()


app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)
app.add_middleware(RequestIdMiddleware)
register_exception_handlers(app)

Base.metadata.create_all(bind=engine)

app.state.registry = WorkspaceRegistry(SessionLocal, settings)

from .routers import api_todos as api_todos_router  # noqa: E402

app.include_router(api_todos_router.router)

from .routers import api_budget as api_budget_router  # noqa: E402

app.include_router(api_budget_router.router)

from .routers import api_participants as api_participants_router  # noqa: E402

app.include_router(api_participants_router.router)
app.include_router(api_participants_router.teams_router)

from .routers import api_hardware as api_hardware_router  # noqa: E402

app.include_router(api_hardware_router.router)

from .routers import api_reservations as api_reservations_router  # noqa: E402

app.include_router(api_reservations_router.router)

from .routers import api_backup as api_backup_router  # noqa: E402

app.include_router(api_backup_router.router)


__all__ = ["app"]

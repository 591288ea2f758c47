from __future__ import annotations

from typing import AsyncIterator

from fastapi import Depends, Request

from ..core.security import CurrentUser
from ..services.workspace import Workspace, WorkspaceRegistry
from .auth import require_user


def get_registry(request: Request) -> WorkspaceRegistry:
    return request.app.state.registry


async def get_workspace(
    user: CurrentUser = Depends(require_user),
    registry: WorkspaceRegistry = Depends(get_registry),
) -> AsyncIterator[Workspace]:
    """Yield the caller's workspace, holding its lock until the handler returns."""

    workspace = await registry.get(user)
    async with workspace.lock:
        yield workspace

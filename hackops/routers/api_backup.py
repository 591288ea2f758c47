from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from ..deps.workspace import get_workspace
from ..schemas.backup import BackupPreview
from ..services.backup import apply_backup, backup_filename, export_backup, parse_backup, preview
from ..services.workspace import Workspace

router = APIRouter(prefix="/api/v1/backup", tags=["backup"])


@router.get("/export")
async def api_export(ws: Workspace = Depends(get_workspace)):
    return JSONResponse(
        export_backup(ws),
        headers={"Content-Disposition": f'attachment; filename="{backup_filename()}"'},
    )


@router.post("/preview", response_model=BackupPreview)
async def api_preview(request: Request):
    # Raw body: malformed JSON must surface as a backup error, not a 422.
    return preview(parse_backup(await request.body()))


@router.post("/import", response_model=BackupPreview)
async def api_import(request: Request, ws: Workspace = Depends(get_workspace)):
    backup = parse_backup(await request.body())
    return await apply_backup(ws, backup)

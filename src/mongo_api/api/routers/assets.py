"""
mongo_api.api.routers.assets

Upload endpoint for the static asset directory.

Responsibilities:
- Accept a single multipart file (`file`) and store it under its base name.
- Return the public URL under the static mount.
"""

from __future__ import annotations

import shutil
from pathlib import Path, PurePath
from typing import IO, Any

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from starlette.concurrency import run_in_threadpool
from starlette.status import HTTP_201_CREATED, HTTP_400_BAD_REQUEST

from mongo_api.api.deps import settings_from_app
from mongo_api.observability.logging import get_logger
from mongo_api.settings import Settings

router = APIRouter(tags=["assets"])
log = get_logger(__name__)

_CHUNK_SIZE = 1024 * 1024


def safe_filename(raw: str | None) -> str:
    # Strip any client-supplied directories (both separators) and reject dotfiles.
    name = PurePath((raw or "").replace("\\", "/")).name
    if not name or name.startswith("."):
        raise HTTPException(status_code=HTTP_400_BAD_REQUEST, detail="Invalid filename")
    return name


def store_upload(source: IO[bytes], target: Path) -> int:
    # Blocking copy; callers run it in the threadpool. No partial files are left behind.
    try:
        with target.open("wb") as out:
            shutil.copyfileobj(source, out, _CHUNK_SIZE)
    except BaseException:
        target.unlink(missing_ok=True)
        raise
    return target.stat().st_size


@router.post("/assets", status_code=HTTP_201_CREATED)
async def upload_asset(
    file: UploadFile = File(...),
    settings: Settings = Depends(settings_from_app),
) -> dict[str, Any]:
    filename = safe_filename(file.filename)
    target = settings.static_dir / filename

    try:
        size = await run_in_threadpool(store_upload, file.file, target)
    finally:
        await file.close()

    log.info("asset_stored", filename=filename, size=size)
    return {
        "filename": filename,
        "url": f"{settings.static_mount_path.rstrip('/')}/{filename}",
        "size": size,
    }


# --- Module Notes -----------------------------------------------------------
# Existing files with the same name are overwritten, as with disk-storage
# uploaders that keep the original name.

"""
Storage Router
==============
Serve files uploaded through file and image settings.
"""

import mimetypes

from fastapi import APIRouter, HTTPException
from fastapi.responses import Response

from appsettings.files import DiskNotConfiguredError, LocalFileStorage
from appsettings.settings import get_settings_manager


router = APIRouter()


@router.get("/{disk}/{path:path}")
async def get_stored_file(disk: str, path: str):
    """Return a stored file from a disk."""
    files = get_settings_manager().files
    if not isinstance(files, LocalFileStorage):
        raise HTTPException(status_code=404, detail="File serving is not available")

    try:
        content = files.get(path, disk)
    except (DiskNotConfiguredError, ValueError):
        raise HTTPException(status_code=404, detail=f"File not found: {disk}/{path}")

    if content is None:
        raise HTTPException(status_code=404, detail=f"File not found: {disk}/{path}")

    media_type = mimetypes.guess_type(path)[0] or "application/octet-stream"
    return Response(content=content, media_type=media_type)

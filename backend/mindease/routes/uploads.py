"""
MindEase Backend — Uploaded File Serving
==========================================

What:  GET <uploads_url_prefix>/{path} returns attachments and avatars
       from the upload directory.
How:   Resolves the path against the upload directory; anything resolving
       outside it is rejected before the filesystem is touched.
Who:   Mounted by create_app() under settings.uploads_url_prefix and
       requested by <img>/<a> tags built from avatar_url and file_path.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse

from mindease.exceptions import NotFoundError
from mindease.services.file_service import FileService, get_file_service

router = APIRouter(tags=["Uploads"])


@router.get(
    "/{file_path:path}",
    summary="Serve an uploaded file",
    responses={
        200: {"description": "Stored file"},
        400: {"description": "Path outside the upload directory"},
        404: {"description": "File not found"},
    },
)
async def serve_upload(
    file_path: str,
    files: FileService = Depends(get_file_service),
) -> FileResponse:
    full_path = files.resolve(file_path)
    if not full_path.is_file():
        raise NotFoundError(resource="file", resource_id=file_path)

    # Stored names are immutable (uuid-based), so long caching is safe
    return FileResponse(
        path=str(full_path),
        headers={"Cache-Control": "public, max-age=86400"},
    )

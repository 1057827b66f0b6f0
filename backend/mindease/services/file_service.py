"""
MindEase Backend — Upload Storage Service
===========================================

What:  Validates, stores, and cleans up uploaded files (discussion/reply
       attachments and profile avatars).
How:   Size checks on the bytes received, an image-extension allowlist for
       avatars, generated file names, async writes with aiofiles.
Who:   Called by the discussion and profile services.

Naming:
    attachments   <uuid4 hex><ext>                e.g. 9f0c...e1.pdf
    avatars       avatar_<userId>_<uuid4 hex><ext>

    Names carry no user-supplied text other than a sanitized extension, so a
    stored name can never climb out of the upload directory. The stored name
    is what the database keeps (file_path); the public URL is
    <uploads_url_prefix>/<name>.
"""

import logging
import os
import re
import uuid
from pathlib import Path
from typing import NamedTuple, Optional

import aiofiles
from fastapi import Request, UploadFile

from mindease.config import settings
from mindease.exceptions import FileStorageError, ValidationError

logger = logging.getLogger(__name__)

AVATAR_EXTENSIONS = {".png", ".jpg", ".jpeg", ".gif", ".webp"}

_EXTENSION_RE = re.compile(r"^\.[a-z0-9]{1,10}$")


class Upload(NamedTuple):
    """An uploaded file already read into memory by the route."""
    filename: Optional[str]
    content: bytes


class FileService:
    """
    Manages the upload directory.

    Args:
        upload_dir: Directory holding every stored upload
        max_size: Largest accepted upload in bytes
        url_prefix: Public path the upload router is mounted on
    """

    def __init__(
        self,
        upload_dir: Optional[str] = None,
        max_size: Optional[int] = None,
        url_prefix: Optional[str] = None,
    ):
        self.upload_dir = Path(upload_dir or settings.upload_dir).resolve()
        self.max_size = max_size or settings.max_upload_size
        self.url_prefix = url_prefix or settings.uploads_url_prefix
        self.upload_dir.mkdir(parents=True, exist_ok=True)
        logger.info("FileService initialized with upload_dir=%s", self.upload_dir)

    # ── Validation ────────────────────────────────────────────────────────

    @staticmethod
    def sanitize_extension(filename: Optional[str]) -> str:
        """Lower-cased extension of `filename`, or '' when it is missing or unusual."""
        ext = Path(filename or "").suffix.lower()
        return ext if _EXTENSION_RE.match(ext) else ""

    def validate_size(self, content: bytes, field: str = "file") -> None:
        """
        Reject empty files and files above max_size.

        Raises:
            ValidationError with a human-readable size limit message
        """
        if not content:
            raise ValidationError(message="Uploaded file is empty.", field=field)

        if len(content) > self.max_size:
            max_mb = self.max_size / (1024 * 1024)
            raise ValidationError(
                message=f"File size ({len(content) / (1024 * 1024):.1f}MB) exceeds maximum of {max_mb:.0f}MB.",
                field=field,
                context={"max_size": self.max_size, "actual_size": len(content)},
            )

    def validate_avatar_extension(self, filename: Optional[str]) -> str:
        ext = self.sanitize_extension(filename)
        if ext not in AVATAR_EXTENSIONS:
            raise ValidationError(
                message=(
                    f"File type '{ext or 'unknown'}' is not supported for avatars. "
                    f"Allowed types: {', '.join(sorted(AVATAR_EXTENSIONS))}"
                ),
                field="avatar",
                context={"extension": ext, "allowed": sorted(AVATAR_EXTENSIONS)},
            )
        return ext

    # ── Storage ───────────────────────────────────────────────────────────

    async def _write(self, name: str, content: bytes) -> str:
        path = self.upload_dir / name
        try:
            async with aiofiles.open(path, "wb") as f:
                await f.write(content)
        except OSError as e:
            logger.error("Failed to store upload at %s: %s", path, str(e))
            raise FileStorageError(
                message="Failed to save uploaded file. Please try again.",
                context={"path": str(path), "os_error": str(e)},
            )
        logger.info("Upload stored: %s (%d bytes)", name, len(content))
        return name

    async def store_attachment(self, filename: Optional[str], content: bytes) -> str:
        """Validate and store a discussion/reply attachment; returns the stored name."""
        self.validate_size(content, field="file")
        name = f"{uuid.uuid4().hex}{self.sanitize_extension(filename)}"
        return await self._write(name, content)

    async def store_avatar(self, user_id: int, filename: Optional[str], content: bytes) -> str:
        """Validate and store a profile picture; returns the stored name."""
        ext = self.validate_avatar_extension(filename)
        self.validate_size(content, field="avatar")
        name = f"avatar_{user_id}_{uuid.uuid4().hex}{ext}"
        return await self._write(name, content)

    def public_url(self, name: str) -> str:
        return f"{self.url_prefix}/{name}"

    def resolve(self, relative_path: str) -> Path:
        """
        Absolute path of a stored upload.

        Raises:
            ValidationError: the path escapes the upload directory
        """
        full_path = (self.upload_dir / relative_path).resolve()
        if not full_path.is_relative_to(self.upload_dir):
            raise ValidationError(message="Invalid file path", field="path")
        return full_path

    async def cleanup_file(self, name: Optional[str]) -> None:
        """
        Remove a stored upload after the database write that referenced it failed.

        Best effort: missing files are ignored and OS errors are logged.
        """
        if not name:
            return
        try:
            path = self.resolve(name)
            if path.exists():
                os.remove(path)
                logger.info("Cleaned up upload: %s", path.name)
            else:
                logger.debug("Cleanup: file already gone: %s", path.name)
        except (OSError, ValidationError) as e:
            logger.warning("Failed to clean up upload %s: %s", name, str(e))


# ── Route helpers ─────────────────────────────────────────────────────────

def get_file_service(request: Request) -> FileService:
    """FastAPI dependency returning the FileService built by create_app()."""
    return request.app.state.file_service


async def read_upload(file: Optional[UploadFile]) -> Optional[Upload]:
    """
    Read a multipart file field into memory and close it.

    A missing field, or one submitted without a filename (an empty file
    input), counts as no upload.
    """
    if file is None:
        return None
    try:
        if not file.filename:
            return None
        return Upload(filename=file.filename, content=await file.read())
    finally:
        await file.close()

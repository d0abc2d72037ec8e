"""
Storage for uploaded item images and display media.

Files are written under ``UPLOAD_DIR`` and served back statically under
``UPLOAD_URL_PREFIX``.
"""
import logging
import os
import random
import time
from pathlib import Path
from typing import Iterable

from fastapi import UploadFile

from menuboard.core.config import get_settings
from menuboard.core.errors import ValidationFailed

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024


def media_type_for(content_type: str | None) -> str | None:
    """Map a MIME type to the display media kind, or None if unsupported."""
    if not content_type:
        return None
    if content_type.startswith("image/"):
        return "image"
    if content_type.startswith("video/"):
        return "video"
    return None


class MediaStorage:
    """Writes uploads to disk with a size cap and returns their public URL."""

    def __init__(self, upload_dir: str | None = None, url_prefix: str | None = None):
        settings = get_settings()
        self.upload_dir = Path(upload_dir or settings.UPLOAD_DIR)
        self.url_prefix = (url_prefix or settings.UPLOAD_URL_PREFIX).rstrip("/")
        self.upload_dir.mkdir(parents=True, exist_ok=True)

    def _filename(self, prefix: str, original: str | None) -> str:
        unique_suffix = f"{int(time.time() * 1000)}-{random.randint(0, 10**9)}"
        ext = Path(original or "").suffix.lower()
        return f"{prefix}-{unique_suffix}{ext}"

    async def save(
        self,
        upload: UploadFile,
        prefix: str,
        max_bytes: int,
        allowed_kinds: Iterable[str],
    ) -> str:
        """
        Store ``upload`` and return its URL.

        Raises:
            ValidationFailed: unsupported MIME type or file larger than ``max_bytes``
        """
        kind = media_type_for(upload.content_type)
        if kind not in allowed_kinds:
            allowed = " and ".join(sorted(allowed_kinds))
            raise ValidationFailed(f"Only {allowed} files are allowed")

        filename = self._filename(prefix, upload.filename)
        path = self.upload_dir / filename
        written = 0
        try:
            with open(path, "wb") as out:
                while True:
                    chunk = await upload.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    written += len(chunk)
                    if written > max_bytes:
                        raise ValidationFailed(
                            "File too large",
                            message=f"Max size: {max_bytes // (1024 * 1024)}MB",
                        )
                    out.write(chunk)
        except ValidationFailed:
            path.unlink(missing_ok=True)
            raise

        logger.info(f"Stored upload {filename} ({written} bytes)")
        return f"{self.url_prefix}/{filename}"

    def path_for(self, url: str | None) -> Path | None:
        """Local path of a URL previously returned by ``save``."""
        if not url or not url.startswith(self.url_prefix + "/"):
            return None
        return self.upload_dir / os.path.basename(url)

    def discard(self, url: str | None) -> None:
        """Delete a stored file that is no longer referenced. Missing files are ignored."""
        path = self.path_for(url)
        if path is None:
            return
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"Could not remove {path}: {e}")

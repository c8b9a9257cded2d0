from __future__ import annotations

import logging
import secrets
import time
from pathlib import Path, PurePosixPath

from app.core.config import Settings

logger = logging.getLogger(__name__)

URL_PREFIX = "/uploads"

# the stored extension comes from the checked content type, never from the client filename
SUPPORTED_CONTENT_TYPES = {
    "image/png": ".png",
    "image/jpeg": ".jpg",
    "image/gif": ".gif",
    "image/webp": ".webp",
}
SUPPORTED_EXTENSIONS = frozenset(SUPPORTED_CONTENT_TYPES.values())


class ImageUploadError(Exception):
    pass


class ImageStore:
    def __init__(self, upload_dir: str | Path, max_size: int = 1024 * 1024) -> None:
        self.upload_dir = Path(upload_dir)
        self.max_size = max_size

    @classmethod
    def from_settings(cls, settings: Settings) -> ImageStore:
        return cls(settings.UPLOAD_DIR, settings.MAX_IMAGE_SIZE)

    def _new_filename(self, ext: str) -> str:
        unique = f"{int(time.time() * 1000)}-{secrets.randbelow(10**9)}"
        return f"image-{unique}{ext}"

    def save(self, content: bytes, content_type: str | None, filename: str | None = None) -> str:
        ext = SUPPORTED_CONTENT_TYPES.get((content_type or "").lower())
        if ext is None:
            raise ImageUploadError(
                f"Unsupported file type: {content_type}. Only PNG, JPEG, GIF and WEBP images are allowed"
            )

        if not content:
            raise ImageUploadError("Uploaded image is empty")

        if len(content) > self.max_size:
            raise ImageUploadError(f"Image too large: {len(content)} bytes (max {self.max_size})")

        name = self._new_filename(ext)
        self.upload_dir.mkdir(parents=True, exist_ok=True)
        (self.upload_dir / name).write_bytes(content)
        logger.info("Stored portrait %s from %s (%d bytes)", name, filename, len(content))
        return f"{URL_PREFIX}/{name}"

    def resolve(self, reference: str) -> Path:
        # only the final path component is honoured, so references cannot leave upload_dir
        return self.upload_dir / PurePosixPath(reference).name

    def delete(self, reference: str | None) -> bool:
        """Remove the file behind a reference returned by :meth:`save`. Missing files are ignored."""
        if not reference:
            return False

        path = self.resolve(reference)
        try:
            path.unlink()
        except FileNotFoundError:
            logger.warning("Portrait %s already gone", reference)
            return False
        return True

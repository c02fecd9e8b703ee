"""Photo object storage: a bucket directory served under a public URL."""

from __future__ import annotations

import logging
from pathlib import Path, PurePosixPath

from losttofound.core.config import Settings, get_settings
from losttofound.core.errors import UpstreamError, ValidationError

logger = logging.getLogger(__name__)

ALLOWED_PHOTO_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".webp", ".heic"}


class PhotoStorage:
    """Stores objects as files under ``<storage_dir>/<bucket>/<path>``."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()
        self.root = Path(self.settings.storage_dir)
        self.bucket = self.settings.storage_bucket

    def _resolve(self, path: str) -> Path:
        rel = PurePosixPath(path)
        if rel.is_absolute() or ".." in rel.parts or not rel.parts:
            raise ValidationError(f"Invalid storage path: {path}")
        return self.root / self.bucket / Path(*rel.parts)

    def upload(self, path: str, content: bytes, upsert: bool = False) -> str:
        """Write ``content`` at ``path`` and return its public URL."""
        target = self._resolve(path)
        if target.exists() and not upsert:
            raise ValidationError(f"Object already exists: {path}")
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(content)
        except OSError as exc:
            logger.exception("Could not write object %s", path)
            raise UpstreamError("Could not store the photo.") from exc
        return self.public_url(path)

    def read(self, path: str) -> bytes | None:
        target = self._resolve(path)
        if not target.is_file():
            return None
        return target.read_bytes()

    def remove(self, path: str) -> bool:
        target = self._resolve(path)
        if not target.is_file():
            return False
        target.unlink()
        return True

    def public_url(self, path: str) -> str:
        base = self.settings.storage_public_url.rstrip("/")
        return f"{base}/{self.bucket}/{path}"

    def path_from_url(self, url: str) -> str | None:
        """Inverse of ``public_url``; None for URLs outside this bucket."""
        prefix = f"{self.settings.storage_public_url.rstrip('/')}/{self.bucket}/"
        if not url.startswith(prefix):
            return None
        return url[len(prefix):]


def photo_path(user_id: str, pet_id: str, stamp: int, index: int, filename: str | None) -> str:
    """Object path for an uploaded pet photo."""
    ext = PurePosixPath(filename or "").suffix.lower().lstrip(".") or "jpg"
    return f"{user_id}/{pet_id}/{stamp}-{index}.{ext}"


def get_photo_storage() -> PhotoStorage:
    """FastAPI dependency returning the configured photo storage."""
    return PhotoStorage()

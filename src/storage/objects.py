import asyncio
import logging
import os
import time
from pathlib import Path, PurePosixPath

from src.errors import UpstreamError, ValidationError

logger = logging.getLogger(__name__)


def photo_object_key(owner_id: str, filename: str, now_ms: int = None) -> str:
    """``<owner>/<owner>-<epoch ms>.<ext>``, unique per write."""
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    ext = filename.rsplit(".", 1)[-1].lower() if "." in filename else ""
    ext = ext or "bin"
    return f"{owner_id}/{owner_id}-{now_ms}.{ext}"


class LocalObjectStore:
    """Writes objects under the media root served by the app at ``base_url``."""

    def __init__(self, root: str, base_url: str):
        self.root = Path(root)
        self.base_url = base_url.rstrip("/")

    def _path(self, bucket: str, key: str) -> Path:
        parts = PurePosixPath(bucket, key).parts
        if not key or any(part in ("..", "") for part in parts) or PurePosixPath(key).is_absolute():
            raise ValidationError(f"Invalid object key: {key!r}")
        return self.root.joinpath(*parts)

    @staticmethod
    def _write(path: Path, data: bytes) -> None:
        os.makedirs(path.parent, exist_ok=True)
        with open(path, "wb") as f:
            f.write(data)

    async def put(self, bucket: str, key: str, data: bytes) -> str:
        path = self._path(bucket, key)
        try:
            await asyncio.to_thread(self._write, path, data)
        except OSError as e:
            logger.error("Failed to store object %s/%s: %s", bucket, key, e)
            raise UpstreamError(f"Could not store file: {e.strerror or e}")
        return f"{self.base_url}/{bucket}/{key}"

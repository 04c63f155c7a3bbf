"""
Upload materializer.

Turns an admitted upload into a file:

    {upload_root}/{YYYY-MM}/data-{YYYY-MM-DDTHH:MM:SSZ}-{token}.{ext}

The month directory and the timestamp sort chronologically in a plain
directory listing. Two uploads with the same token, second and extension
resolve to the same path; the later write wins.
"""
import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Dict, Optional, Union

from ..core.errors import StorageError
from ..core.security import token_prefix, utc_now

logger = logging.getLogger("puttr.materializer")

DEFAULT_EXTENSION = "txt"

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

# Base media type (lowercase, no parameters) -> file extension
CONTENT_TYPE_EXTENSIONS: Dict[str, str] = {
    # Text
    "text/plain": "txt",
    "text/html": "html",
    "text/css": "css",
    "text/csv": "csv",
    "text/markdown": "md",
    "text/xml": "xml",
    "text/javascript": "js",
    "text/yaml": "yaml",
    "text/calendar": "ics",
    "text/tab-separated-values": "tsv",
    # Structured data
    "application/json": "json",
    "application/ld+json": "jsonld",
    "application/xml": "xml",
    "application/javascript": "js",
    "application/x-yaml": "yaml",
    "application/yaml": "yaml",
    "application/toml": "toml",
    # Documents and archives
    "application/pdf": "pdf",
    "application/zip": "zip",
    "application/gzip": "gz",
    "application/x-tar": "tar",
    "application/octet-stream": "bin",
    # Form submissions carry their value as text
    "application/x-www-form-urlencoded": "txt",
    "multipart/form-data": "txt",
    # Images
    "image/png": "png",
    "image/jpeg": "jpg",
    "image/gif": "gif",
    "image/webp": "webp",
    "image/svg+xml": "svg",
    "image/bmp": "bmp",
    "image/tiff": "tiff",
    # Audio / video
    "audio/mpeg": "mp3",
    "audio/ogg": "ogg",
    "audio/wav": "wav",
    "video/mp4": "mp4",
    "video/webm": "webm",
}


@dataclass(frozen=True)
class UploadRecord:
    """Result of a successful write."""
    path: Path
    size: int
    extension: str


def resolve_extension(content_type: Optional[str]) -> str:
    """
    Map a Content-Type header value to a file extension.

    "APPLICATION/JSON; charset=utf-8" -> "json". Unknown, empty or missing
    values map to "txt".
    """
    if not content_type:
        return DEFAULT_EXTENSION

    media_type = content_type.split(";", 1)[0].strip().lower()
    return CONTENT_TYPE_EXTENSIONS.get(media_type, DEFAULT_EXTENSION)


def derive_path(
    upload_root: Union[str, Path],
    token: str,
    now: datetime,
    extension: str
) -> Path:
    """
    Build the storage path for an upload.

    Naive datetimes are taken to be UTC already.
    """
    if now.tzinfo is not None:
        now = now.astimezone(timezone.utc)

    month_dir = f"{now.year}-{now.month:02d}"
    filename = f"data-{now.strftime(TIMESTAMP_FORMAT)}-{token}.{extension}"
    return Path(upload_root) / month_dir / filename


def store(path: Path, payload: Union[bytes, str]) -> int:
    """
    Write payload to path, creating missing parent directories.

    Returns the number of bytes written.

    Raises:
        StorageError: If the directory or the file cannot be written
    """
    data = payload.encode("utf-8") if isinstance(payload, str) else payload

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise StorageError(path.parent, f"cannot create directory: {e}") from e

    try:
        with open(path, "wb") as f:
            f.write(data)
    except OSError as e:
        raise StorageError(path, f"cannot write file: {e}") from e

    return len(data)


class UploadMaterializer:
    """Writes admitted uploads below a configured root directory."""

    def __init__(
        self,
        upload_root: Union[str, Path],
        clock: Callable[[], datetime] = utc_now
    ):
        self._root = Path(upload_root)
        self._clock = clock

    @property
    def upload_root(self) -> Path:
        return self._root

    async def materialize(
        self,
        token: str,
        payload: Union[bytes, str],
        content_type: Optional[str]
    ) -> UploadRecord:
        """
        Store one upload for an already-validated token.

        The write runs in the default executor so the event loop keeps
        serving other requests.

        Raises:
            StorageError: If the write fails
        """
        extension = resolve_extension(content_type)
        path = derive_path(self._root, token, self._clock(), extension)

        size = await asyncio.get_running_loop().run_in_executor(
            None, store, path, payload
        )

        logger.info(
            f"Stored upload ({size} bytes, {extension})",
            extra={
                "event_type": "upload.stored",
                "path": str(path),
                "bytes": size,
                "token_prefix": token_prefix(token),
            }
        )

        return UploadRecord(path=path, size=size, extension=extension)

    def is_writable(self) -> bool:
        """Whether the upload root exists (or can be created) and is writable."""
        try:
            self._root.mkdir(parents=True, exist_ok=True)
        except OSError:
            return False

        probe = self._root / ".puttr-probe"
        try:
            probe.write_bytes(b"")
            probe.unlink()
        except OSError:
            return False
        return True

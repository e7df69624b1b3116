"""Upload relay that stores multipart files in an object store."""

import asyncio
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Protocol
from uuid import uuid4

from starlette.datastructures import UploadFile

from nutrition_relay.domain.uploads import UploadResult

_logger = logging.getLogger(__name__)

FILE_FIELD = "file"
_FALLBACK_FILENAME = "upload"


class MissingFileError(ValueError):
    """Raised when a form carries no file under the expected field."""

    def __init__(self) -> None:
        super().__init__("No file uploaded.")


class ObjectStore(Protocol):
    """Interface for a bucket-backed binary object store."""

    def put(self, key: str, content: bytes, content_type: str | None = None) -> str:
        """Store ``content`` under ``key`` and return the object's URL."""


@dataclass
class UploadService:
    """Service that relays uploaded files to the configured object store."""

    store: ObjectStore

    async def upload(self, form: Mapping[str, object]) -> UploadResult:
        """Store the form's ``file`` entry and return a result envelope.

        Never raises; failures come back as ``success=False`` with the
        error message.
        """
        try:
            file = form.get(FILE_FIELD)
            if not isinstance(file, UploadFile):
                raise MissingFileError
            key = build_object_key(file.filename or _FALLBACK_FILENAME)
            content = await file.read()
            url = await asyncio.to_thread(
                self.store.put, key, content, content_type=file.content_type
            )
        except Exception as exc:
            _logger.exception("Upload to object store failed")
            return UploadResult.failed(str(exc))
        _logger.info("Stored upload: key=%s bytes=%s", key, len(content))
        return UploadResult.stored(url)


def build_object_key(filename: str) -> str:
    """Return a collision-resistant storage key for ``filename``."""
    return f"{uuid4()}-{filename}"

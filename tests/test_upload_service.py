"""Tests for upload relay service."""

import asyncio
import io
import re
import threading
from dataclasses import dataclass, field

from starlette.datastructures import FormData, Headers, UploadFile

from nutrition_relay.services.uploads import UploadService, build_object_key
from tests.conftest import FailingObjectStore, InMemoryObjectStore

_KEY_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}-photo\.png$"
)


def _form_with_file(
    content: bytes = b"png-bytes", filename: str | None = "photo.png"
) -> FormData:
    upload = UploadFile(
        file=io.BytesIO(content),
        filename=filename,
        headers=Headers({"content-type": "image/png"}),
    )
    return FormData([("file", upload)])


def test_upload_stores_file_and_returns_url() -> None:
    store = InMemoryObjectStore()
    service = UploadService(store=store)

    result = asyncio.run(service.upload(_form_with_file()))

    assert result.success is True
    [key] = store.objects
    assert _KEY_PATTERN.match(key)
    assert store.objects[key] == b"png-bytes"
    assert store.content_types[key] == "image/png"
    assert result.url == f"https://bucket.example.com/{key}"
    assert result.to_payload() == {"success": True, "url": result.url}


def test_upload_same_name_gets_distinct_keys() -> None:
    store = InMemoryObjectStore()
    service = UploadService(store=store)

    asyncio.run(service.upload(_form_with_file()))
    asyncio.run(service.upload(_form_with_file()))

    assert len(store.objects) == 2
    assert all(_KEY_PATTERN.match(key) for key in store.objects)


def test_upload_without_file_returns_failure() -> None:
    store = InMemoryObjectStore()
    service = UploadService(store=store)

    result = asyncio.run(service.upload(FormData()))

    assert result.to_payload() == {"success": False, "error": "No file uploaded."}
    assert store.objects == {}


def test_upload_with_text_field_returns_failure() -> None:
    service = UploadService(store=InMemoryObjectStore())

    result = asyncio.run(service.upload(FormData([("file", "not-a-file")])))

    assert result.success is False
    assert result.error == "No file uploaded."


def test_upload_store_error_becomes_failure_envelope() -> None:
    service = UploadService(store=FailingObjectStore())

    result = asyncio.run(service.upload(_form_with_file()))

    assert result.to_payload() == {
        "success": False,
        "error": "AccessDenied: invalid credentials",
    }


def test_upload_without_filename_uses_fallback_name() -> None:
    store = InMemoryObjectStore()
    service = UploadService(store=store)

    asyncio.run(service.upload(_form_with_file(filename=None)))

    [key] = store.objects
    assert key.endswith("-upload")


def test_build_object_key_keeps_file_name() -> None:
    key = build_object_key("my lunch.jpg")

    assert key.endswith("-my lunch.jpg")
    assert len(key) == 36 + 1 + len("my lunch.jpg")


@dataclass
class _ThreadRecordingStore(InMemoryObjectStore):
    thread_ids: list[int] = field(default_factory=list)

    def put(self, key: str, content: bytes, content_type: str | None = None) -> str:
        self.thread_ids.append(threading.get_ident())
        return super().put(key, content, content_type)


def test_upload_runs_store_put_off_the_event_loop_thread() -> None:
    store = _ThreadRecordingStore()
    service = UploadService(store=store)

    result = asyncio.run(service.upload(_form_with_file()))

    assert result.success is True
    assert store.thread_ids
    assert store.thread_ids[0] != threading.get_ident()

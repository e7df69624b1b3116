"""Upload relay endpoint."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import APIRouter, Request
from starlette.exceptions import HTTPException
from starlette.formparsers import MultiPartException

from nutrition_relay.domain.uploads import UploadResult

if TYPE_CHECKING:
    from nutrition_relay.containers import AppContainer

router = APIRouter(tags=["uploads"])

_logger = logging.getLogger(__name__)


@router.post("/uploads")
async def upload(request: Request) -> dict[str, object]:
    """Store the multipart ``file`` field and return a result envelope.

    Always answers 200; clients check ``success``.
    """
    container: AppContainer = request.app.state.container
    try:
        form = await request.form()
    except HTTPException as exc:
        _logger.warning("Unreadable upload form: %s", exc.detail)
        return UploadResult.failed(str(exc.detail)).to_payload()
    except MultiPartException as exc:
        _logger.warning("Unreadable upload form: %s", exc.message)
        return UploadResult.failed(exc.message).to_payload()
    try:
        result = await container.upload_service.upload(form)
    finally:
        await form.close()
    return result.to_payload()

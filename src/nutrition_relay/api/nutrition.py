"""Nutrition analysis endpoints."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Annotated

from fastapi import APIRouter, File, Form, HTTPException, Request, UploadFile, status

from nutrition_relay.domain.nutrition import (
    NutritionAnalysis,
    NutritionQuery,
    Sickness,
)

if TYPE_CHECKING:
    from nutrition_relay.containers import AppContainer

router = APIRouter(prefix="/nutrition", tags=["nutrition"])

_logger = logging.getLogger(__name__)

_ANALYSIS_FAILED = "Sorry, I couldn't analyze that image."


@router.post("/analyze")
async def analyze(query: NutritionQuery, request: Request) -> NutritionAnalysis:
    """Analyze a food image reachable by URL or data URI."""
    container: AppContainer = request.app.state.container
    try:
        extraction = await container.nutrition_service.analyze(
            query.sicknesses, query.image_url
        )
    except Exception as exc:
        raise _analysis_error(container, exc) from exc
    return NutritionAnalysis.from_extraction(extraction)


@router.post("/analyze-image")
async def analyze_image(
    request: Request,
    file: Annotated[UploadFile, File()],
    sicknesses: Annotated[list[Sickness], Form()],
) -> NutritionAnalysis:
    """Analyze an uploaded food image."""
    container: AppContainer = request.app.state.container
    image_bytes = await file.read()
    try:
        extraction = await container.nutrition_service.analyze_image(
            sicknesses, image_bytes
        )
    except Exception as exc:
        raise _analysis_error(container, exc) from exc
    return NutritionAnalysis.from_extraction(extraction)


def _analysis_error(container: AppContainer, exc: Exception) -> HTTPException:
    """Return a 502 error, with exception detail in local environments."""
    detail = _ANALYSIS_FAILED
    if container.settings.environment == "local":
        debug = f"{type(exc).__name__}: {exc}".strip()
        detail = f"{_ANALYSIS_FAILED} (debug: {debug})"
    _logger.warning("Nutrition analysis request failed: %s", type(exc).__name__)
    return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=detail)

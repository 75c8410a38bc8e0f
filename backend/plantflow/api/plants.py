"""
Plant-level API endpoints: the TV status board and per-plant history.
"""
import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.exc import SQLAlchemyError

from plantflow.api.dependencies import error_response, get_settings, get_store, get_today
from plantflow.config.settings import Settings
from plantflow.schemas.dashboard import (
    PlantEntry,
    PlantHistoryEntry,
    PlantHistoryResponse,
    PlantHistorySummary,
    PlantStatusResponse,
    PlantStatusSummary,
)
from plantflow.schemas.upload_batch import UploadBatchResponse
from plantflow.services.dashboard import plant_history, plant_status
from plantflow.services.record_store import RecordStore

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/plant-status", response_model=PlantStatusResponse)
async def get_plant_status(
    batch_id: Optional[int] = Query(None, alias="batchId"),
    store: RecordStore = Depends(get_store),
):
    """Read-only board of every record in a batch (latest by default)."""
    try:
        batch, entries, summary = plant_status(store, batch_id)
    except SQLAlchemyError as e:
        logger.error("Plant status error: %s", e)
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to fetch records.", str(e))

    return PlantStatusResponse(
        entries=[PlantEntry(**e) for e in entries],
        batch=UploadBatchResponse.model_validate(batch) if batch else None,
        summary=PlantStatusSummary(**summary),
    )


@router.get("/plant-history", response_model=PlantHistoryResponse)
async def get_plant_history(
    plant: Optional[str] = Query(None),
    store: RecordStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
    today: date = Depends(get_today),
):
    """A plant's shipments across the retention window with running totals."""
    if not plant:
        return error_response(status.HTTP_400_BAD_REQUEST, "Plant parameter is required.")

    try:
        history, summary = plant_history(store, plant, today, settings.retention_days)
    except SQLAlchemyError as e:
        logger.error("Plant history error for %s: %s", plant, e)
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to fetch history.", str(e))

    return PlantHistoryResponse(
        plant=plant,
        history=[PlantHistoryEntry(**h) for h in history],
        summary=PlantHistorySummary(**summary) if summary is not None else None,
    )

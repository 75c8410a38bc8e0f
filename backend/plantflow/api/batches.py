"""
Upload Batch API endpoints.
"""
import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import SQLAlchemyError

from plantflow.api.dependencies import error_response, get_settings, get_store
from plantflow.config.settings import Settings
from plantflow.schemas.shipment_record import ShipmentRecordResponse
from plantflow.schemas.upload_batch import BatchDetailResponse, BatchStats, UploadBatchResponse
from plantflow.services.dashboard import batch_stats
from plantflow.services.record_store import RecordStore

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("")
async def list_batches(
    store: RecordStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
):
    """Batches inside the retention window, newest first."""
    try:
        batches = store.list_batches(settings.retention_days)
    except SQLAlchemyError as e:
        logger.error("Batches fetch error: %s", e)
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to fetch batches.", str(e))
    return [UploadBatchResponse.model_validate(b).model_dump(mode="json") for b in batches]


@router.get("/{batch_id}", response_model=BatchDetailResponse)
async def get_batch(
    batch_id: int,
    store: RecordStore = Depends(get_store),
):
    """A batch with all of its shipments and ready/in-process counts."""
    try:
        batch = store.get_batch(batch_id)
        if batch is None:
            return error_response(status.HTTP_404_NOT_FOUND, "Batch not found.")
        shipments = store.records_for_batch(batch.id)
    except SQLAlchemyError as e:
        logger.error("Batch detail error for %s: %s", batch_id, e)
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to fetch shipments.", str(e))

    return BatchDetailResponse(
        batch=UploadBatchResponse.model_validate(batch),
        shipments=[ShipmentRecordResponse.model_validate(s) for s in shipments],
        stats=BatchStats(**batch_stats(shipments)),
    )

"""
Shipment record API endpoints: dashboard lists, status toggles, edits.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.exc import SQLAlchemyError

from plantflow.api.dependencies import error_from, error_response, get_store
from plantflow.schemas.dashboard import DashboardStats, RecordsResponse
from plantflow.schemas.shipment_record import RecordUpdate, RecordUpdateResponse, ShipmentRecordResponse
from plantflow.schemas.upload_batch import UploadBatchResponse
from plantflow.services.dashboard import dashboard_stats, resolve_batch, split_by_status
from plantflow.services.errors import StoreError
from plantflow.services.record_store import RecordStore

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("", response_model=RecordsResponse)
async def get_records(
    batch_id: Optional[int] = Query(None, alias="batchId"),
    store: RecordStore = Depends(get_store),
):
    """Records of a batch (latest by default) split into in-process and ready."""
    try:
        batch = resolve_batch(store, batch_id)
        if batch is None:
            return RecordsResponse()
        records = store.records_for_batch(batch.id)
    except SQLAlchemyError as e:
        logger.error("Records fetch error: %s", e)
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Failed to fetch records.",
            str(e),
        )

    in_process, ready = split_by_status(records)
    return RecordsResponse(
        batch=UploadBatchResponse.model_validate(batch),
        in_process_list=[ShipmentRecordResponse.model_validate(r) for r in in_process],
        ready_list=[ShipmentRecordResponse.model_validate(r) for r in ready],
        stats=DashboardStats(**dashboard_stats(in_process, ready)),
    )


@router.patch("/{record_id}", response_model=RecordUpdateResponse)
@router.patch("/{record_id}/ready", response_model=RecordUpdateResponse)
async def update_record(
    record_id: int,
    update: RecordUpdate,
    store: RecordStore = Depends(get_store),
):
    """Apply only the whitelisted fields present in the request body."""
    changes = update.to_changes()
    if not changes:
        return error_response(status.HTTP_400_BAD_REQUEST, "No updatable fields supplied.")

    try:
        record = store.update_record(record_id, changes)
    except StoreError as e:
        logger.error("Failed to update record %s: %s", record_id, e.details)
        return error_from(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            StoreError("Failed to update record.", details=e.details),
        )

    if record is None:
        return error_response(status.HTTP_404_NOT_FOUND, f"Record {record_id} not found.")

    logger.info("Updated record %s fields=%s", record_id, sorted(changes))
    return RecordUpdateResponse(record=ShipmentRecordResponse.model_validate(record))


@router.delete("/{record_id}")
async def delete_record(
    record_id: int,
    store: RecordStore = Depends(get_store),
):
    """Delete a single record."""
    try:
        deleted = store.delete_record(record_id)
    except StoreError as e:
        logger.error("Failed to delete record %s: %s", record_id, e.details)
        return error_from(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            StoreError("Failed to delete record.", details=e.details),
        )

    if not deleted:
        return error_response(status.HTTP_404_NOT_FOUND, f"Record {record_id} not found.")
    return {"success": True, "id": record_id}

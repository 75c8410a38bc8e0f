"""
Workbook upload API endpoint.
"""
import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, UploadFile, File as FastAPIFile, status

from plantflow.api.dependencies import error_from, error_response, get_settings, get_store, get_today
from plantflow.config.settings import Settings
from plantflow.schemas.upload_batch import UploadResponse
from plantflow.services.errors import StoreError, UploadValidationError
from plantflow.services.ingestion import ingest_workbook
from plantflow.services.record_store import RecordStore

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/upload", response_model=UploadResponse)
async def upload_workbook(
    file: Optional[UploadFile] = FastAPIFile(None),
    store: RecordStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
    today: date = Depends(get_today),
):
    """Replace today's batch with the rows of an uploaded .xlsx workbook."""
    filename = file.filename if file else None
    content = await file.read() if file else None

    try:
        result = ingest_workbook(
            store,
            filename,
            content,
            today=today,
            retention_days=settings.retention_days,
            header_mode=settings.header_mode,
        )
    except UploadValidationError as e:
        logger.info("Rejected upload %s: %s", filename, e.message)
        return error_from(status.HTTP_400_BAD_REQUEST, e)
    except StoreError as e:
        return error_from(status.HTTP_500_INTERNAL_SERVER_ERROR, e)
    except Exception:
        logger.exception("Upload error for %s", filename)
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Server error processing upload.",
        )

    return result.to_response()

"""
Upload Batch schemas.
"""
from pydantic import BaseModel
from datetime import datetime, date
from typing import Optional, List

from .shipment_record import ShipmentRecordResponse


class UploadBatchResponse(BaseModel):
    id: int
    upload_date: date
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class BatchStats(BaseModel):
    total: int = 0
    ready: int = 0
    in_process: int = 0


class BatchDetailResponse(BaseModel):
    batch: UploadBatchResponse
    shipments: List[ShipmentRecordResponse]
    stats: BatchStats


class UploadResponse(BaseModel):
    success: bool = True
    batch_id: int
    upload_date: date
    row_count: int
    skipped_rows: int = 0
    defaulted_values: int = 0
    unmapped_columns: List[str] = []

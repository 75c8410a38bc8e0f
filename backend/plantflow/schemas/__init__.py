from .shipment_record import ShipmentRecordResponse, RecordUpdate, RecordUpdateResponse
from .upload_batch import UploadBatchResponse, BatchStats, BatchDetailResponse, UploadResponse
from .dashboard import (
    DashboardStats,
    RecordsResponse,
    PlantEntry,
    PlantStatusSummary,
    PlantStatusResponse,
    PlantHistoryEntry,
    PlantHistorySummary,
    PlantHistoryResponse,
)

__all__ = [
    "ShipmentRecordResponse",
    "RecordUpdate",
    "RecordUpdateResponse",
    "UploadBatchResponse",
    "BatchStats",
    "BatchDetailResponse",
    "UploadResponse",
    "DashboardStats",
    "RecordsResponse",
    "PlantEntry",
    "PlantStatusSummary",
    "PlantStatusResponse",
    "PlantHistoryEntry",
    "PlantHistorySummary",
    "PlantHistoryResponse",
]

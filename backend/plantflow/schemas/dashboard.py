"""
Dashboard, TV board and plant history schemas.

Aggregate keys are camelCase on the wire to match the dashboard client.
"""
from pydantic import BaseModel, Field
from typing import Optional, List

from .shipment_record import ShipmentRecordResponse
from .upload_batch import UploadBatchResponse


class DashboardStats(BaseModel):
    total: int = 0
    in_process: int = Field(0, alias="inProcess")
    ready: int = 0
    total_rows: int = Field(0, alias="totalRows")
    in_process_rows: int = Field(0, alias="inProcessRows")
    ready_rows: int = Field(0, alias="readyRows")

    class Config:
        populate_by_name = True


class RecordsResponse(BaseModel):
    batch: Optional[UploadBatchResponse] = None
    in_process_list: List[ShipmentRecordResponse] = []
    ready_list: List[ShipmentRecordResponse] = []
    stats: DashboardStats = DashboardStats()


class PlantEntry(BaseModel):
    id: int
    plant: str
    location: str = ""
    is_ready: bool = Field(False, alias="isReady")

    class Config:
        populate_by_name = True


class PlantStatusSummary(BaseModel):
    total: int = 0
    ready: int = 0
    pending: int = 0


class PlantStatusResponse(BaseModel):
    entries: List[PlantEntry] = []
    batch: Optional[UploadBatchResponse] = None
    summary: PlantStatusSummary = PlantStatusSummary()


class PlantHistoryEntry(BaseModel):
    upload_date: str
    mode: Optional[str] = None
    weight: Optional[float] = None
    amount: Optional[float] = None
    invoice_no: Optional[str] = None
    eod_data: Optional[str] = None
    case_count: Optional[int] = None
    volume: Optional[float] = None
    location: Optional[str] = None
    is_ready: bool = False


class PlantHistorySummary(BaseModel):
    total_weight: float = Field(0, alias="totalWeight")
    total_amount: float = Field(0, alias="totalAmount")
    total_volume: float = Field(0, alias="totalVolume")
    days_present: int = Field(0, alias="daysPresent")

    class Config:
        populate_by_name = True


class PlantHistoryResponse(BaseModel):
    plant: str
    history: List[PlantHistoryEntry] = []
    summary: Optional[PlantHistorySummary] = None

"""
Shipment Record schemas.
"""
from pydantic import BaseModel
from datetime import datetime
from typing import Optional, Dict, Any


class ShipmentRecordResponse(BaseModel):
    id: int
    batch_id: int
    plant: str
    location: Optional[str] = ""
    pgi_no: Optional[str] = ""
    pgi_date: Optional[str] = ""
    invoice_no: Optional[str] = ""
    invoice_date: Optional[str] = ""
    mode: Optional[str] = ""
    case_count: Optional[int] = 0
    weight: Optional[float] = 0
    volume: Optional[float] = 0
    amount: Optional[float] = 0
    preferred_mode: Optional[str] = ""
    preferred_edd: Optional[str] = ""
    dispatch_remark: Optional[str] = ""
    eod_data: Optional[str] = ""
    remarks: Optional[str] = ""
    is_ready: bool = False
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class RecordUpdate(BaseModel):
    """
    Partial update of a record. Only fields present in the request body are
    applied; anything not declared here is ignored.
    """
    is_ready: Optional[bool] = None
    remarks: Optional[str] = None
    remark: Optional[str] = None  # older clients send the singular name
    dispatch_remark: Optional[str] = None
    preferred_mode: Optional[str] = None
    preferred_edd: Optional[str] = None
    mode: Optional[str] = None
    location: Optional[str] = None
    case_count: Optional[int] = None
    weight: Optional[float] = None
    volume: Optional[float] = None
    amount: Optional[float] = None

    def to_changes(self) -> Dict[str, Any]:
        changes = self.model_dump(exclude_unset=True, exclude_none=True)
        remark = changes.pop("remark", None)
        if remark is not None:
            changes.setdefault("remarks", remark)
        return changes


class RecordUpdateResponse(BaseModel):
    success: bool = True
    record: ShipmentRecordResponse

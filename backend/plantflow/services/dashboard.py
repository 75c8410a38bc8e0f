"""
Dashboard aggregation: status splits, case totals and per-plant history.
"""
from datetime import date
from typing import Dict, List, Optional, Sequence, Tuple

from plantflow.models import ShipmentRecord, UploadBatch
from plantflow.services.ingestion import retention_cutoff
from plantflow.services.record_store import RecordStore


def resolve_batch(store: RecordStore, batch_id: Optional[int]) -> Optional[UploadBatch]:
    """The requested batch, or the most recent one when no id is given."""
    if batch_id is not None:
        return store.get_batch(batch_id)
    return store.latest_batch()


def split_by_status(
    records: Sequence[ShipmentRecord],
) -> Tuple[List[ShipmentRecord], List[ShipmentRecord]]:
    in_process = [r for r in records if not r.is_ready]
    ready = [r for r in records if r.is_ready]
    return in_process, ready


def _sum_cases(records: Sequence[ShipmentRecord]) -> int:
    return sum(r.case_count or 0 for r in records)


def dashboard_stats(in_process: Sequence[ShipmentRecord], ready: Sequence[ShipmentRecord]) -> Dict[str, int]:
    """Case totals and row counts for the in-process and ready lists."""
    return {
        "total": _sum_cases(in_process) + _sum_cases(ready),
        "in_process": _sum_cases(in_process),
        "ready": _sum_cases(ready),
        "total_rows": len(in_process) + len(ready),
        "in_process_rows": len(in_process),
        "ready_rows": len(ready),
    }


def batch_stats(records: Sequence[ShipmentRecord]) -> Dict[str, int]:
    ready = sum(1 for r in records if r.is_ready)
    return {"total": len(records), "ready": ready, "in_process": len(records) - ready}


def plant_status(store: RecordStore, batch_id: Optional[int]) -> Tuple[Optional[UploadBatch], List[dict], dict]:
    """Every record of the batch as a board entry, ordered by plant."""
    batch = resolve_batch(store, batch_id)
    if batch is None:
        return None, [], {"total": 0, "ready": 0, "pending": 0}
    entries = [
        {
            "id": r.id,
            "plant": r.plant,
            "location": r.location or "",
            "is_ready": bool(r.is_ready),
        }
        for r in store.records_for_batch(batch.id, order_by_plant=True)
    ]
    ready = sum(1 for e in entries if e["is_ready"])
    return batch, entries, {"total": len(entries), "ready": ready, "pending": len(entries) - ready}


def plant_history(store: RecordStore, plant: str, today: date, retention_days: int) -> Tuple[List[dict], Optional[dict]]:
    """A plant's records across the batches still inside the retention window."""
    batches = store.batches_since(retention_cutoff(today, retention_days))
    if not batches:
        return [], None

    records = store.records_for_plant(plant, [b.id for b in batches])
    history = [
        {
            "upload_date": r.batch.upload_date.isoformat() if r.batch else "",
            "mode": r.mode,
            "weight": r.weight,
            "amount": r.amount,
            "invoice_no": r.invoice_no,
            "eod_data": r.eod_data,
            "case_count": r.case_count,
            "volume": r.volume,
            "location": r.location,
            "is_ready": r.is_ready,
        }
        for r in records
    ]
    summary = {
        "total_weight": sum(h["weight"] or 0 for h in history),
        "total_amount": sum(h["amount"] or 0 for h in history),
        "total_volume": sum(h["volume"] or 0 for h in history),
        "days_present": len({h["upload_date"] for h in history}),
    }
    return history, summary

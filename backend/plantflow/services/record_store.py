"""
Record store - the filtered reads and mutations the rest of the app needs.

Mutating helpers used by ingestion do not commit; callers group them with
``transaction()`` so a replace/create/insert sequence succeeds or rolls back
as one unit.
"""
from contextlib import contextmanager
from datetime import date
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, contains_eager

from plantflow.models import ShipmentRecord, UploadBatch
from plantflow.services.errors import StoreError

BATCH_SIZE = 1000


def _store_message(exc: SQLAlchemyError) -> str:
    orig = getattr(exc, "orig", None)
    return str(orig) if orig is not None else str(exc)


class RecordStore:
    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def transaction(self):
        """Commit on success; roll back and raise StoreError on store failure."""
        try:
            yield self
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise StoreError("Store operation failed.", details=_store_message(exc)) from exc
        except Exception:
            self.db.rollback()
            raise

    # -- batches -----------------------------------------------------------

    def _delete_batches(self, criterion) -> int:
        batch_ids = [row.id for row in self.db.query(UploadBatch.id).filter(criterion).all()]
        if not batch_ids:
            return 0
        self.db.query(ShipmentRecord).filter(
            ShipmentRecord.batch_id.in_(batch_ids)
        ).delete(synchronize_session="fetch")
        self.db.query(UploadBatch).filter(
            UploadBatch.id.in_(batch_ids)
        ).delete(synchronize_session="fetch")
        return len(batch_ids)

    def delete_batches_by_date(self, upload_date: date) -> int:
        return self._delete_batches(UploadBatch.upload_date == upload_date)

    def delete_batches_older_than(self, cutoff: date) -> int:
        return self._delete_batches(UploadBatch.upload_date < cutoff)

    def insert_batch(self, upload_date: date) -> UploadBatch:
        batch = UploadBatch(upload_date=upload_date)
        self.db.add(batch)
        self.db.flush()
        return batch

    def get_batch(self, batch_id: int) -> Optional[UploadBatch]:
        return self.db.query(UploadBatch).filter(UploadBatch.id == batch_id).first()

    def latest_batch(self) -> Optional[UploadBatch]:
        return self.db.query(UploadBatch).order_by(UploadBatch.upload_date.desc()).first()

    def list_batches(self, limit: int) -> List[UploadBatch]:
        return (
            self.db.query(UploadBatch)
            .order_by(UploadBatch.upload_date.desc())
            .limit(limit)
            .all()
        )

    def batches_since(self, cutoff: date) -> List[UploadBatch]:
        return (
            self.db.query(UploadBatch)
            .filter(UploadBatch.upload_date >= cutoff)
            .order_by(UploadBatch.upload_date.desc())
            .all()
        )

    # -- records -----------------------------------------------------------

    def bulk_insert_records(self, batch_id: int, records: Iterable[Dict[str, Any]]) -> int:
        chunk: List[Dict[str, Any]] = []
        inserted = 0
        for record in records:
            chunk.append({**record, "batch_id": batch_id})
            if len(chunk) >= BATCH_SIZE:
                self.db.bulk_insert_mappings(ShipmentRecord, chunk)
                inserted += len(chunk)
                chunk = []
        if chunk:
            self.db.bulk_insert_mappings(ShipmentRecord, chunk)
            inserted += len(chunk)
        return inserted

    def records_for_batch(self, batch_id: int, order_by_plant: bool = False) -> List[ShipmentRecord]:
        query = self.db.query(ShipmentRecord).filter(ShipmentRecord.batch_id == batch_id)
        if order_by_plant:
            query = query.order_by(ShipmentRecord.plant.asc(), ShipmentRecord.id.asc())
        else:
            query = query.order_by(ShipmentRecord.id.asc())
        return query.all()

    def records_for_plant(self, plant: str, batch_ids: List[int]) -> List[ShipmentRecord]:
        if not batch_ids:
            return []
        return (
            self.db.query(ShipmentRecord)
            .join(ShipmentRecord.batch)
            .options(contains_eager(ShipmentRecord.batch))
            .filter(ShipmentRecord.plant == plant, ShipmentRecord.batch_id.in_(batch_ids))
            .order_by(UploadBatch.upload_date.desc(), ShipmentRecord.id.asc())
            .all()
        )

    def get_record(self, record_id: int) -> Optional[ShipmentRecord]:
        return self.db.query(ShipmentRecord).filter(ShipmentRecord.id == record_id).first()

    def update_record(self, record_id: int, changes: Dict[str, Any]) -> Optional[ShipmentRecord]:
        with self.transaction():
            record = self.get_record(record_id)
            if record is None:
                return None
            for name, value in changes.items():
                setattr(record, name, value)
        self.db.refresh(record)
        return record

    def delete_record(self, record_id: int) -> bool:
        with self.transaction():
            record = self.get_record(record_id)
            if record is None:
                return False
            self.db.delete(record)
        return True

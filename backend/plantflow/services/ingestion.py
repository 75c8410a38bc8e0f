"""
Batch ingestion - turns an uploaded dispatch workbook into today's batch.

Steps, single pass, no retries:
1. validate the file, sheet and header row (no store writes on failure)
2. map and filter rows (no store writes if nothing survives)
3. in one transaction: drop today's batch, create a new one, insert records
4. prune batches older than the retention window (best effort)
"""
import logging
import time
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import List, Optional

from plantflow.services.errors import StoreError, UploadValidationError
from plantflow.services.file_parser import check_upload_file, read_workbook, validate_headers
from plantflow.services.normalizer import build_records
from plantflow.services.record_store import RecordStore

logger = logging.getLogger(__name__)


@dataclass
class IngestResult:
    batch_id: int
    upload_date: date
    row_count: int
    skipped_rows: int = 0
    defaulted_values: int = 0
    unmapped_columns: List[str] = field(default_factory=list)
    pruned_batches: int = 0

    def to_response(self) -> dict:
        return {
            "success": True,
            "batch_id": self.batch_id,
            "upload_date": self.upload_date.isoformat(),
            "row_count": self.row_count,
            "skipped_rows": self.skipped_rows,
            "defaulted_values": self.defaulted_values,
            "unmapped_columns": self.unmapped_columns,
        }


def retention_cutoff(today: date, retention_days: int) -> date:
    return today - timedelta(days=retention_days)


def prune_expired_batches(store: RecordStore, today: date, retention_days: int) -> int:
    """Delete batches dated before the retention cutoff. Failures are logged only."""
    cutoff = retention_cutoff(today, retention_days)
    try:
        with store.transaction():
            pruned = store.delete_batches_older_than(cutoff)
    except StoreError as e:
        logger.warning("Pruning batches older than %s failed: %s", cutoff, e.details)
        return 0
    if pruned:
        logger.info("Pruned %d batch(es) older than %s", pruned, cutoff)
    return pruned


def ingest_workbook(
    store: RecordStore,
    filename: Optional[str],
    content: Optional[bytes],
    today: date,
    retention_days: int,
    header_mode: str = "alias",
) -> IngestResult:
    """
    Replace today's batch with the rows of an uploaded workbook.

    Raises UploadValidationError for anything wrong with the upload itself
    and StoreError when the store rejects the replace/create/insert
    transaction. A failed transaction leaves the previous batch untouched.
    """
    timings = {}
    total_start = time.perf_counter()

    check_upload_file(filename, content)

    read_start = time.perf_counter()
    df = read_workbook(content)
    timings["read_file"] = round(time.perf_counter() - read_start, 3)

    mapping = validate_headers(list(df.columns), header_mode)
    if mapping.unmapped:
        logger.info("Upload %s has unmapped columns: %s", filename, mapping.unmapped)

    normalize_start = time.perf_counter()
    normalized = build_records(df, mapping.columns)
    timings["normalize_rows"] = round(time.perf_counter() - normalize_start, 3)
    if not normalized.records:
        raise UploadValidationError("No valid data rows found in Excel.")

    stage = "Failed to replace existing batch."
    store_start = time.perf_counter()
    try:
        with store.transaction():
            replaced = store.delete_batches_by_date(today)
            stage = "Failed to create batch."
            batch = store.insert_batch(today)
            batch_id = batch.id
            stage = "Failed to insert records."
            row_count = store.bulk_insert_records(batch_id, normalized.records)
    except StoreError as e:
        logger.error("%s upload_date=%s error=%s", stage, today, e.details)
        raise StoreError(stage, details=e.details) from e
    timings["store"] = round(time.perf_counter() - store_start, 3)

    pruned = prune_expired_batches(store, today, retention_days)
    timings["total"] = round(time.perf_counter() - total_start, 3)

    logger.info(
        "Ingested %s into batch %s (%d rows, %d skipped, replaced=%d, pruned=%d) timings=%s",
        filename,
        batch_id,
        row_count,
        normalized.skipped_rows,
        replaced,
        pruned,
        timings,
    )

    return IngestResult(
        batch_id=batch_id,
        upload_date=today,
        row_count=row_count,
        skipped_rows=normalized.skipped_rows,
        defaulted_values=normalized.defaulted_values,
        unmapped_columns=mapping.unmapped,
        pruned_batches=pruned,
    )

"""
Script to ingest a dispatch workbook from disk as today's batch.
Usage: python scripts/ingest_workbook.py path/to/dispatch.xlsx
"""
import sys
import os
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

from plantflow.config.settings import Settings
from plantflow.db.database import Database
from plantflow.main import utc_today
from plantflow.services.errors import PlantflowError
from plantflow.services.ingestion import ingest_workbook
from plantflow.services.record_store import RecordStore


def main(argv):
    if len(argv) != 2:
        print(__doc__.strip())
        return 2

    path = Path(argv[1])
    if not path.exists():
        print(f"✗ File not found: {path}")
        return 1

    settings = Settings.from_env()
    database = Database(settings.database_url, echo=settings.sql_echo)
    database.create_all()
    db = database.session()
    try:
        result = ingest_workbook(
            RecordStore(db),
            path.name,
            path.read_bytes(),
            today=utc_today(),
            retention_days=settings.retention_days,
            header_mode=settings.header_mode,
        )
    except PlantflowError as e:
        print(f"✗ {e.message}")
        if e.details:
            print(f"  details: {e.details}")
        return 1
    finally:
        db.close()
        database.dispose()

    print(f"✓ Batch {result.batch_id} ({result.upload_date}): {result.row_count} rows loaded")
    if result.skipped_rows:
        print(f"  skipped {result.skipped_rows} non-data row(s)")
    if result.unmapped_columns:
        print(f"  unmapped columns: {', '.join(result.unmapped_columns)}")
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv))

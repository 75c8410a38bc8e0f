"""Tests for the upload endpoint and app wiring."""

from __future__ import annotations

from datetime import date

from fastapi.testclient import TestClient
from sqlalchemy.exc import SQLAlchemyError

from plantflow.services.record_store import RecordStore

from sheet_fixtures import HEADERS, make_row


class TestHealthEndpoint:
    """Tests for the health check endpoint."""

    def test_health_returns_healthy_status(self, client: TestClient) -> None:
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_cors_middleware_is_configured(self, app) -> None:
        middleware_classes = [m.cls.__name__ for m in app.user_middleware]
        assert "CORSMiddleware" in middleware_classes


class TestUploadSuccess:
    """Tests for accepted uploads."""

    def test_upload_creates_batch(self, client: TestClient, upload) -> None:
        response = upload([make_row("P101"), make_row("P102"), make_row("TOTAL")])

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["upload_date"] == "2026-03-15"
        assert data["row_count"] == 2
        assert data["skipped_rows"] == 1
        assert data["unmapped_columns"] == []

        records = client.get("/api/records").json()
        assert records["batch"]["id"] == data["batch_id"]
        assert [r["plant"] for r in records["in_process_list"]] == ["P101", "P102"]

    def test_uppercase_extension_is_accepted(self, upload) -> None:
        assert upload([make_row()], filename="DISPATCH.XLSX").status_code == 200

    def test_same_day_reupload_replaces_records(self, client: TestClient, upload) -> None:
        first = upload([make_row("P1"), make_row("P2")]).json()
        second = upload([make_row("P7")]).json()

        batches = client.get("/api/batches").json()
        assert [b["id"] for b in batches] == [second["batch_id"]]
        assert first["batch_id"] != second["batch_id"]
        records = client.get("/api/records").json()
        assert [r["plant"] for r in records["in_process_list"]] == ["P7"]

    def test_upload_is_dated_by_clock(self, client: TestClient, upload, clock) -> None:
        clock.today = date(2026, 3, 14)
        upload([make_row("P1")])
        clock.today = date(2026, 3, 15)
        upload([make_row("P1")])
        dates = [b["upload_date"] for b in client.get("/api/batches").json()]
        assert dates == ["2026-03-15", "2026-03-14"]


    def test_overflowing_case_count_defaults_to_zero(self, client: TestClient, upload) -> None:
        response = upload([make_row("P1", **{"No. of Case": "1e400"}), make_row("P2")])

        assert response.status_code == 200
        assert response.json()["row_count"] == 2
        records = client.get("/api/records").json()["in_process_list"]
        assert [r["case_count"] for r in records] == [0, 12]


class TestUploadRejections:
    """Tests for uploads answered with an error payload."""

    def test_wrong_file_type(self, upload) -> None:
        response = upload([make_row()], filename="dispatch.csv")
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid file. Only .xlsx format is accepted."}

    def test_no_file_part(self, client: TestClient) -> None:
        response = client.post("/api/upload", data={"note": "forgot the file"})
        assert response.status_code == 400
        assert response.json()["error"] == "Invalid file. Only .xlsx format is accepted."

    def test_missing_required_columns(self, client: TestClient, upload) -> None:
        columns = [h for h in HEADERS if h not in ("Plant", "Amount")] + ["Truck No"]
        response = upload([make_row()], columns=columns)

        assert response.status_code == 400
        assert response.json() == {
            "error": "Excel is missing required columns.",
            "details": {"missing": ["plant", "amount"], "unmapped": ["Truck No"]},
        }
        assert client.get("/api/batches").json() == []

    def test_empty_sheet(self, upload) -> None:
        response = upload([])
        assert response.status_code == 400
        assert response.json()["error"] == "Excel file is empty."

    def test_unreadable_workbook(self, client: TestClient) -> None:
        response = client.post(
            "/api/upload",
            files={"file": ("dispatch.xlsx", b"not a workbook", "application/octet-stream")},
        )
        assert response.status_code == 400
        assert response.json()["error"] == "Could not read Excel file."
        assert "details" in response.json()

    def test_only_total_rows(self, client: TestClient, upload) -> None:
        response = upload([make_row("TOTAL"), make_row("")])
        assert response.status_code == 400
        assert response.json()["error"] == "No valid data rows found in Excel."
        assert client.get("/api/batches").json() == []


class TestUploadServerErrors:
    """Tests for store and unexpected failures."""

    def test_store_failure_keeps_previous_batch(self, client: TestClient, upload, monkeypatch) -> None:
        previous = upload([make_row("P1")]).json()

        def fail_insert(self, batch_id, records):
            raise SQLAlchemyError("disk I/O error")

        monkeypatch.setattr(RecordStore, "bulk_insert_records", fail_insert)
        response = upload([make_row("P2")])

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to insert records.", "details": "disk I/O error"}
        records = client.get("/api/records").json()
        assert records["batch"]["id"] == previous["batch_id"]
        assert [r["plant"] for r in records["in_process_list"]] == ["P1"]

    def test_unexpected_error(self, upload, monkeypatch) -> None:
        def explode(*args, **kwargs):
            raise RuntimeError("boom")

        monkeypatch.setattr("plantflow.api.upload.ingest_workbook", explode)
        response = upload([make_row()])
        assert response.status_code == 500
        assert response.json() == {"error": "Server error processing upload."}

"""
Error types shared by the ingestion pipeline, the record store and the API.
"""
from typing import Any, Optional


class PlantflowError(Exception):
    """Base exception carrying a caller-facing message and optional details."""

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_payload(self) -> dict:
        payload = {"error": self.message}
        if self.details is not None:
            payload["details"] = self.details
        return payload


class UploadValidationError(PlantflowError):
    """Raised when an uploaded workbook is rejected before any store write."""


class StoreError(PlantflowError):
    """Raised when a record store query or mutation fails."""


class RecordNotFoundError(PlantflowError):
    """Raised when a batch or record id does not exist."""

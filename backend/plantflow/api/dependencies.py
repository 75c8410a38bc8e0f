"""
Shared dependencies and error responses for API routes.
"""
from datetime import date
from typing import Any, Optional

from fastapi import Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from plantflow.config.settings import Settings
from plantflow.db.database import get_db
from plantflow.services.errors import PlantflowError
from plantflow.services.record_store import RecordStore


def get_store(db: Session = Depends(get_db)) -> RecordStore:
    return RecordStore(db)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_today(request: Request) -> date:
    """Today's date from the app clock, so uploads can be dated in tests."""
    return request.app.state.clock()


def error_response(status_code: int, error: str, details: Optional[Any] = None) -> JSONResponse:
    content = {"error": error}
    if details is not None:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content)


def error_from(status_code: int, exc: PlantflowError) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=exc.to_payload())

"""
Upload Batch model - one spreadsheet upload per calendar date.
"""
from sqlalchemy import Column, Integer, Date, DateTime
from sqlalchemy.orm import relationship
from datetime import datetime
from plantflow.db.database import Base


class UploadBatch(Base):
    __tablename__ = "upload_batches"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    upload_date = Column(Date, nullable=False, unique=True, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    records = relationship(
        "ShipmentRecord",
        back_populates="batch",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

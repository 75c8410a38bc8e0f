"""
Shipment Record model - one normalized spreadsheet row.
"""
from sqlalchemy import Column, String, DateTime, ForeignKey, Integer, Float, Boolean, Text
from sqlalchemy.orm import relationship
from datetime import datetime
from plantflow.db.database import Base


class ShipmentRecord(Base):
    __tablename__ = "shipment_records"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    batch_id = Column(
        Integer,
        ForeignKey("upload_batches.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    plant = Column(String, nullable=False, index=True)
    location = Column(String, default="")
    pgi_no = Column(String, default="")
    # Dates are kept as parsed text: unrecognised formats pass through verbatim
    pgi_date = Column(String, default="")
    invoice_no = Column(String, default="")
    invoice_date = Column(String, default="")
    mode = Column(String, default="")
    case_count = Column(Integer, default=0)
    weight = Column(Float, default=0)
    volume = Column(Float, default=0)
    amount = Column(Float, default=0)
    preferred_mode = Column(String, default="")
    preferred_edd = Column(String, default="")
    dispatch_remark = Column(String, default="")
    eod_data = Column(String, default="")
    remarks = Column(Text, default="")
    is_ready = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    batch = relationship("UploadBatch", back_populates="records")

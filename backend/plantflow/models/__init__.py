from .upload_batch import UploadBatch
from .shipment_record import ShipmentRecord

__all__ = [
    "UploadBatch",
    "ShipmentRecord",
]

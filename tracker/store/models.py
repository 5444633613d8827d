from enum import Enum
from typing import List

class ShipmentStatus(str, Enum):
    LABEL_CREATED = "Label Created"
    PICKED_UP = "Picked Up"
    IN_TRANSIT = "In Transit"
    OUT_FOR_DELIVERY = "Out for Delivery"
    DELIVERED = "Delivered"

# Ordered; a shipment only moves forward through these
STAGES: List[str] = [s.value for s in ShipmentStatus]

DEFAULT_SERVICE = "Ground"
DEFAULT_WEIGHT = "0.0"

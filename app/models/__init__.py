from app.models.auth.user import User
from app.models.logistics.shipment import Shipment

__all__ = [
    "User",
    "Shipment",
]

from enum import Enum

# Enums
class UserRole(str, Enum):
    WAREHOUSE = "WAREHOUSE"
    DEALER = "DEALER"

class ShipmentStatus(str, Enum):
    PENDING = "Pending"
    OPTIMIZED = "Optimized"
    BOOKED = "Booked"
    IN_TRANSIT = "In Transit"

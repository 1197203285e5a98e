from typing import Any, Dict, List, Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict

from app.models.shared.enums import ShipmentStatus
from app.schemas.base import BaseSchema

class ShipmentFields(BaseModel):
    """Validated values for a new shipment"""
    model_config = ConfigDict(frozen=True)

    weight: float
    volume: float
    destination: str
    deadline: datetime

class ShipmentPatch(BaseModel):
    """Validated subset of shipment fields. Only fields present in the request are set."""
    model_config = ConfigDict(frozen=True)

    weight: Optional[float] = None
    volume: Optional[float] = None
    destination: Optional[str] = None
    deadline: Optional[datetime] = None
    status: Optional[ShipmentStatus] = None

    def changes(self) -> Dict[str, Any]:
        return self.model_dump(exclude_unset=True)

    @property
    def is_empty(self) -> bool:
        return not self.model_fields_set

class ShipmentRecord(BaseModel):
    """Immutable view of a persisted shipment"""
    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: int
    owner_id: int
    weight: float
    volume: float
    destination: str
    deadline: datetime
    status: ShipmentStatus
    is_optimized: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class ShipmentResponse(BaseSchema):
    id: int
    owner_id: int
    weight: float
    volume: float
    destination: str
    deadline: datetime
    status: ShipmentStatus
    is_optimized: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class ShipmentSummary(BaseSchema):
    id: int
    status: ShipmentStatus
    weight: float
    volume: float
    destination: str
    deadline: datetime

class ShipmentEnvelope(BaseSchema):
    shipment: ShipmentResponse

class ShipmentListResponse(BaseSchema):
    shipments: List[ShipmentSummary]

class ShipmentMetrics(BaseSchema):
    total_shipments: int
    optimized_shipments: int
    pending_shipments: int
    optimization_percentage: float

class ShipmentMetricsResponse(BaseSchema):
    metrics: ShipmentMetrics

from sqlalchemy import Column, Integer, String, DateTime, Boolean, Float, ForeignKey, Enum as SQLEnum
from sqlalchemy.orm import relationship
from app.db.base import BaseModel
from app.models.shared.enums import ShipmentStatus

class Shipment(BaseModel):
    __tablename__ = 'shipments'
    
    owner_id = Column(Integer, ForeignKey('users.id', ondelete="CASCADE"), nullable=False, index=True)
    weight = Column(Float, nullable=False)  # kg
    volume = Column(Float, nullable=False)  # m3
    destination = Column(String(255), nullable=False)
    deadline = Column(DateTime(timezone=True), nullable=False)
    status = Column(
        SQLEnum(ShipmentStatus, values_callable=lambda enum: [member.value for member in enum]),
        nullable=False,
        default=ShipmentStatus.PENDING,
    )
    is_optimized = Column(Boolean, nullable=False, default=False)
    
    # Relationships
    owner = relationship("User", back_populates="shipments")

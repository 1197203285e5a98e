from sqlalchemy import Column, String, JSON, Enum as SQLEnum
from sqlalchemy.orm import relationship
from app.db.base import BaseModel
from app.models.shared.enums import UserRole

class User(BaseModel):
    __tablename__ = "users"

    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    role = Column(SQLEnum(UserRole), nullable=False)

    # Warehouse profile
    company_name = Column(String(255), nullable=True)
    manager_name = Column(String(255), nullable=True)
    location = Column(String(255), nullable=True)

    # Dealer profile
    truck_types = Column(JSON, nullable=True)
    service_areas = Column(JSON, nullable=True)

    # Relationships
    shipments = relationship("Shipment", back_populates="owner", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<User {self.email}>"

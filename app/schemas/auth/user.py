from typing import Annotated, List, Literal, Optional, Union
from datetime import datetime
from pydantic import EmailStr, Field, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel

from app.core.security import MAX_PASSWORD_BYTES
from app.models.shared.enums import UserRole
from app.schemas.base import BaseSchema

class RegistrationBase(BaseSchema):
    email: EmailStr
    password: str = Field(..., min_length=8)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        return v.strip().lower()

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, v: str):
        if len(v.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValueError(f"password must be at most {MAX_PASSWORD_BYTES} bytes")
        return v

class WarehouseRegistration(RegistrationBase):
    role: Literal["WAREHOUSE"]
    company_name: str
    manager_name: str
    location: str

    @field_validator("company_name", "manager_name", "location")
    @classmethod
    def required_text(cls, v: str, info: ValidationInfo):
        v = v.strip()
        if not v:
            raise ValueError(f"{to_camel(info.field_name)} is required")
        return v

class DealerRegistration(RegistrationBase):
    role: Literal["DEALER"]
    truck_types: List[str] = Field(..., min_length=1)
    service_areas: List[str] = Field(..., min_length=1)

    @field_validator("truck_types", "service_areas")
    @classmethod
    def non_empty_entries(cls, v: List[str], info: ValidationInfo):
        cleaned = [entry.strip() for entry in v]
        if any(not entry for entry in cleaned):
            raise ValueError(f"{to_camel(info.field_name)} entries must be non-empty strings")
        return cleaned

RegistrationRequest = Annotated[
    Union[WarehouseRegistration, DealerRegistration],
    Field(discriminator="role"),
]

class UserResponse(BaseSchema):
    id: int
    email: str
    role: UserRole
    company_name: Optional[str] = None
    manager_name: Optional[str] = None
    location: Optional[str] = None
    truck_types: Optional[List[str]] = None
    service_areas: Optional[List[str]] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

class UserEnvelope(BaseSchema):
    user: UserResponse

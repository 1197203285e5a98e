from pydantic import BaseModel, ConfigDict

from app.models.shared.enums import UserRole

class Principal(BaseModel):
    """The authenticated actor behind a request"""
    model_config = ConfigDict(frozen=True)

    id: int
    role: UserRole

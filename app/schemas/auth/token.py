
from app.schemas.base import BaseSchema

class TokenPair(BaseSchema):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int

class RefreshTokenRequest(BaseSchema):
    refresh_token: str

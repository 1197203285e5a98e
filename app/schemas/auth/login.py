from pydantic import EmailStr

from app.schemas.auth.token import TokenPair
from app.schemas.auth.user import UserResponse
from app.schemas.base import BaseSchema

class LoginRequest(BaseSchema):
    email: EmailStr
    password: str

class LoginResponse(BaseSchema):
    user: UserResponse
    tokens: TokenPair

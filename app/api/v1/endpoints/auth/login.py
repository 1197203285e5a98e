import logging
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_async_session
from app.core.exceptions import StorageFailureError
from app.schemas.auth.login import LoginRequest, LoginResponse
from app.schemas.auth.token import TokenPair, RefreshTokenRequest
from app.schemas.auth.user import UserResponse
from app.services.auth.auth_service import AuthService

router = APIRouter()
logger = logging.getLogger(__name__)

@router.post("/login", response_model=LoginResponse)
async def login(
    login_data: LoginRequest,
    session: AsyncSession = Depends(get_async_session),
):
    """Authenticate user and return an access/refresh token pair"""
    try:
        auth_service = AuthService(session)
        user = await auth_service.authenticate_user(
            email=login_data.email,
            password=login_data.password,
        )
        tokens = auth_service.create_tokens(user)

        return LoginResponse(
            user=UserResponse.model_validate(user),
            tokens=TokenPair(**tokens),
        )
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Login error: {str(e)}")
        raise StorageFailureError("Unable to login at this time")

@router.post("/refresh", response_model=TokenPair)
async def refresh_token(
    refresh_data: RefreshTokenRequest,
    session: AsyncSession = Depends(get_async_session),
):
    """Exchange a refresh token for a new token pair"""
    try:
        auth_service = AuthService(session)
        tokens = await auth_service.refresh_tokens(refresh_data.refresh_token)
        return TokenPair(**tokens)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Token refresh error: {str(e)}")
        raise StorageFailureError("Unable to refresh token at this time")

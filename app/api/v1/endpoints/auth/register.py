import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.database import get_async_session
from app.core.exceptions import StorageFailureError
from app.schemas.auth.user import RegistrationRequest, UserEnvelope, UserResponse
from app.services.auth.auth_service import AuthService

router = APIRouter()
logger = logging.getLogger(__name__)

@router.post("/register", response_model=UserEnvelope, status_code=status.HTTP_201_CREATED)
async def register_user(
    registration: RegistrationRequest,
    session: AsyncSession = Depends(get_async_session),
):
    """Register a warehouse or dealer account"""
    try:
        auth_service = AuthService(session)
        new_user = await auth_service.register_user(registration)
        return {"user": UserResponse.model_validate(new_user)}
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Registration error: {str(e)}")
        raise StorageFailureError("Unable to register user at this time")

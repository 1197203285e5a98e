import logging
from typing import Dict, Union
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy import select
from app.models.auth.user import User
from app.models.shared.enums import UserRole
from app.core.security import hash_password, verify_password, create_access_token, create_refresh_token
from app.core.config import settings
from app.core.exceptions import DuplicateEmailError, InvalidCredentialsError, StorageFailureError, UnauthenticatedError
from app.auth.jwt_handler import decode_refresh_token
from app.core.logging import log_user_action
from app.schemas.auth.user import WarehouseRegistration, DealerRegistration

logger = logging.getLogger(__name__)

class AuthService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_user_by_email(self, email: str) -> Union[User, None]:
        result = await self.session.execute(
            select(User).where(User.email == email.strip().lower())
        )
        return result.scalar_one_or_none()

    async def register_user(self, registration: Union[WarehouseRegistration, DealerRegistration]) -> User:
        """Create a warehouse or dealer account with a hashed password"""
        if await self.get_user_by_email(registration.email):
            raise DuplicateEmailError()

        user = User(
            email=registration.email,
            hashed_password=hash_password(registration.password),
            role=UserRole(registration.role),
        )

        if isinstance(registration, WarehouseRegistration):
            user.company_name = registration.company_name
            user.manager_name = registration.manager_name
            user.location = registration.location
        else:
            user.truck_types = registration.truck_types
            user.service_areas = registration.service_areas

        try:
            self.session.add(user)
            await self.session.commit()
            await self.session.refresh(user)
        except IntegrityError:
            # Lost a race with a concurrent registration for the same email
            await self.session.rollback()
            raise DuplicateEmailError()
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(f"RegisterUserError: {str(e)}")
            raise StorageFailureError("Unable to register user at this time")

        log_user_action(user.id, "register", "user", user.id)
        logger.info(f"New user registered: {user.email} ({user.role.value})")
        return user

    async def authenticate_user(self, email: str, password: str) -> User:
        """Authenticate user with email and password"""
        try:
            user = await self.get_user_by_email(email)
        except SQLAlchemyError as e:
            logger.error(f"LoginUserError: {str(e)}")
            raise StorageFailureError("Unable to login at this time")

        if user is None or not verify_password(password, user.hashed_password):
            logger.warning(f"Failed login attempt for {email}")
            raise InvalidCredentialsError()

        log_user_action(user.id, "login", "auth")
        return user

    def create_tokens(self, user: User) -> Dict[str, Union[str, int]]:
        """Issue an access/refresh token pair for the user"""
        return {
            "access_token": create_access_token(user.id, user.role.value),
            "refresh_token": create_refresh_token(user.id, user.role.value),
            "token_type": "bearer",
            "expires_in": settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        }

    async def refresh_tokens(self, refresh_token: str) -> Dict[str, Union[str, int]]:
        """Exchange a valid refresh token for a new token pair"""
        payload = decode_refresh_token(refresh_token)
        if payload is None:
            raise UnauthenticatedError("Invalid or expired refresh token")

        try:
            user = await self.session.get(User, int(payload.get("sub")))
        except (TypeError, ValueError):
            raise UnauthenticatedError("Invalid or expired refresh token")
        except SQLAlchemyError as e:
            logger.error(f"RefreshTokenError: {str(e)}")
            raise StorageFailureError("Unable to refresh token at this time")

        if user is None:
            raise UnauthenticatedError("Invalid or expired refresh token")

        return self.create_tokens(user)

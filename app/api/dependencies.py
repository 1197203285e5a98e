import json
import logging
from typing import Any, Dict, Optional
from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from app.core.database import async_session_maker
from app.core.exceptions import UnauthenticatedError, ValidationFailedError
from app.auth.jwt_handler import decode_access_token
from app.auth.permissions import PermissionChecker, ShipmentOperation
from app.models.shared.enums import UserRole
from app.repositories.shipment_repository import ShipmentRepository, SQLAlchemyShipmentRepository
from app.schemas.auth.principal import Principal
from app.services.logistics.shipment_service import ShipmentService

security = HTTPBearer(auto_error=False)
logger = logging.getLogger(__name__)

async def get_current_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[Principal]:
    """
    Resolve the principal from the bearer token.
    A missing token yields None so the permission gate can answer 401;
    a token that is present but unusable is rejected here.
    """
    if credentials is None:
        return None

    payload = decode_access_token(credentials.credentials)
    if payload is None:
        raise UnauthenticatedError("Invalid or expired token")

    try:
        return Principal(id=int(payload.get("sub")), role=UserRole(payload.get("role")))
    except (TypeError, ValueError):
        logger.warning("Access token carried an unusable subject or role")
        raise UnauthenticatedError("Invalid or expired token")

def require_shipment_operation(operation: ShipmentOperation):
    """
    Dependency to require a shipment operation before the request body is read
    """
    async def permission_dependency(
        principal: Optional[Principal] = Depends(get_current_principal),
    ) -> Principal:
        return PermissionChecker(principal).require(operation)

    return permission_dependency

def get_shipment_repository() -> ShipmentRepository:
    return SQLAlchemyShipmentRepository(async_session_maker)

def get_shipment_service(
    repository: ShipmentRepository = Depends(get_shipment_repository),
) -> ShipmentService:
    return ShipmentService(repository)

async def read_json_body(request: Request) -> Dict[str, Any]:
    """Parse the request body as a JSON object. An empty body is an empty object."""
    raw = await request.body()
    if not raw.strip():
        return {}

    try:
        payload = json.loads(raw)
    except (UnicodeDecodeError, ValueError):
        raise ValidationFailedError(["Request body must be valid JSON"])

    if not isinstance(payload, dict):
        raise ValidationFailedError(["Request body must be a JSON object"])
    return payload

# app/auth/permissions.py
# Role-scoped access rules for shipment operations

from enum import Enum
from typing import Dict, FrozenSet, Optional
import logging

from app.core.exceptions import ForbiddenError, UnauthenticatedError
from app.models.shared.enums import UserRole
from app.schemas.auth.principal import Principal

logger = logging.getLogger(__name__)

SHIPMENT_RESOURCE = "shipment"


class ShipmentOperation(str, Enum):
    CREATE = "create"
    LIST = "list"
    UPDATE = "update"
    DELETE = "delete"
    METRICS = "metrics"


class AccessDecision(str, Enum):
    ALLOWED = "ALLOWED"
    UNAUTHENTICATED = "UNAUTHENTICATED"
    FORBIDDEN = "FORBIDDEN"


# role -> operations it may perform
ROLE_PERMISSIONS: Dict[UserRole, FrozenSet[ShipmentOperation]] = {
    UserRole.WAREHOUSE: frozenset(ShipmentOperation),
    UserRole.DEALER: frozenset(),
}

FORBIDDEN_MESSAGES: Dict[ShipmentOperation, str] = {
    ShipmentOperation.CREATE: "Only warehouse users can create shipments",
    ShipmentOperation.LIST: "Only warehouse users can view shipments",
    ShipmentOperation.UPDATE: "Only warehouse users can update shipments",
    ShipmentOperation.DELETE: "Only warehouse users can delete shipments",
    ShipmentOperation.METRICS: "Only warehouse users can view shipment metrics",
}


def can_perform(principal: Optional[Principal], operation: ShipmentOperation) -> AccessDecision:
    """
    Decide whether the principal may perform a shipment operation.
    Authentication is checked before role.
    """
    if principal is None:
        return AccessDecision.UNAUTHENTICATED

    allowed = ROLE_PERMISSIONS.get(principal.role, frozenset())
    if operation not in allowed:
        return AccessDecision.FORBIDDEN

    return AccessDecision.ALLOWED


class PermissionChecker:
    """
    Check what a principal may do with shipments
    """

    def __init__(self, principal: Optional[Principal]):
        self.principal = principal

    def require(self, operation: ShipmentOperation, custom_message: Optional[str] = None) -> Principal:
        """
        Require permission or raise the matching HTTP error. Returns the principal on success.
        """
        decision = can_perform(self.principal, operation)
        permission = format_permission_name(operation)

        if decision == AccessDecision.UNAUTHENTICATED:
            logger.debug(f"Permission {permission} requested without credentials")
            raise UnauthenticatedError()

        if decision == AccessDecision.FORBIDDEN:
            message = custom_message or FORBIDDEN_MESSAGES[operation]
            logger.warning(
                f"Permission check failed: {permission} "
                f"for user {self.principal.id} ({self.principal.role.value})"
            )
            raise ForbiddenError(message)

        return self.principal


def format_permission_name(operation: ShipmentOperation) -> str:
    """
    Format permission as string
    """
    return f"{SHIPMENT_RESOURCE}:{operation.value}"

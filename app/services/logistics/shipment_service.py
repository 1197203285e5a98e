# app/services/logistics/shipment_service.py
import asyncio
import logging
from typing import Any, List, Mapping, Optional

from app.auth.permissions import PermissionChecker, ShipmentOperation
from app.core.exceptions import (
    ConflictError,
    InvalidTransitionError,
    NoFieldsProvidedError,
    NotFoundError,
    StorageFailureError,
    ValidationFailedError,
)
from app.core.logging import log_user_action
from app.models.shared.enums import ShipmentStatus
from app.repositories.shipment_repository import RepositoryError, ShipmentRepository
from app.schemas.auth.principal import Principal
from app.schemas.logistics.shipment_schema import ShipmentMetrics, ShipmentRecord
from app.services.logistics.shipment_lifecycle import can_delete, is_valid_transition, merge_shipment
from app.utils.validators.shipment_validators import validate_create, validate_partial_update

logger = logging.getLogger(__name__)


def compute_optimization_percentage(optimized_shipments: int, total_shipments: int) -> float:
    """Share of optimized shipments, rounded to 2 decimals. 0 when there are no shipments."""
    if total_shipments == 0:
        return 0
    return round((optimized_shipments / total_shipments) * 100, 2)


class ShipmentService:
    def __init__(self, repository: ShipmentRepository):
        self.repository = repository

    async def create_shipment(self, principal: Optional[Principal], payload: Mapping[str, Any]) -> ShipmentRecord:
        """Create a new shipment owned by the principal"""
        principal = PermissionChecker(principal).require(ShipmentOperation.CREATE)

        fields, errors = validate_create(payload)
        if errors:
            raise ValidationFailedError(errors)

        try:
            shipment = await self.repository.create(principal.id, fields)
        except RepositoryError as e:
            logger.error(f"CreateShipmentError: {str(e)}")
            raise StorageFailureError("Unable to create shipment at this time")

        log_user_action(principal.id, "create", "shipment", shipment.id)
        logger.info(f"Shipment created successfully: {shipment.id}")
        return shipment

    async def list_shipments(self, principal: Optional[Principal]) -> List[ShipmentRecord]:
        """Get the principal's shipments, newest first"""
        principal = PermissionChecker(principal).require(ShipmentOperation.LIST)

        try:
            return await self.repository.list_owned(principal.id)
        except RepositoryError as e:
            logger.error(f"ListShipmentsError: {str(e)}")
            raise StorageFailureError("Unable to fetch shipments at this time")

    async def get_metrics(self, principal: Optional[Principal]) -> ShipmentMetrics:
        """
        Aggregate counts for the principal's shipments.

        The three counts run concurrently and are not read from a single snapshot,
        so they may disagree briefly under concurrent writes.
        """
        principal = PermissionChecker(principal).require(ShipmentOperation.METRICS)

        try:
            total_shipments, optimized_shipments, pending_shipments = await asyncio.gather(
                self.repository.count_owned(principal.id),
                self.repository.count_owned(principal.id, ShipmentStatus.OPTIMIZED),
                self.repository.count_owned(principal.id, ShipmentStatus.PENDING),
            )
        except RepositoryError as e:
            logger.error(f"ShipmentMetricsError: {str(e)}")
            raise StorageFailureError("Unable to fetch shipment metrics at this time")

        return ShipmentMetrics(
            total_shipments=total_shipments,
            optimized_shipments=optimized_shipments,
            pending_shipments=pending_shipments,
            optimization_percentage=compute_optimization_percentage(optimized_shipments, total_shipments),
        )

    async def update_shipment(
        self,
        principal: Optional[Principal],
        shipment_id: int,
        payload: Mapping[str, Any],
    ) -> ShipmentRecord:
        """Apply a partial update. Status changes must follow the lifecycle."""
        principal = PermissionChecker(principal).require(ShipmentOperation.UPDATE)

        patch, errors = validate_partial_update(payload)
        if errors:
            raise ValidationFailedError(errors)
        if patch.is_empty:
            raise NoFieldsProvidedError()

        try:
            shipment = await self.repository.find_owned(shipment_id, principal.id)
        except RepositoryError as e:
            logger.error(f"UpdateShipmentError: {str(e)}")
            raise StorageFailureError("Unable to update shipment at this time")

        if shipment is None:
            raise NotFoundError("Shipment not found")

        if patch.status is not None and not is_valid_transition(shipment.status, patch.status):
            raise InvalidTransitionError(shipment.status.value, patch.status.value)

        try:
            updated = await self.repository.apply_update(merge_shipment(shipment, patch))
        except RepositoryError as e:
            logger.error(f"UpdateShipmentError: {str(e)}")
            raise StorageFailureError("Unable to update shipment at this time")

        if updated is None:
            raise NotFoundError("Shipment not found")

        log_user_action(principal.id, "update", "shipment", shipment_id)
        logger.info(f"Shipment {shipment_id} updated successfully")
        return updated

    async def delete_shipment(self, principal: Optional[Principal], shipment_id: int) -> None:
        """Permanently delete a shipment that is not in transit"""
        principal = PermissionChecker(principal).require(ShipmentOperation.DELETE)

        try:
            shipment = await self.repository.find_owned(shipment_id, principal.id)
        except RepositoryError as e:
            logger.error(f"DeleteShipmentError: {str(e)}")
            raise StorageFailureError("Unable to delete shipment at this time")

        if shipment is None:
            raise NotFoundError("Shipment not found")

        if not can_delete(shipment.status):
            raise ConflictError("Shipments in transit cannot be deleted")

        try:
            await self.repository.delete(shipment)
        except RepositoryError as e:
            logger.error(f"DeleteShipmentError: {str(e)}")
            raise StorageFailureError("Unable to delete shipment at this time")

        log_user_action(principal.id, "delete", "shipment", shipment_id)
        logger.info(f"Shipment {shipment_id} deleted")

# app/api/v1/endpoints/logistics/shipments.py
import logging
from fastapi import APIRouter, Depends, HTTPException, Request, Response, status

from app.api.dependencies import get_shipment_service, read_json_body, require_shipment_operation
from app.auth.permissions import ShipmentOperation
from app.core.exceptions import StorageFailureError
from app.schemas.auth.principal import Principal
from app.schemas.logistics.shipment_schema import (
    ShipmentEnvelope, ShipmentListResponse, ShipmentMetricsResponse,
    ShipmentResponse, ShipmentSummary
)
from app.services.logistics.shipment_service import ShipmentService

router = APIRouter()
logger = logging.getLogger(__name__)

@router.post("", response_model=ShipmentEnvelope, status_code=status.HTTP_201_CREATED)
async def create_shipment(
    request: Request,
    principal: Principal = Depends(require_shipment_operation(ShipmentOperation.CREATE)),
    shipment_service: ShipmentService = Depends(get_shipment_service),
):
    """Create a new shipment in Pending status"""
    try:
        payload = await read_json_body(request)
        shipment = await shipment_service.create_shipment(principal, payload)
        return {"shipment": ShipmentResponse.model_validate(shipment)}
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error creating shipment: {str(e)}")
        raise StorageFailureError("Unable to create shipment at this time")

@router.get("", response_model=ShipmentListResponse)
async def list_shipments(
    principal: Principal = Depends(require_shipment_operation(ShipmentOperation.LIST)),
    shipment_service: ShipmentService = Depends(get_shipment_service),
):
    """Get the caller's shipments, most recent first"""
    try:
        shipments = await shipment_service.list_shipments(principal)
        return {"shipments": [ShipmentSummary.model_validate(shipment) for shipment in shipments]}
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error getting shipments: {str(e)}")
        raise StorageFailureError("Unable to fetch shipments at this time")

@router.get("/metrics", response_model=ShipmentMetricsResponse)
async def get_shipment_metrics(
    principal: Principal = Depends(require_shipment_operation(ShipmentOperation.METRICS)),
    shipment_service: ShipmentService = Depends(get_shipment_service),
):
    """Get total, optimized and pending counts with the optimization percentage"""
    try:
        metrics = await shipment_service.get_metrics(principal)
        return {"metrics": metrics}
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error getting shipment metrics: {str(e)}")
        raise StorageFailureError("Unable to fetch shipment metrics at this time")

@router.put("/{shipment_id}", response_model=ShipmentEnvelope)
async def update_shipment(
    shipment_id: int,
    request: Request,
    principal: Principal = Depends(require_shipment_operation(ShipmentOperation.UPDATE)),
    shipment_service: ShipmentService = Depends(get_shipment_service),
):
    """Partially update a shipment. Status may only advance one step."""
    try:
        payload = await read_json_body(request)
        shipment = await shipment_service.update_shipment(principal, shipment_id, payload)
        return {"shipment": ShipmentResponse.model_validate(shipment)}
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error updating shipment {shipment_id}: {str(e)}")
        raise StorageFailureError("Unable to update shipment at this time")

@router.delete("/{shipment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_shipment(
    shipment_id: int,
    principal: Principal = Depends(require_shipment_operation(ShipmentOperation.DELETE)),
    shipment_service: ShipmentService = Depends(get_shipment_service),
):
    """Delete a shipment that is not in transit"""
    try:
        await shipment_service.delete_shipment(principal, shipment_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error deleting shipment {shipment_id}: {str(e)}")
        raise StorageFailureError("Unable to delete shipment at this time")

"""
Shipment lifecycle state machine. Statuses only move forward, one step at a time.
"""
from typing import Any, Optional

from app.models.shared.enums import ShipmentStatus
from app.schemas.logistics.shipment_schema import ShipmentPatch, ShipmentRecord

# Ordered lifecycle; the index is the position in the flow
STATUS_FLOW = (
    ShipmentStatus.PENDING,
    ShipmentStatus.OPTIMIZED,
    ShipmentStatus.BOOKED,
    ShipmentStatus.IN_TRANSIT,
)

INITIAL_STATUS = STATUS_FLOW[0]
TERMINAL_STATUS = STATUS_FLOW[-1]


def _position(status: Any) -> Optional[int]:
    try:
        return STATUS_FLOW.index(ShipmentStatus(status))
    except (ValueError, TypeError):
        return None


def next_status(current: Any) -> Optional[ShipmentStatus]:
    """The status that follows `current`, or None when terminal or unknown."""
    index = _position(current)
    if index is None or index + 1 >= len(STATUS_FLOW):
        return None
    return STATUS_FLOW[index + 1]


def is_valid_transition(current: Any, requested: Any) -> bool:
    """True iff `requested` is exactly one step after `current`."""
    following = next_status(current)
    if following is None:
        return False
    return _position(requested) == STATUS_FLOW.index(following)


def can_delete(status: Any) -> bool:
    return _position(status) != STATUS_FLOW.index(TERMINAL_STATUS)


def merge_shipment(current: ShipmentRecord, patch: ShipmentPatch) -> ShipmentRecord:
    """Build the updated shipment from the current value and a validated patch."""
    return current.model_copy(update=patch.changes())

import math
import re
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Tuple

from app.models.shared.enums import ShipmentStatus
from app.schemas.logistics.shipment_schema import ShipmentFields, ShipmentPatch

WEIGHT_ERROR = "Weight must be a number greater than 0"
VOLUME_ERROR = "Volume must be a number greater than 0"
DESTINATION_ERROR = "Destination is required"
DEADLINE_ERROR = "Deadline must be a valid ISO date string"
STATUS_ERROR = "Status must be one of: " + ", ".join(status.value for status in ShipmentStatus)

_STATUS_VALUES = {status.value: status for status in ShipmentStatus}

# Plain ASCII decimal with optional exponent; no digit separators or non-ASCII digits
_DECIMAL_PATTERN = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?", re.ASCII)


class ShipmentValidator:
    @staticmethod
    def parse_positive_number(value: Any) -> Optional[float]:
        """
        Coerce a finite number greater than zero.
        Numeric strings are parsed; bools, NaN, infinity, zero and negatives are rejected.
        """
        if isinstance(value, bool):
            return None
        if isinstance(value, (int, float)):
            candidate = value
        elif isinstance(value, str):
            text = value.strip()
            if not _DECIMAL_PATTERN.fullmatch(text):
                return None
            candidate = float(text)
        else:
            return None

        try:
            number = float(candidate)
        except OverflowError:
            return None
        if not math.isfinite(number) or number <= 0:
            return None
        return number

    @staticmethod
    def parse_destination(value: Any) -> Optional[str]:
        if not isinstance(value, str):
            return None
        value = value.strip()
        return value or None

    @staticmethod
    def parse_deadline(value: Any) -> Optional[datetime]:
        """
        Accept a datetime or an ISO-8601 string. A trailing 'Z' and naive values are read as UTC.
        """
        if isinstance(value, datetime):
            parsed = value
        elif isinstance(value, str):
            text = value.strip()
            if text[-1:] in ("Z", "z"):
                text = text[:-1] + "+00:00"
            try:
                parsed = datetime.fromisoformat(text)
            except ValueError:
                return None
        else:
            return None

        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed

    @staticmethod
    def parse_status(value: Any) -> Optional[ShipmentStatus]:
        if isinstance(value, ShipmentStatus):
            return value
        if not isinstance(value, str):
            return None
        return _STATUS_VALUES.get(value)


def _deadline_input(payload: Mapping[str, Any]) -> Any:
    # `date` is the legacy name for `deadline`
    value = payload.get("deadline")
    if value is None:
        value = payload.get("date")
    return value


def _collect(payload: Mapping[str, Any], fields: Tuple[str, ...]) -> Tuple[Dict[str, Any], List[str]]:
    values: Dict[str, Any] = {}
    errors: List[str] = []

    if "weight" in fields:
        weight = ShipmentValidator.parse_positive_number(payload.get("weight"))
        if weight is None:
            errors.append(WEIGHT_ERROR)
        else:
            values["weight"] = weight

    if "volume" in fields:
        volume = ShipmentValidator.parse_positive_number(payload.get("volume"))
        if volume is None:
            errors.append(VOLUME_ERROR)
        else:
            values["volume"] = volume

    if "destination" in fields:
        destination = ShipmentValidator.parse_destination(payload.get("destination"))
        if destination is None:
            errors.append(DESTINATION_ERROR)
        else:
            values["destination"] = destination

    if "deadline" in fields:
        deadline = ShipmentValidator.parse_deadline(_deadline_input(payload))
        if deadline is None:
            errors.append(DEADLINE_ERROR)
        else:
            values["deadline"] = deadline

    if "status" in fields:
        shipment_status = ShipmentValidator.parse_status(payload.get("status"))
        if shipment_status is None:
            errors.append(STATUS_ERROR)
        else:
            values["status"] = shipment_status

    return values, errors


def validate_create(payload: Optional[Mapping[str, Any]]) -> Tuple[Optional[ShipmentFields], List[str]]:
    """
    Validate a create payload, reporting every violated rule.
    Returns (fields, []) on success or (None, errors) on failure.
    """
    if not isinstance(payload, Mapping):
        payload = {}

    values, errors = _collect(payload, ("weight", "volume", "destination", "deadline"))
    if errors:
        return None, errors
    return ShipmentFields(**values), []


def validate_partial_update(payload: Optional[Mapping[str, Any]]) -> Tuple[Optional[ShipmentPatch], List[str]]:
    """
    Validate only the fields present in an update payload.
    An empty patch is not an error here; callers decide how to report it.
    """
    if not isinstance(payload, Mapping):
        payload = {}

    present = tuple(
        field
        for field in ("weight", "volume", "destination", "deadline", "status")
        if field in payload or (field == "deadline" and "date" in payload)
    )
    values, errors = _collect(payload, present)
    if errors:
        return None, errors
    return ShipmentPatch(**values), []

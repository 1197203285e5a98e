import logging

import pytest
from fastapi import status

from app.auth.permissions import (
    FORBIDDEN_MESSAGES, AccessDecision, PermissionChecker, ShipmentOperation,
    can_perform, format_permission_name,
)
from app.core.exceptions import ForbiddenError, UnauthenticatedError


class TestCanPerform:
    @pytest.mark.parametrize("operation", list(ShipmentOperation))
    def test_warehouse_is_allowed_everything(self, warehouse, operation):
        assert can_perform(warehouse, operation) == AccessDecision.ALLOWED

    @pytest.mark.parametrize("operation", list(ShipmentOperation))
    def test_dealer_is_forbidden_everything(self, dealer, operation):
        assert can_perform(dealer, operation) == AccessDecision.FORBIDDEN

    @pytest.mark.parametrize("operation", list(ShipmentOperation))
    def test_anonymous_is_unauthenticated(self, operation):
        assert can_perform(None, operation) == AccessDecision.UNAUTHENTICATED


class TestPermissionChecker:
    def test_forbidden_log_names_the_permission(self, dealer, caplog):
        with caplog.at_level(logging.WARNING, logger="app.auth.permissions"):
            with pytest.raises(ForbiddenError):
                PermissionChecker(dealer).require(ShipmentOperation.DELETE)

        assert "shipment:delete" in caplog.text
        assert f"user {dealer.id} (DEALER)" in caplog.text

    def test_require_returns_principal(self, warehouse):
        assert PermissionChecker(warehouse).require(ShipmentOperation.DELETE) == warehouse

    def test_require_without_principal_raises_401(self):
        with pytest.raises(UnauthenticatedError) as exc_info:
            PermissionChecker(None).require(ShipmentOperation.LIST)

        assert exc_info.value.status_code == status.HTTP_401_UNAUTHORIZED
        assert exc_info.value.detail == "Authentication required"

    @pytest.mark.parametrize("operation", list(ShipmentOperation))
    def test_require_for_dealer_raises_403_with_operation_message(self, dealer, operation):
        with pytest.raises(ForbiddenError) as exc_info:
            PermissionChecker(dealer).require(operation)

        assert exc_info.value.status_code == status.HTTP_403_FORBIDDEN
        assert exc_info.value.detail == FORBIDDEN_MESSAGES[operation]

    def test_create_message(self, dealer):
        with pytest.raises(ForbiddenError) as exc_info:
            PermissionChecker(dealer).require(ShipmentOperation.CREATE)
        assert exc_info.value.detail == "Only warehouse users can create shipments"

    def test_custom_message(self, dealer):
        with pytest.raises(ForbiddenError) as exc_info:
            PermissionChecker(dealer).require(ShipmentOperation.METRICS, custom_message="No metrics for you")
        assert exc_info.value.detail == "No metrics for you"


def test_format_permission_name():
    assert format_permission_name(ShipmentOperation.UPDATE) == "shipment:update"

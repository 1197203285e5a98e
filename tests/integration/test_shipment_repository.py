from datetime import datetime, timezone

import pytest
from sqlalchemy.exc import OperationalError

from app.models.shared.enums import ShipmentStatus
from app.repositories.shipment_repository import RepositoryError
from app.schemas.logistics.shipment_schema import ShipmentFields

FIELDS = ShipmentFields(
    weight=10.0,
    volume=2.5,
    destination="Reno",
    deadline=datetime(2025, 1, 1, tzinfo=timezone.utc),
)


class TestSQLAlchemyShipmentRepository:
    @pytest.mark.asyncio
    async def test_create_assigns_id_and_defaults(self, sql_repository):
        shipment = await sql_repository.create(1, FIELDS)

        assert shipment.id is not None
        assert shipment.owner_id == 1
        assert shipment.status == ShipmentStatus.PENDING
        assert shipment.is_optimized is False
        assert shipment.created_at is not None
        assert shipment.destination == "Reno"

    @pytest.mark.asyncio
    async def test_find_owned_is_scoped(self, sql_repository):
        shipment = await sql_repository.create(1, FIELDS)

        assert (await sql_repository.find_owned(shipment.id, 1)).id == shipment.id
        assert await sql_repository.find_owned(shipment.id, 2) is None
        assert await sql_repository.find_owned(shipment.id + 100, 1) is None

    @pytest.mark.asyncio
    async def test_list_owned_newest_first(self, sql_repository):
        first = await sql_repository.create(1, FIELDS)
        second = await sql_repository.create(1, FIELDS)
        await sql_repository.create(2, FIELDS)

        shipments = await sql_repository.list_owned(1)

        assert [shipment.id for shipment in shipments] == [second.id, first.id]

    @pytest.mark.asyncio
    async def test_count_owned_by_status(self, sql_repository):
        first = await sql_repository.create(1, FIELDS)
        await sql_repository.create(1, FIELDS)
        await sql_repository.create(2, FIELDS)
        await sql_repository.apply_update(first.model_copy(update={"status": ShipmentStatus.OPTIMIZED}))

        assert await sql_repository.count_owned(1) == 2
        assert await sql_repository.count_owned(1, ShipmentStatus.OPTIMIZED) == 1
        assert await sql_repository.count_owned(1, ShipmentStatus.PENDING) == 1
        assert await sql_repository.count_owned(3) == 0

    @pytest.mark.asyncio
    async def test_apply_update_persists_full_value(self, sql_repository):
        shipment = await sql_repository.create(1, FIELDS)

        updated = await sql_repository.apply_update(
            shipment.model_copy(update={"weight": 42.0, "status": ShipmentStatus.OPTIMIZED})
        )

        assert updated.weight == 42.0
        assert updated.status == ShipmentStatus.OPTIMIZED
        stored = await sql_repository.find_owned(shipment.id, 1)
        assert stored.weight == 42.0
        assert stored.volume == 2.5

    @pytest.mark.asyncio
    async def test_apply_update_for_vanished_record(self, sql_repository):
        shipment = await sql_repository.create(1, FIELDS)
        await sql_repository.delete(shipment)

        assert await sql_repository.apply_update(shipment) is None

    @pytest.mark.asyncio
    async def test_delete_is_scoped_to_owner(self, sql_repository):
        shipment = await sql_repository.create(1, FIELDS)

        await sql_repository.delete(shipment.model_copy(update={"owner_id": 2}))
        assert await sql_repository.find_owned(shipment.id, 1) is not None

        await sql_repository.delete(shipment)
        assert await sql_repository.find_owned(shipment.id, 1) is None

    @pytest.mark.asyncio
    async def test_storage_errors_are_wrapped(self, sql_repository, engine):
        async with engine.begin() as conn:
            await conn.exec_driver_sql("DROP TABLE shipments")

        with pytest.raises(RepositoryError) as exc_info:
            await sql_repository.list_owned(1)

        assert isinstance(exc_info.value.__cause__, OperationalError)

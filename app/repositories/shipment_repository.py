# app/repositories/shipment_repository.py
import logging
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncIterator, List, Optional

from sqlalchemy import select, func, delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.models.logistics.shipment import Shipment
from app.models.shared.enums import ShipmentStatus
from app.schemas.logistics.shipment_schema import ShipmentFields, ShipmentRecord
from app.services.logistics.shipment_lifecycle import INITIAL_STATUS

logger = logging.getLogger(__name__)

# Columns a caller may change through apply_update
MUTABLE_FIELDS = ("weight", "volume", "destination", "deadline", "status", "is_optimized")


class RepositoryError(Exception):
    """Raised when the storage backend fails. Never raised for a missing record."""


class ShipmentRepository(ABC):
    """Storage operations for shipments, always scoped to the owning principal."""

    @abstractmethod
    async def create(self, owner_id: int, fields: ShipmentFields) -> ShipmentRecord:
        """Persist a new shipment in its initial status and return it with id and timestamps."""

    @abstractmethod
    async def find_owned(self, shipment_id: int, owner_id: int) -> Optional[ShipmentRecord]:
        """Return the shipment if it exists and belongs to owner_id, else None."""

    @abstractmethod
    async def list_owned(self, owner_id: int) -> List[ShipmentRecord]:
        """Return the owner's shipments, most recently created first."""

    @abstractmethod
    async def count_owned(self, owner_id: int, status: Optional[ShipmentStatus] = None) -> int:
        ...

    @abstractmethod
    async def apply_update(self, shipment: ShipmentRecord) -> Optional[ShipmentRecord]:
        """
        Persist the full updated value of an existing shipment (last write wins).
        Returns None if the record disappeared since it was read.
        """

    @abstractmethod
    async def delete(self, shipment: ShipmentRecord) -> None:
        ...


class SQLAlchemyShipmentRepository(ShipmentRepository):
    """Shipment repository backed by an async SQLAlchemy engine. Each call uses its own session."""

    def __init__(self, session_maker: async_sessionmaker[AsyncSession]):
        self.session_maker = session_maker

    @asynccontextmanager
    async def _session(self, operation: str) -> AsyncIterator[AsyncSession]:
        async with self.session_maker() as session:
            try:
                yield session
            except SQLAlchemyError as e:
                await session.rollback()
                logger.error(f"Shipment storage error during {operation}: {str(e)}")
                raise RepositoryError(f"Storage failure during {operation}") from e

    async def create(self, owner_id: int, fields: ShipmentFields) -> ShipmentRecord:
        async with self._session("create") as session:
            shipment = Shipment(
                owner_id=owner_id,
                weight=fields.weight,
                volume=fields.volume,
                destination=fields.destination,
                deadline=fields.deadline,
                status=INITIAL_STATUS,
                is_optimized=False,
            )
            session.add(shipment)
            await session.commit()
            await session.refresh(shipment)
            return ShipmentRecord.model_validate(shipment)

    async def find_owned(self, shipment_id: int, owner_id: int) -> Optional[ShipmentRecord]:
        async with self._session("find") as session:
            shipment = await self._get_owned(session, shipment_id, owner_id)
            if shipment is None:
                return None
            return ShipmentRecord.model_validate(shipment)

    async def list_owned(self, owner_id: int) -> List[ShipmentRecord]:
        async with self._session("list") as session:
            result = await session.execute(
                select(Shipment)
                .where(Shipment.owner_id == owner_id)
                .order_by(Shipment.created_at.desc(), Shipment.id.desc())
            )
            return [ShipmentRecord.model_validate(shipment) for shipment in result.scalars().all()]

    async def count_owned(self, owner_id: int, status: Optional[ShipmentStatus] = None) -> int:
        async with self._session("count") as session:
            conditions = [Shipment.owner_id == owner_id]
            if status is not None:
                conditions.append(Shipment.status == status)
            result = await session.execute(select(func.count(Shipment.id)).where(*conditions))
            return result.scalar() or 0

    async def apply_update(self, shipment: ShipmentRecord) -> Optional[ShipmentRecord]:
        async with self._session("update") as session:
            row = await self._get_owned(session, shipment.id, shipment.owner_id)
            if row is None:
                return None

            for field in MUTABLE_FIELDS:
                setattr(row, field, getattr(shipment, field))
            row.updated_at = datetime.now(timezone.utc)

            await session.commit()
            await session.refresh(row)
            return ShipmentRecord.model_validate(row)

    async def delete(self, shipment: ShipmentRecord) -> None:
        async with self._session("delete") as session:
            await session.execute(
                delete(Shipment).where(
                    Shipment.id == shipment.id,
                    Shipment.owner_id == shipment.owner_id,
                )
            )
            await session.commit()

    async def _get_owned(self, session: AsyncSession, shipment_id: int, owner_id: int) -> Optional[Shipment]:
        result = await session.execute(
            select(Shipment).where(
                Shipment.id == shipment_id,
                Shipment.owner_id == owner_id,
            )
        )
        return result.scalar_one_or_none()

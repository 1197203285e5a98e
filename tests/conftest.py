import os

# Settings are read at import time; configure them before importing the app
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test.db"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["ENVIRONMENT"] = "test"

from datetime import datetime, timezone
from typing import AsyncGenerator, Dict, List, Optional

import pytest
from httpx import ASGITransport, AsyncClient

import app.models  # noqa: F401  registers tables on Base.metadata
from app.api.dependencies import get_shipment_repository
from app.core.database import build_engine, build_session_maker, get_async_session
from app.core.security import create_access_token
from app.models.base import Base
from app.models.shared.enums import ShipmentStatus, UserRole
from app.repositories.shipment_repository import (
    RepositoryError, ShipmentRepository, SQLAlchemyShipmentRepository
)
from app.schemas.auth.principal import Principal
from app.schemas.logistics.shipment_schema import ShipmentFields, ShipmentRecord
from main import app
from tests.payloads import DEALER_REGISTRATION, WAREHOUSE_REGISTRATION


class InMemoryShipmentRepository(ShipmentRepository):
    """Dict-backed repository that records every call it receives"""

    def __init__(self):
        self.rows: Dict[int, ShipmentRecord] = {}
        self.calls: List[str] = []
        self.fail = False
        self._next_id = 1

    def _record_call(self, name: str):
        self.calls.append(name)
        if self.fail:
            raise RepositoryError(f"storage unavailable during {name}")

    def seed(self, owner_id: int, status: ShipmentStatus = ShipmentStatus.PENDING, **overrides) -> ShipmentRecord:
        now = datetime.now(timezone.utc)
        values = {
            "id": self._next_id,
            "owner_id": owner_id,
            "weight": 10.0,
            "volume": 2.0,
            "destination": "Reno",
            "deadline": datetime(2025, 1, 1, tzinfo=timezone.utc),
            "status": status,
            "is_optimized": False,
            "created_at": now,
            "updated_at": now,
        }
        values.update(overrides)
        record = ShipmentRecord(**values)
        self.rows[record.id] = record
        self._next_id += 1
        return record

    async def create(self, owner_id: int, fields: ShipmentFields) -> ShipmentRecord:
        self._record_call("create")
        return self.seed(owner_id, **fields.model_dump())

    async def find_owned(self, shipment_id: int, owner_id: int) -> Optional[ShipmentRecord]:
        self._record_call("find_owned")
        record = self.rows.get(shipment_id)
        if record is None or record.owner_id != owner_id:
            return None
        return record

    async def list_owned(self, owner_id: int) -> List[ShipmentRecord]:
        self._record_call("list_owned")
        owned = [record for record in self.rows.values() if record.owner_id == owner_id]
        return sorted(owned, key=lambda record: (record.created_at, record.id), reverse=True)

    async def count_owned(self, owner_id: int, status: Optional[ShipmentStatus] = None) -> int:
        self._record_call("count_owned")
        return sum(
            1
            for record in self.rows.values()
            if record.owner_id == owner_id and (status is None or record.status == status)
        )

    async def apply_update(self, shipment: ShipmentRecord) -> Optional[ShipmentRecord]:
        self._record_call("apply_update")
        if shipment.id not in self.rows:
            return None
        updated = shipment.model_copy(update={"updated_at": datetime.now(timezone.utc)})
        self.rows[shipment.id] = updated
        return updated

    async def delete(self, shipment: ShipmentRecord) -> None:
        self._record_call("delete")
        self.rows.pop(shipment.id, None)

@pytest.fixture
def repository() -> InMemoryShipmentRepository:
    return InMemoryShipmentRepository()

@pytest.fixture
def warehouse() -> Principal:
    return Principal(id=1, role=UserRole.WAREHOUSE)

@pytest.fixture
def other_warehouse() -> Principal:
    return Principal(id=2, role=UserRole.WAREHOUSE)

@pytest.fixture
def dealer() -> Principal:
    return Principal(id=3, role=UserRole.DEALER)

@pytest.fixture
async def engine(tmp_path):
    """Per-test SQLite database file"""
    test_engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield test_engine
    await test_engine.dispose()

@pytest.fixture
def session_maker(engine):
    return build_session_maker(engine)

@pytest.fixture
def sql_repository(session_maker) -> SQLAlchemyShipmentRepository:
    return SQLAlchemyShipmentRepository(session_maker)

@pytest.fixture
async def client(session_maker) -> AsyncGenerator[AsyncClient, None]:
    """Create test client bound to the per-test database"""
    async def override_get_db():
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_async_session] = override_get_db
    app.dependency_overrides[get_shipment_repository] = lambda: SQLAlchemyShipmentRepository(session_maker)

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


async def _login_headers(client: AsyncClient, registration: dict) -> dict:
    await client.post("/api/v1/auth/register", json=registration)
    response = await client.post(
        "/api/v1/auth/login",
        json={"email": registration["email"], "password": registration["password"]},
    )
    tokens = response.json()["tokens"]
    return {"Authorization": f"Bearer {tokens['accessToken']}"}

@pytest.fixture
async def warehouse_headers(client: AsyncClient) -> dict:
    """Get authentication headers for a registered warehouse user"""
    return await _login_headers(client, WAREHOUSE_REGISTRATION)

@pytest.fixture
async def other_warehouse_headers(client: AsyncClient) -> dict:
    registration = {**WAREHOUSE_REGISTRATION, "email": "yard@northgate-storage.com", "companyName": "Northgate"}
    return await _login_headers(client, registration)

@pytest.fixture
async def dealer_headers(client: AsyncClient) -> dict:
    """Get authentication headers for a registered dealer user"""
    return await _login_headers(client, DEALER_REGISTRATION)

@pytest.fixture
def token_headers():
    """Build bearer headers for an arbitrary principal without going through login"""
    def _build(user_id: int, role: str) -> dict:
        return {"Authorization": f"Bearer {create_access_token(user_id, role)}"}
    return _build

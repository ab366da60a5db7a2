"""
Test configuration and fixtures for the Realty Media Portal.
Provides an in-memory database, override stores in a temp directory, a mocked
payment gateway, data factories and an API client.
"""

import os
import tempfile

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("OVERRIDE_STATE_DIR", tempfile.mkdtemp(prefix="portal-state-"))

import json
import uuid
from decimal import Decimal
from typing import AsyncGenerator, Dict, List
from urllib.parse import parse_qsl

import httpx
import pytest
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

import portal.models  # noqa: F401
from portal.database import Base, get_db
from portal.main import app
from portal.models.user import User, UserRole
from portal.models.property import Property
from portal.models.payment_method import PaymentMethod
from portal.overrides.registry import OverrideRegistry, get_override_registry
from portal.repositories.user import UserRepository
from portal.repositories.property import PropertyRepository
from portal.repositories.payment_method import PaymentMethodRepository
from portal.services.catalog import CatalogService
from portal.services.order import OrderService
from portal.services.payment_gateway import StripeGateway, get_payment_gateway
from portal.utils.auth import create_access_token


@pytest.fixture
async def engine():
    """Fresh in-memory database per test."""
    test_engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False}
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
async def db_session(engine) -> AsyncGenerator[AsyncSession, None]:
    session_factory = async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        await CatalogService(session).seed_default_services()
        yield session


@pytest.fixture
def registry(tmp_path) -> OverrideRegistry:
    return OverrideRegistry(str(tmp_path / "state"))


class FakeStripe:
    """Records payment intent requests and answers with a canned response."""

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.status_code = 200
        self.payload: Dict = {"id": "pi_test_123", "status": "succeeded"}

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, json=self.payload)

    def decline(self, message: str = "Your card was declined.") -> None:
        self.status_code = 402
        self.payload = {"error": {"message": message, "code": "card_declined"}}

    @property
    def last_form(self) -> Dict[str, str]:
        return dict(parse_qsl(self.requests[-1].content.decode()))


@pytest.fixture
def stripe() -> FakeStripe:
    return FakeStripe()


@pytest.fixture
def gateway(stripe: FakeStripe) -> StripeGateway:
    return StripeGateway("sk_test_123", transport=httpx.MockTransport(stripe.handler))


@pytest.fixture
def order_service(db_session: AsyncSession, registry: OverrideRegistry, gateway: StripeGateway) -> OrderService:
    return OrderService(db_session, registry, gateway)


@pytest.fixture
async def async_client(
    db_session: AsyncSession,
    registry: OverrideRegistry,
    gateway: StripeGateway
) -> AsyncGenerator[httpx.AsyncClient, None]:
    """API client with the database, override stores and gateway replaced."""
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_override_registry] = lambda: registry
    app.dependency_overrides[get_payment_gateway] = lambda: gateway

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


# Test data factories
class UserFactory:

    @staticmethod
    async def create_user(
        db_session: AsyncSession,
        email: str = None,
        password: str = "testpassword123",
        full_name: str = "Test Agent",
        role: UserRole = UserRole.AGENT,
        is_active: bool = True
    ) -> User:
        return await UserRepository(db_session).create_user({
            "email": email or f"agent{uuid.uuid4().hex[:8]}@example.com",
            "password": password,
            "full_name": full_name,
            "role": role,
            "is_active": is_active,
        })


class PropertyFactory:

    @staticmethod
    async def create_property(
        db_session: AsyncSession,
        agent_id: uuid.UUID,
        address: str = "42 Harbour Street, Toronto",
        price: Decimal = Decimal("899000.00"),
        **overrides
    ) -> Property:
        data = {
            "address": address,
            "beds": 3,
            "baths": 2,
            "sqft": 1850,
            "price": price,
            "agent_id": agent_id,
        }
        data.update(overrides)
        return await PropertyRepository(db_session).create(data)


class PaymentMethodFactory:

    @staticmethod
    async def create_method(
        db_session: AsyncSession,
        user_id: uuid.UUID,
        last4: str = "4242",
        is_default: bool = True
    ) -> PaymentMethod:
        return await PaymentMethodRepository(db_session).create({
            "user_id": user_id,
            "gateway_reference": f"pm_card_{last4}",
            "brand": "visa",
            "last4": last4,
            "exp_month": 12,
            "exp_year": 2030,
            "is_default": is_default,
        })


@pytest.fixture
async def test_agent(db_session: AsyncSession) -> User:
    return await UserFactory.create_user(db_session, email="agent@test.com", full_name="Jordan Reyes")


@pytest.fixture
async def other_agent(db_session: AsyncSession) -> User:
    return await UserFactory.create_user(db_session, email="other@test.com", full_name="Sam Lee")


@pytest.fixture
async def test_admin(db_session: AsyncSession) -> User:
    return await UserFactory.create_user(
        db_session,
        email="admin@test.com",
        full_name="Studio Admin",
        role=UserRole.UPCA_ADMIN
    )


@pytest.fixture
async def test_property(db_session: AsyncSession, test_agent: User) -> Property:
    return await PropertyFactory.create_property(db_session, test_agent.id)


@pytest.fixture
async def test_card(db_session: AsyncSession, test_agent: User) -> PaymentMethod:
    return await PaymentMethodFactory.create_method(db_session, test_agent.id)


def auth_headers(user: User) -> Dict[str, str]:
    token = create_access_token(user.id, user.email, user.role)
    return {"Authorization": f"Bearer {token}"}


def read_store_file(registry: OverrideRegistry, namespace: str) -> Dict:
    with open(registry.stores()[namespace].path, encoding="utf-8") as fh:
        return json.load(fh)

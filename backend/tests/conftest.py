"""
Pytest configuration for the supply chain risk monitor backend.

The app runs against an in-memory SQLite database; the language model and
web search are replaced with scripted fakes.
"""

import os
from datetime import datetime, timedelta

import pytest

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ["SEED_DEMO_DATA"] = "false"
os.environ.setdefault("LLM_PROVIDER", "mock")
os.environ.setdefault("PASSWORD_HASH_ROUNDS", "4")

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import app.models  # noqa: F401
from app.api.deps import create_access_token, get_llm, get_search
from app.core.records import ProductRecord, ShipmentRecord, SupplierRecord
from app.core.security import hash_password
from app.database import Base, get_db
from app.models.product import Product, RiskLevel
from app.models.shipment import Shipment, ShipmentStatus, ShippingMethod
from app.models.supplier import Supplier, SupplierStatus
from app.models.user import User
from app.services.llm_client import BaseLLMAdapter

NOW = datetime(2025, 6, 15, 12, 0, 0)
PASSWORD = "correct-horse-9"


class FakeLLM(BaseLLMAdapter):
    """Returns queued replies in order; an Exception instance is raised instead."""

    provider = "fake"
    model = "fake"

    def __init__(self, *replies):
        self.replies = list(replies)
        self.prompts: list[str] = []

    async def _raw_invoke(self, prompt: str) -> str:
        self.prompts.append(prompt)
        reply = self.replies.pop(0) if self.replies else ""
        if isinstance(reply, Exception):
            raise reply
        return reply


class FakeSearch:
    def __init__(self, snippets=None, error: Exception | None = None):
        self.snippets = list(snippets or [])
        self.error = error
        self.queries: list[str] = []

    async def search(self, query: str) -> list[str]:
        self.queries.append(query)
        if self.error:
            raise self.error
        return list(self.snippets)


# ── Record builders for the pure scoring functions ────────────────────


def product_record(**overrides) -> ProductRecord:
    fields = {
        "id": "p1",
        "name": "Widget",
        "category": "Electronics",
        "supplier": "Acme Corp",
        "origin": "Shenzhen, China",
        "unit_cost": 10.0,
        "lead_time": 10,
        "risk_level": "low",
        "created_at": NOW - timedelta(days=3),
    }
    fields.update(overrides)
    return ProductRecord(**fields)


def shipment_record(**overrides) -> ShipmentRecord:
    fields = {
        "id": "s1",
        "origin": "Shenzhen",
        "destination": "Rotterdam",
        "status": "On-Time",
        "expected_delivery": NOW + timedelta(days=5),
        "product": product_record(),
        "tracking_number": "TRK-1",
        "total_value": 5000.0,
        "shipping_method": "Sea",
        "carrier": "Maersk Line",
        "created_at": NOW - timedelta(days=2),
    }
    fields.update(overrides)
    return ShipmentRecord(**fields)


def supplier_record(**overrides) -> SupplierRecord:
    fields = {
        "id": "sup1",
        "name": "Acme Corp",
        "country": "China",
        "rating": 4.0,
        "status": "active",
        "risk_level": "low",
        "lead_time": 30,
        "specialties": ("Electronics",),
        "created_at": NOW - timedelta(days=1),
    }
    fields.update(overrides)
    return SupplierRecord(**fields)


# ── Database and client fixtures ──────────────────────────────────────


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(engine):
    Session = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = Session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def fake_llm():
    return FakeLLM()


@pytest.fixture
def fake_search():
    return FakeSearch()


@pytest.fixture
def client(engine, fake_llm, fake_search):
    from main import app

    Session = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def override_get_db():
        db = Session()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_llm] = lambda: fake_llm
    app.dependency_overrides[get_search] = lambda: fake_search
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def user(db_session):
    user = User(
        name="Test Planner",
        email="planner@acme-logistics.com",
        passwordHash=hash_password(PASSWORD),
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def auth_headers(user):
    return {"Authorization": f"Bearer {create_access_token(user.id, user.email)}"}


@pytest.fixture
def seeded(db_session, user):
    """One supplier, two products and three shipments owned by ``user``."""
    now = datetime.utcnow()
    supplier = Supplier(
        userId=user.id,
        name="Acme Corp",
        location="Shenzhen",
        country="China",
        contactPerson="Li Wei",
        email="li@acme.example.com",
        phone="+86 755 0000",
        rating=4.0,
        status=SupplierStatus.ACTIVE,
        riskLevel=RiskLevel.HIGH,
    )
    widget = Product(
        userId=user.id,
        name="Widget",
        category="Electronics",
        supplier="Acme Corp",
        origin="Shenzhen, China",
        unitCost=10.0,
        leadTime=10,
        minOrderQuantity=1,
        maxOrderQuantity=100,
        riskLevel=RiskLevel.HIGH,
    )
    gadget = Product(
        userId=user.id,
        name="Gadget",
        category="Accessories",
        supplier="Unknown Works",
        origin="Taipei, Taiwan",
        unitCost=5.0,
        leadTime=20,
        minOrderQuantity=1,
        maxOrderQuantity=100,
        riskLevel=RiskLevel.LOW,
    )
    db_session.add_all([supplier, widget, gadget])
    db_session.flush()
    shipments = [
        Shipment(
            userId=user.id,
            productId=widget.id,
            origin="Shanghai Port, China",
            destination="Rotterdam, Netherlands",
            status=ShipmentStatus.DELAYED,
            expectedDelivery=now - timedelta(days=10),
            trackingNumber="TRK-100",
            quantity=10,
            totalValue=20000.0,
            shippingMethod=ShippingMethod.SEA,
            carrier="Maersk Line",
            riskFactors=[],
        ),
        Shipment(
            userId=user.id,
            productId=gadget.id,
            origin="Taipei, Taiwan",
            destination="Los Angeles Port, USA",
            status=ShipmentStatus.ON_TIME,
            expectedDelivery=now + timedelta(days=4),
            trackingNumber="TRK-200",
            quantity=5,
            totalValue=4000.0,
            shippingMethod=ShippingMethod.AIR,
            carrier="FedEx Express",
            riskFactors=[],
        ),
        Shipment(
            userId=user.id,
            productId=widget.id,
            origin="Shanghai Port, China",
            destination="Hamburg, Germany",
            status=ShipmentStatus.STUCK,
            expectedDelivery=now - timedelta(days=2),
            trackingNumber="TRK-300",
            quantity=3,
            totalValue=6000.0,
            shippingMethod=ShippingMethod.SEA,
            carrier="COSCO Shipping",
            riskFactors=[],
        ),
    ]
    db_session.add_all(shipments)
    db_session.commit()
    return {"supplier": supplier, "products": [widget, gadget], "shipments": shipments}

"""Seed a demo user with suppliers, products and shipments if the database is empty."""

from __future__ import annotations

from datetime import datetime, timedelta

from sqlalchemy.orm import Session

from app.config import settings
from app.core.security import hash_password
from app.database import Base, SessionLocal, engine
from app.models.product import Product, RiskLevel
from app.models.shipment import Shipment, ShipmentStatus, ShippingMethod
from app.models.supplier import Supplier, SupplierStatus
from app.models.user import User

DEMO_USER = {"name": "Demo Planner", "email": "demo@supplychain.example.com"}

SEED_SUPPLIERS = [
    {
        "name": "Foxconn Technology Group",
        "location": "Longhua District, Shenzhen",
        "country": "China",
        "contactPerson": "Li Wei",
        "email": "li.wei@foxconn.example.com",
        "phone": "+86 755 2812 9588",
        "rating": 4.5,
        "status": SupplierStatus.ACTIVE,
        "riskLevel": RiskLevel.MEDIUM,
        "certifications": ["ISO 9001", "ISO 14001"],
        "leadTime": 45,
        "specialties": ["Smartphones", "Tablets", "Assembly"],
    },
    {
        "name": "Quanta Computer",
        "location": "Guishan District, Taoyuan",
        "country": "Taiwan",
        "contactPerson": "Chen Mei-Ling",
        "email": "mchen@quanta.example.com",
        "phone": "+886 3 327 2345",
        "rating": 4.2,
        "status": SupplierStatus.ACTIVE,
        "riskLevel": RiskLevel.LOW,
        "certifications": ["ISO 9001"],
        "leadTime": 30,
        "specialties": ["Laptops", "Servers"],
    },
    {
        "name": "Luxshare Precision Industry",
        "location": "Dongguan, Guangdong",
        "country": "China",
        "contactPerson": "Zhang Hao",
        "email": "zhang.hao@luxshare.example.com",
        "phone": "+86 769 8789 2888",
        "rating": 3.4,
        "status": SupplierStatus.PENDING,
        "riskLevel": RiskLevel.HIGH,
        "certifications": [],
        "leadTime": 35,
        "specialties": ["Audio", "Connectors"],
    },
]

SEED_PRODUCTS = [
    {
        "name": "iPhone 15 Pro Max",
        "category": "Consumer Electronics",
        "supplier": "Foxconn Technology Group",
        "origin": "Shenzhen, China",
        "description": "Flagship smartphone, 256GB",
        "unitCost": 899.0,
        "leadTime": 45,
        "minOrderQuantity": 100,
        "maxOrderQuantity": 5000,
        "riskLevel": RiskLevel.MEDIUM,
    },
    {
        "name": "MacBook Air M3",
        "category": "Computers & Laptops",
        "supplier": "Quanta Computer",
        "origin": "Taipei, Taiwan",
        "description": "13-inch laptop",
        "unitCost": 1199.0,
        "leadTime": 30,
        "minOrderQuantity": 50,
        "maxOrderQuantity": 2000,
        "riskLevel": RiskLevel.LOW,
    },
    {
        "name": "AirPods Pro 3rd Gen",
        "category": "Audio Equipment",
        "supplier": "Luxshare Precision Industry",
        "origin": "Dongguan, China",
        "description": "Wireless earbuds",
        "unitCost": 189.0,
        "leadTime": 35,
        "minOrderQuantity": 200,
        "maxOrderQuantity": 10000,
        "riskLevel": RiskLevel.HIGH,
    },
]


def _seed_shipments(now: datetime) -> list[tuple[int, dict]]:
    # (product index, fields); dates relative to now so alerts stay current.
    return [
        (0, {
            "origin": "Shenzhen, China",
            "destination": "Rotterdam, Netherlands",
            "status": ShipmentStatus.DELAYED,
            "expectedDelivery": now - timedelta(days=9),
            "trackingNumber": "MAEU1234567",
            "quantity": 500,
            "totalValue": 449500.0,
            "shippingMethod": ShippingMethod.SEA,
            "carrier": "Maersk Line",
            "currentLocation": "Red Sea - Port Said",
            "riskFactors": ["Red Sea tensions", "Port congestion", "Weather delays"],
        }),
        (1, {
            "origin": "Taipei, Taiwan",
            "destination": "Los Angeles, USA",
            "status": ShipmentStatus.ON_TIME,
            "expectedDelivery": now + timedelta(days=5),
            "trackingNumber": "FDX7788990011",
            "quantity": 200,
            "totalValue": 239800.0,
            "shippingMethod": ShippingMethod.AIR,
            "carrier": "FedEx Express",
            "currentLocation": "In Transit - Pacific Ocean",
            "riskFactors": [],
        }),
        (2, {
            "origin": "Shanghai Port, China",
            "destination": "Hamburg, Germany",
            "status": ShipmentStatus.STUCK,
            "expectedDelivery": now - timedelta(days=4),
            "trackingNumber": "COSU5566778",
            "quantity": 1500,
            "totalValue": 283500.0,
            "shippingMethod": ShippingMethod.SEA,
            "carrier": "COSCO Shipping",
            "currentLocation": "Shanghai Port - Customs Hold",
            "riskFactors": ["Customs inspection"],
        }),
        (0, {
            "origin": "Shenzhen, China",
            "destination": "Long Beach Port, USA",
            "status": ShipmentStatus.DELIVERED,
            "expectedDelivery": now - timedelta(days=20),
            "actualDelivery": now - timedelta(days=18),
            "trackingNumber": "ONEY3344556",
            "quantity": 300,
            "totalValue": 269700.0,
            "shippingMethod": ShippingMethod.SEA,
            "carrier": "Ocean Network Express",
            "riskFactors": [],
        }),
    ]


def _seed_demo_user(db: Session) -> User:
    user = User(**DEMO_USER, passwordHash=hash_password(settings.demo_user_password))
    db.add(user)
    db.flush()
    return user


def _seed_supply_chain(db: Session, user: User) -> None:
    for data in SEED_SUPPLIERS:
        db.add(Supplier(**data, userId=user.id))
    products = [Product(**data, userId=user.id) for data in SEED_PRODUCTS]
    db.add_all(products)
    db.flush()
    for idx, data in _seed_shipments(datetime.utcnow()):
        db.add(Shipment(**data, productId=products[idx].id, userId=user.id))
    db.commit()


def seed_all_if_empty() -> bool:
    """Create all tables and seed the demo dataset when no user exists."""
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        if db.query(User).first():
            return False
        user = _seed_demo_user(db)
        _seed_supply_chain(db, user)
        return True
    finally:
        db.close()

"""Typed snapshots of persisted rows consumed by the scoring and simulation code.

ORM rows are converted once at the route boundary so the core functions work
on plain, immutable records and never touch a session.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


def _enum_value(v: Any) -> str:
    return getattr(v, "value", v) or ""


@dataclass(frozen=True)
class ProductRecord:
    id: str
    name: str
    category: str = ""
    supplier: str = ""
    origin: str = ""
    unit_cost: float = 0.0
    lead_time: int | None = None
    risk_level: str = "medium"
    created_at: datetime | None = None

    @classmethod
    def from_model(cls, row) -> "ProductRecord":
        return cls(
            id=str(row.id),
            name=row.name,
            category=row.category or "",
            supplier=row.supplier or "",
            origin=row.origin or "",
            unit_cost=float(row.unitCost or 0),
            lead_time=row.leadTime,
            risk_level=_enum_value(row.riskLevel),
            created_at=row.createdAt,
        )


@dataclass(frozen=True)
class ShipmentRecord:
    id: str
    origin: str
    destination: str
    status: str
    expected_delivery: datetime
    product: ProductRecord | None = None
    actual_delivery: datetime | None = None
    tracking_number: str | None = None
    total_value: float | None = None
    shipping_method: str | None = None
    carrier: str | None = None
    risk_factors: tuple[str, ...] = ()
    created_at: datetime | None = None

    @classmethod
    def from_model(cls, row) -> "ShipmentRecord":
        product = row.product
        return cls(
            id=str(row.id),
            origin=row.origin or "",
            destination=row.destination or "",
            status=_enum_value(row.status),
            expected_delivery=row.expectedDelivery,
            product=ProductRecord.from_model(product) if product is not None else None,
            actual_delivery=row.actualDelivery,
            tracking_number=row.trackingNumber,
            total_value=row.totalValue,
            shipping_method=_enum_value(row.shippingMethod) or None,
            carrier=row.carrier,
            risk_factors=tuple(row.riskFactors or ()),
            created_at=row.createdAt,
        )


@dataclass(frozen=True)
class SupplierRecord:
    id: str
    name: str
    country: str = ""
    rating: float = 0.0
    status: str = "pending"
    risk_level: str = "medium"
    lead_time: int | None = None
    specialties: tuple[str, ...] = ()
    created_at: datetime | None = None

    @classmethod
    def from_model(cls, row) -> "SupplierRecord":
        return cls(
            id=str(row.id),
            name=row.name,
            country=row.country or "",
            rating=float(row.rating or 0),
            status=_enum_value(row.status),
            risk_level=_enum_value(row.riskLevel),
            lead_time=row.leadTime,
            specialties=tuple(row.specialties or ()),
            created_at=row.createdAt,
        )


@dataclass
class SupplyChainSnapshot:
    """Everything a scoring or simulation call needs, fetched up front."""

    shipments: list[ShipmentRecord] = field(default_factory=list)
    products: list[ProductRecord] = field(default_factory=list)
    suppliers: list[SupplierRecord] = field(default_factory=list)

    @property
    def total_value(self) -> float:
        return sum(s.total_value or 0 for s in self.shipments)

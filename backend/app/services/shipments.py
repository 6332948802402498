"""CRUD for a user's shipments (list, get, create, update, delete)."""

from __future__ import annotations

from datetime import datetime
from typing import Sequence

from fastapi import HTTPException, status
from sqlalchemy.orm import Session, joinedload

from app.models.shipment import Shipment, ShipmentStatus
from app.schemas.shipment import ShipmentCreate, ShipmentUpdate
from app.services.products import get_product


def _require_product(db: Session, product_id: int, user_id: int) -> None:
    if get_product(db, product_id, user_id) is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Product {product_id} does not exist",
        )


def get_shipments(db: Session, user_id: int) -> Sequence[Shipment]:
    return (
        db.query(Shipment)
        .options(joinedload(Shipment.product))
        .filter(Shipment.userId == user_id)
        .order_by(Shipment.createdAt.desc())
        .all()
    )


def get_shipment(db: Session, shipment_id: int, user_id: int) -> Shipment | None:
    return (
        db.query(Shipment)
        .options(joinedload(Shipment.product))
        .filter(Shipment.id == shipment_id, Shipment.userId == user_id)
        .first()
    )


def create_shipment(db: Session, user_id: int, data: ShipmentCreate) -> Shipment:
    _require_product(db, data.productId, user_id)
    shipment = Shipment(**data.model_dump(), userId=user_id)
    if shipment.status == ShipmentStatus.DELIVERED and shipment.actualDelivery is None:
        shipment.actualDelivery = datetime.utcnow()
    db.add(shipment)
    db.commit()
    db.refresh(shipment)
    return shipment


def update_shipment(db: Session, shipment: Shipment, data: ShipmentUpdate) -> Shipment:
    changes = data.model_dump(exclude_unset=True, exclude_none=True)
    if "productId" in changes:
        _require_product(db, changes["productId"], shipment.userId)
    for field, value in changes.items():
        setattr(shipment, field, value)
    if shipment.status == ShipmentStatus.DELIVERED and shipment.actualDelivery is None:
        shipment.actualDelivery = datetime.utcnow()
    db.add(shipment)
    db.commit()
    db.refresh(shipment)
    return shipment


def delete_shipment(db: Session, shipment: Shipment) -> None:
    db.delete(shipment)
    db.commit()

"""CRUD for a user's suppliers (list, get, create, update, delete)."""

from __future__ import annotations

from typing import Sequence

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from app.models.supplier import Supplier
from app.schemas.supplier import SupplierCreate, SupplierUpdate


def get_suppliers(db: Session, user_id: int) -> Sequence[Supplier]:
    return (
        db.query(Supplier)
        .filter(Supplier.userId == user_id)
        .order_by(Supplier.createdAt.desc())
        .all()
    )


def get_supplier(db: Session, supplier_id: int, user_id: int) -> Supplier | None:
    return (
        db.query(Supplier)
        .filter(Supplier.id == supplier_id, Supplier.userId == user_id)
        .first()
    )


def create_supplier(db: Session, user_id: int, data: SupplierCreate) -> Supplier:
    supplier = Supplier(**data.model_dump(), userId=user_id)
    db.add(supplier)
    db.commit()
    db.refresh(supplier)
    return supplier


def update_supplier(db: Session, supplier: Supplier, data: SupplierUpdate) -> Supplier:
    changes = data.model_dump(exclude_unset=True, exclude_none=True)
    low = changes.get("minimumOrder", supplier.minimumOrder)
    high = changes.get("maximumOrder", supplier.maximumOrder)
    if high < low:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Maximum order must be greater than or equal to minimum order",
        )
    for field, value in changes.items():
        setattr(supplier, field, value)
    db.add(supplier)
    db.commit()
    db.refresh(supplier)
    return supplier


def delete_supplier(db: Session, supplier: Supplier) -> None:
    db.delete(supplier)
    db.commit()

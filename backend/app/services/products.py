"""CRUD for a user's products (list, get, create, update, delete)."""

from __future__ import annotations

from typing import Sequence

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from app.models.product import Product
from app.schemas.product import ProductCreate, ProductUpdate


def get_products(db: Session, user_id: int) -> Sequence[Product]:
    return (
        db.query(Product)
        .filter(Product.userId == user_id)
        .order_by(Product.createdAt.desc())
        .all()
    )


def get_product(db: Session, product_id: int, user_id: int) -> Product | None:
    return (
        db.query(Product)
        .filter(Product.id == product_id, Product.userId == user_id)
        .first()
    )


def create_product(db: Session, user_id: int, data: ProductCreate) -> Product:
    product = Product(**data.model_dump(), userId=user_id)
    db.add(product)
    db.commit()
    db.refresh(product)
    return product


def update_product(db: Session, product: Product, data: ProductUpdate) -> Product:
    changes = data.model_dump(exclude_unset=True, exclude_none=True)
    low = changes.get("minOrderQuantity", product.minOrderQuantity)
    high = changes.get("maxOrderQuantity", product.maxOrderQuantity)
    if low >= high:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Maximum order quantity must be greater than minimum order quantity",
        )
    for field, value in changes.items():
        setattr(product, field, value)
    db.add(product)
    db.commit()
    db.refresh(product)
    return product


def delete_product(db: Session, product: Product) -> None:
    db.delete(product)
    db.commit()

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.api.deps import get_current_user
from app.api.responses import envelope
from app.database import get_db
from app.models.user import User
from app.schemas.product import ProductCreate, ProductOut, ProductUpdate
from app.services.products import (
    create_product,
    delete_product,
    get_product,
    get_products,
    update_product,
)

router = APIRouter(prefix="/products", tags=["products"])


def _get_or_404(db: Session, product_id: int, user: User):
    product = get_product(db, product_id, user.id)
    if not product:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Product not found"
        )
    return product


@router.get("")
def list_products(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return envelope([ProductOut.model_validate(p) for p in get_products(db, user.id)])


@router.post("", status_code=status.HTTP_201_CREATED)
def create(
    data: ProductCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    product = create_product(db, user.id, data)
    return envelope(ProductOut.model_validate(product), "Product created successfully")


@router.get("/{product_id}")
def get_one(
    product_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return envelope(ProductOut.model_validate(_get_or_404(db, product_id, user)))


@router.put("/{product_id}")
def update(
    product_id: int,
    data: ProductUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    product = update_product(db, _get_or_404(db, product_id, user), data)
    return envelope(ProductOut.model_validate(product), "Product updated successfully")


@router.delete("/{product_id}")
def delete(
    product_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    delete_product(db, _get_or_404(db, product_id, user))
    return envelope(None, "Product deleted successfully")

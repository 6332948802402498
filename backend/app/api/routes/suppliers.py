from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.api.deps import get_current_user
from app.api.responses import envelope
from app.database import get_db
from app.models.user import User
from app.schemas.supplier import SupplierCreate, SupplierOut, SupplierUpdate
from app.services.suppliers import (
    create_supplier,
    delete_supplier,
    get_supplier,
    get_suppliers,
    update_supplier,
)

router = APIRouter(prefix="/suppliers", tags=["suppliers"])


def _get_or_404(db: Session, supplier_id: int, user: User):
    supplier = get_supplier(db, supplier_id, user.id)
    if not supplier:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Supplier not found"
        )
    return supplier


@router.get("")
def list_suppliers(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return envelope([SupplierOut.model_validate(s) for s in get_suppliers(db, user.id)])


@router.post("", status_code=status.HTTP_201_CREATED)
def create(
    data: SupplierCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    supplier = create_supplier(db, user.id, data)
    return envelope(SupplierOut.model_validate(supplier), "Supplier created successfully")


@router.get("/{supplier_id}")
def get_one(
    supplier_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return envelope(SupplierOut.model_validate(_get_or_404(db, supplier_id, user)))


@router.put("/{supplier_id}")
def update(
    supplier_id: int,
    data: SupplierUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    supplier = update_supplier(db, _get_or_404(db, supplier_id, user), data)
    return envelope(SupplierOut.model_validate(supplier), "Supplier updated successfully")


@router.delete("/{supplier_id}")
def delete(
    supplier_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    delete_supplier(db, _get_or_404(db, supplier_id, user))
    return envelope(None, "Supplier deleted successfully")

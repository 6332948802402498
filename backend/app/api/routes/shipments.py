from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.api.deps import get_current_user
from app.api.responses import envelope
from app.database import get_db
from app.models.user import User
from app.schemas.shipment import ShipmentCreate, ShipmentOut, ShipmentUpdate
from app.services.shipments import (
    create_shipment,
    delete_shipment,
    get_shipment,
    get_shipments,
    update_shipment,
)

router = APIRouter(prefix="/shipments", tags=["shipments"])


def _get_or_404(db: Session, shipment_id: int, user: User):
    shipment = get_shipment(db, shipment_id, user.id)
    if not shipment:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Shipment not found"
        )
    return shipment


@router.get("")
def list_shipments(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return envelope([ShipmentOut.model_validate(s) for s in get_shipments(db, user.id)])


@router.post("", status_code=status.HTTP_201_CREATED)
def create(
    data: ShipmentCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    shipment = create_shipment(db, user.id, data)
    return envelope(ShipmentOut.model_validate(shipment), "Shipment created successfully")


@router.get("/{shipment_id}")
def get_one(
    shipment_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return envelope(ShipmentOut.model_validate(_get_or_404(db, shipment_id, user)))


@router.put("/{shipment_id}")
def update(
    shipment_id: int,
    data: ShipmentUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    shipment = update_shipment(db, _get_or_404(db, shipment_id, user), data)
    return envelope(ShipmentOut.model_validate(shipment), "Shipment updated successfully")


@router.delete("/{shipment_id}")
def delete(
    shipment_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    delete_shipment(db, _get_or_404(db, shipment_id, user))
    return envelope(None, "Shipment deleted successfully")

"""Load a user's rows once and convert them to immutable records."""

from sqlalchemy.orm import Session

from app.core.records import (
    ProductRecord,
    ShipmentRecord,
    SupplierRecord,
    SupplyChainSnapshot,
)
from app.services.products import get_products
from app.services.shipments import get_shipments
from app.services.suppliers import get_suppliers


def load_snapshot(db: Session, user_id: int) -> SupplyChainSnapshot:
    return SupplyChainSnapshot(
        shipments=[ShipmentRecord.from_model(s) for s in get_shipments(db, user_id)],
        products=[ProductRecord.from_model(p) for p in get_products(db, user_id)],
        suppliers=[SupplierRecord.from_model(s) for s in get_suppliers(db, user_id)],
    )

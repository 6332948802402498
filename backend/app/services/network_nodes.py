"""Factories, warehouses and retailers share one list/create flow per node type."""

from __future__ import annotations

from typing import NamedTuple, Sequence

from pydantic import BaseModel
from sqlalchemy.orm import Session

from app.database import Base
from app.models.factory import Factory
from app.models.retailer import Retailer
from app.models.warehouse import Warehouse
from app.schemas.network_node import (
    FactoryCreate,
    FactoryOut,
    RetailerCreate,
    RetailerOut,
    WarehouseCreate,
    WarehouseOut,
)


class NodeKind(NamedTuple):
    model: type[Base]
    create_schema: type[BaseModel]
    out_schema: type[BaseModel]


NODE_KINDS: dict[str, NodeKind] = {
    "factories": NodeKind(Factory, FactoryCreate, FactoryOut),
    "warehouses": NodeKind(Warehouse, WarehouseCreate, WarehouseOut),
    "retailers": NodeKind(Retailer, RetailerCreate, RetailerOut),
}


def get_nodes(db: Session, kind: NodeKind, user_id: int) -> Sequence:
    return (
        db.query(kind.model)
        .filter(kind.model.userId == user_id)
        .order_by(kind.model.createdAt.desc())
        .all()
    )


def create_node(db: Session, kind: NodeKind, user_id: int, data: BaseModel):
    node = kind.model(**data.model_dump(), userId=user_id)
    db.add(node)
    db.commit()
    db.refresh(node)
    return node

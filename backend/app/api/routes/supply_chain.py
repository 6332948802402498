"""Supply-chain network nodes, addressed by plural node type."""

from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, status
from pydantic import ValidationError
from sqlalchemy.orm import Session

from app.api.deps import get_current_user
from app.api.responses import envelope
from app.database import get_db
from app.models.user import User
from app.services.network_nodes import NODE_KINDS, NodeKind, create_node, get_nodes

router = APIRouter(prefix="/supply-chain", tags=["supply-chain"])


def _kind(node_type: str) -> NodeKind:
    kind = NODE_KINDS.get(node_type)
    if kind is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Unknown node type '{node_type}'. Use one of: {', '.join(NODE_KINDS)}",
        )
    return kind


@router.get("/{node_type}")
def list_nodes(
    node_type: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    kind = _kind(node_type)
    return envelope([kind.out_schema.model_validate(n) for n in get_nodes(db, kind, user.id)])


@router.post("/{node_type}", status_code=status.HTTP_201_CREATED)
def create(
    node_type: str,
    payload: dict[str, Any] = Body(...),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    kind = _kind(node_type)
    try:
        data = kind.create_schema.model_validate(payload)
    except ValidationError as e:
        err = e.errors()[0]
        field = ".".join(str(p) for p in err["loc"])
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=f"{field}: {err['msg']}"
        )
    node = create_node(db, kind, user.id, data)
    return envelope(kind.out_schema.model_validate(node), f"{node_type[:-1].title()} created")

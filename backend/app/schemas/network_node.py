"""Supply-chain network nodes: factories, warehouses and retailers."""

from datetime import datetime

from pydantic import BaseModel, Field


class NodeBase(BaseModel):
    code: str = Field(..., min_length=1, max_length=50)
    name: str = Field(..., min_length=1, max_length=100)
    location: str = Field(..., min_length=1, max_length=200)


class FactoryCreate(NodeBase):
    capacity: float = Field(0, ge=0)
    utilization: float = Field(0, ge=0, le=100)
    leadTime: int = Field(1, ge=1)
    qualityRating: float = Field(0, ge=0, le=5)
    certifications: list[str] = Field(default_factory=list)


class WarehouseCreate(NodeBase):
    capacity: float = Field(0, ge=0)
    currentStock: float = Field(0, ge=0)
    storageCost: float = Field(0, ge=0)


class RetailerCreate(NodeBase):
    marketSegment: str = Field(..., min_length=1, max_length=100)
    salesVolume: float = Field(0, ge=0)


class FactoryOut(FactoryCreate):
    id: int
    createdAt: datetime

    model_config = {"from_attributes": True}


class WarehouseOut(WarehouseCreate):
    id: int
    createdAt: datetime

    model_config = {"from_attributes": True}


class RetailerOut(RetailerCreate):
    id: int
    createdAt: datetime

    model_config = {"from_attributes": True}

from datetime import datetime, timezone

from pydantic import BaseModel, Field, field_validator

from app.models.shipment import ShipmentStatus, ShippingMethod
from app.schemas.product import ProductSummary


def _naive_utc(v: datetime | None) -> datetime | None:
    if v is not None and v.tzinfo is not None:
        return v.astimezone(timezone.utc).replace(tzinfo=None)
    return v


def _check_risk_factors(v: list[str] | None) -> list[str] | None:
    if v is not None and any(len(f) > 50 for f in v):
        raise ValueError("Each risk factor cannot exceed 50 characters")
    return v


class ShipmentBase(BaseModel):
    productId: int
    origin: str = Field(..., min_length=1, max_length=100)
    destination: str = Field(..., min_length=1, max_length=100)
    status: ShipmentStatus = ShipmentStatus.ON_TIME
    expectedDelivery: datetime
    actualDelivery: datetime | None = None
    estimatedArrival: datetime | None = None
    trackingNumber: str | None = Field(None, max_length=50)
    quantity: int = Field(..., ge=1)
    totalValue: float = Field(..., ge=0)
    shippingMethod: ShippingMethod
    carrier: str = Field(..., min_length=1, max_length=100)
    currentLocation: str | None = Field(None, max_length=200)
    riskFactors: list[str] = Field(default_factory=list)

    utc_dates = field_validator(
        "expectedDelivery", "actualDelivery", "estimatedArrival"
    )(_naive_utc)
    risk_factor_length = field_validator("riskFactors")(_check_risk_factors)


class ShipmentCreate(ShipmentBase):
    pass


class ShipmentUpdate(BaseModel):
    productId: int | None = None
    origin: str | None = Field(None, min_length=1, max_length=100)
    destination: str | None = Field(None, min_length=1, max_length=100)
    status: ShipmentStatus | None = None
    expectedDelivery: datetime | None = None
    actualDelivery: datetime | None = None
    estimatedArrival: datetime | None = None
    trackingNumber: str | None = Field(None, max_length=50)
    quantity: int | None = Field(None, ge=1)
    totalValue: float | None = Field(None, ge=0)
    shippingMethod: ShippingMethod | None = None
    carrier: str | None = Field(None, min_length=1, max_length=100)
    currentLocation: str | None = Field(None, max_length=200)
    riskFactors: list[str] | None = None

    utc_dates = field_validator(
        "expectedDelivery", "actualDelivery", "estimatedArrival"
    )(_naive_utc)
    risk_factor_length = field_validator("riskFactors")(_check_risk_factors)


class ShipmentOut(ShipmentBase):
    id: int
    product: ProductSummary | None = None
    createdAt: datetime
    updatedAt: datetime

    model_config = {"from_attributes": True}

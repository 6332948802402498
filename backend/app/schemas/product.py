from datetime import datetime

from pydantic import BaseModel, Field, field_validator, model_validator

from app.models.product import RiskLevel


def _check_certifications(v: list[str] | None) -> list[str] | None:
    if v is not None and any(len(c) > 20 for c in v):
        raise ValueError("Each certification cannot exceed 20 characters")
    return v


class ProductBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    category: str = Field(..., min_length=1, max_length=50)
    supplier: str = Field(..., min_length=1, max_length=100, description="Supplier name")
    origin: str = Field(..., min_length=1, max_length=100)
    description: str = Field("", max_length=500)
    unitCost: float = Field(..., ge=0)
    leadTime: int = Field(..., ge=1, description="Lead time in days")
    minOrderQuantity: int = Field(..., ge=1)
    maxOrderQuantity: int = Field(..., ge=1)
    riskLevel: RiskLevel = RiskLevel.MEDIUM
    certifications: list[str] = Field(default_factory=list)

    certifications_length = field_validator("certifications")(_check_certifications)

    @model_validator(mode="after")
    def check_order_bounds(self):
        if self.minOrderQuantity >= self.maxOrderQuantity:
            raise ValueError(
                "Maximum order quantity must be greater than minimum order quantity"
            )
        return self


class ProductCreate(ProductBase):
    pass


class ProductUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=100)
    category: str | None = Field(None, min_length=1, max_length=50)
    supplier: str | None = Field(None, min_length=1, max_length=100)
    origin: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = Field(None, max_length=500)
    unitCost: float | None = Field(None, ge=0)
    leadTime: int | None = Field(None, ge=1)
    minOrderQuantity: int | None = Field(None, ge=1)
    maxOrderQuantity: int | None = Field(None, ge=1)
    riskLevel: RiskLevel | None = None
    certifications: list[str] | None = None

    certifications_length = field_validator("certifications")(_check_certifications)


class ProductOut(ProductBase):
    id: int
    createdAt: datetime
    updatedAt: datetime

    model_config = {"from_attributes": True}


class ProductSummary(BaseModel):
    id: int
    name: str
    category: str
    supplier: str
    riskLevel: RiskLevel

    model_config = {"from_attributes": True}

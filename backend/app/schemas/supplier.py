from datetime import datetime

from pydantic import BaseModel, EmailStr, Field, model_validator

from app.models.product import RiskLevel
from app.models.supplier import SupplierStatus


class SupplierBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    location: str = Field(..., min_length=1, max_length=255)
    country: str = Field(..., min_length=1, max_length=100)
    contactPerson: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    phone: str = Field(..., min_length=1, max_length=50)
    rating: float = Field(..., ge=0, le=5)
    status: SupplierStatus = SupplierStatus.PENDING
    riskLevel: RiskLevel = RiskLevel.MEDIUM
    certifications: list[str] = Field(default_factory=list)
    leadTime: int = Field(30, ge=1)
    paymentTerms: str = Field("Net 30", min_length=1, max_length=100)
    minimumOrder: int = Field(0, ge=0)
    maximumOrder: int = Field(10000, ge=1)
    specialties: list[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_order_bounds(self):
        if self.maximumOrder < self.minimumOrder:
            raise ValueError("Maximum order must be greater than or equal to minimum order")
        return self


class SupplierCreate(SupplierBase):
    pass


class SupplierUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=100)
    location: str | None = Field(None, min_length=1, max_length=255)
    country: str | None = Field(None, min_length=1, max_length=100)
    contactPerson: str | None = Field(None, min_length=1, max_length=255)
    email: EmailStr | None = None
    phone: str | None = Field(None, min_length=1, max_length=50)
    rating: float | None = Field(None, ge=0, le=5)
    status: SupplierStatus | None = None
    riskLevel: RiskLevel | None = None
    certifications: list[str] | None = None
    leadTime: int | None = Field(None, ge=1)
    paymentTerms: str | None = Field(None, min_length=1, max_length=100)
    minimumOrder: int | None = Field(None, ge=0)
    maximumOrder: int | None = Field(None, ge=1)
    specialties: list[str] | None = None


class SupplierOut(SupplierBase):
    # Stored rows are not re-validated as addresses.
    email: str
    id: int
    createdAt: datetime
    updatedAt: datetime

    model_config = {"from_attributes": True}

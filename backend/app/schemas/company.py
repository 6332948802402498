from datetime import datetime

from pydantic import BaseModel, Field

from app.models.company import CompanySize


class CompanyUpsert(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    tagline: str | None = None
    industry: str | None = None
    founded: str | None = None
    headquartersCity: str | None = None
    headquartersCountry: str | None = None
    description: str | None = None
    size: CompanySize = CompanySize.STARTUP
    website: str | None = None
    email: str | None = None
    phone: str | None = None
    keyProducts: list[str] | None = None
    targetMarkets: list[str] | None = None


class CompanyOut(CompanyUpsert):
    id: int
    isProfileComplete: bool
    createdAt: datetime
    updatedAt: datetime

    model_config = {"from_attributes": True}

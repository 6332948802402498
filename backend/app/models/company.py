import enum
from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, Enum, ForeignKey, Integer, String, Text

from app.database import Base, JsonType


class CompanySize(str, enum.Enum):
    STARTUP = "startup"
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"
    ENTERPRISE = "enterprise"


class Company(Base):
    __tablename__ = "companies"

    id = Column(Integer, primary_key=True, index=True)
    userId = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )

    name = Column(String(255), nullable=False)
    tagline = Column(String(255), nullable=True)
    industry = Column(String(255), nullable=True)
    founded = Column(String(20), nullable=True)
    headquartersCity = Column(String(255), nullable=True)
    headquartersCountry = Column(String(255), nullable=True)
    description = Column(Text, nullable=True)
    size = Column(
        Enum(
            CompanySize,
            values_callable=lambda enum_cls: [e.value for e in enum_cls],
            name="companies_size_enum",
        ),
        nullable=False,
        default=CompanySize.STARTUP,
    )
    website = Column(String(255), nullable=True)
    email = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)
    keyProducts = Column(JsonType, nullable=True)
    targetMarkets = Column(JsonType, nullable=True)
    isProfileComplete = Column(Boolean, nullable=False, default=False)

    createdAt = Column(DateTime, default=datetime.utcnow, nullable=False)
    updatedAt = Column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False,
    )

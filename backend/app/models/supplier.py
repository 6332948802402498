import enum
from datetime import datetime

from sqlalchemy import Column, DateTime, Enum, Float, ForeignKey, Integer, String

from app.database import Base, JsonType
from app.models.product import RiskLevel


class SupplierStatus(str, enum.Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    PENDING = "pending"


class Supplier(Base):
    __tablename__ = "suppliers"

    id = Column(Integer, primary_key=True, index=True)
    userId = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=True, index=True
    )

    name = Column(String(100), nullable=False, index=True)
    location = Column(String(255), nullable=False)
    country = Column(String(100), nullable=False, index=True)
    contactPerson = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    phone = Column(String(50), nullable=False)

    rating = Column(Float, nullable=False, default=0.0)
    status = Column(
        Enum(
            SupplierStatus,
            values_callable=lambda enum_cls: [e.value for e in enum_cls],
            name="suppliers_status_enum",
        ),
        nullable=False,
        default=SupplierStatus.PENDING,
    )
    riskLevel = Column(
        Enum(
            RiskLevel,
            values_callable=lambda enum_cls: [e.value for e in enum_cls],
            name="suppliers_risk_level_enum",
        ),
        nullable=False,
        default=RiskLevel.MEDIUM,
    )
    certifications = Column(JsonType, nullable=False, default=list)
    leadTime = Column(Integer, nullable=False, default=30)
    paymentTerms = Column(String(100), nullable=False, default="Net 30")
    minimumOrder = Column(Integer, nullable=False, default=0)
    maximumOrder = Column(Integer, nullable=False, default=10000)
    specialties = Column(JsonType, nullable=False, default=list)

    createdAt = Column(DateTime, default=datetime.utcnow, nullable=False)
    updatedAt = Column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False,
    )

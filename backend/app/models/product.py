import enum
from datetime import datetime

from sqlalchemy import Column, DateTime, Enum, Float, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from app.database import Base, JsonType


class RiskLevel(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    userId = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=True, index=True
    )

    name = Column(String(100), nullable=False)
    category = Column(String(50), nullable=False, index=True)
    # Free-text supplier name; matched against Supplier.name, not a foreign key.
    supplier = Column(String(100), nullable=False, index=True)
    origin = Column(String(100), nullable=False)
    description = Column(String(500), nullable=False, default="")

    unitCost = Column(Float, nullable=False)
    leadTime = Column(Integer, nullable=False)
    minOrderQuantity = Column(Integer, nullable=False)
    maxOrderQuantity = Column(Integer, nullable=False)
    riskLevel = Column(
        Enum(
            RiskLevel,
            values_callable=lambda enum_cls: [e.value for e in enum_cls],
            name="products_risk_level_enum",
        ),
        nullable=False,
        default=RiskLevel.MEDIUM,
    )
    certifications = Column(JsonType, nullable=False, default=list)

    createdAt = Column(DateTime, default=datetime.utcnow, nullable=False)
    updatedAt = Column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False,
    )

    shipments = relationship(
        "Shipment", back_populates="product", cascade="all, delete-orphan"
    )

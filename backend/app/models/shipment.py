"""Shipment of a product between two free-text locations."""

import enum
from datetime import datetime

from sqlalchemy import Column, DateTime, Enum, Float, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from app.database import Base, JsonType


class ShipmentStatus(str, enum.Enum):
    ON_TIME = "On-Time"
    DELAYED = "Delayed"
    STUCK = "Stuck"
    DELIVERED = "Delivered"


class ShippingMethod(str, enum.Enum):
    AIR = "Air"
    SEA = "Sea"
    LAND = "Land"
    EXPRESS = "Express"


class Shipment(Base):
    __tablename__ = "shipments"

    id = Column(Integer, primary_key=True, index=True)
    userId = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=True, index=True
    )
    productId = Column(
        Integer,
        ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    origin = Column(String(100), nullable=False)
    destination = Column(String(100), nullable=False)
    status = Column(
        Enum(
            ShipmentStatus,
            values_callable=lambda enum_cls: [e.value for e in enum_cls],
            name="shipments_status_enum",
        ),
        nullable=False,
        default=ShipmentStatus.ON_TIME,
        index=True,
    )

    expectedDelivery = Column(DateTime, nullable=False, index=True)
    actualDelivery = Column(DateTime, nullable=True)
    estimatedArrival = Column(DateTime, nullable=True)

    trackingNumber = Column(String(50), nullable=True)
    quantity = Column(Integer, nullable=False, default=1)
    totalValue = Column(Float, nullable=False, default=0.0)
    shippingMethod = Column(
        Enum(
            ShippingMethod,
            values_callable=lambda enum_cls: [e.value for e in enum_cls],
            name="shipments_method_enum",
        ),
        nullable=False,
        default=ShippingMethod.SEA,
    )
    carrier = Column(String(100), nullable=False, index=True)
    currentLocation = Column(String(200), nullable=True)
    riskFactors = Column(JsonType, nullable=False, default=list)

    createdAt = Column(DateTime, default=datetime.utcnow, nullable=False)
    updatedAt = Column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False,
    )

    product = relationship("Product", back_populates="shipments")

from datetime import datetime

from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String

from app.database import Base


class Retailer(Base):
    __tablename__ = "retailers"

    id = Column(Integer, primary_key=True, index=True)
    userId = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    code = Column(String(50), nullable=False)
    name = Column(String(100), nullable=False)
    location = Column(String(200), nullable=False)
    marketSegment = Column(String(100), nullable=False)
    salesVolume = Column(Float, nullable=False, default=0.0)

    createdAt = Column(DateTime, default=datetime.utcnow, nullable=False)

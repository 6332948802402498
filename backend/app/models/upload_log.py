"""Record of a spreadsheet upload processed by the data-upload endpoint."""

from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String

from app.database import Base


class UploadLog(Base):
    __tablename__ = "upload_logs"

    id = Column(Integer, primary_key=True, index=True)
    userId = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    fileName = Column(String(255), nullable=False)
    dataType = Column(String(50), nullable=False)
    rowCount = Column(Integer, nullable=False, default=0)
    status = Column(String(20), nullable=False, default="Success")

    createdAt = Column(DateTime, default=datetime.utcnow, nullable=False)

from typing import Sequence

from sqlalchemy.orm import Session

from app.models.upload_log import UploadLog

UPLOAD_SUCCESS = "Success"
UPLOAD_FAILED = "Failed"


def get_upload_logs(db: Session, user_id: int, limit: int = 50) -> Sequence[UploadLog]:
    return (
        db.query(UploadLog)
        .filter(UploadLog.userId == user_id)
        .order_by(UploadLog.createdAt.desc(), UploadLog.id.desc())
        .limit(limit)
        .all()
    )


def record_upload(
    db: Session, user_id: int, file_name: str, data_type: str, row_count: int
) -> UploadLog:
    log = UploadLog(
        userId=user_id,
        fileName=file_name,
        dataType=data_type,
        rowCount=row_count,
        status=UPLOAD_SUCCESS if row_count > 0 else UPLOAD_FAILED,
    )
    db.add(log)
    db.commit()
    db.refresh(log)
    return log

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from sqlalchemy.orm import Session

from app.api.deps import get_current_user
from app.api.responses import envelope
from app.config import settings
from app.database import get_db
from app.models.user import User
from app.schemas.upload_log import UploadLogOut, UploadResult
from app.services.data_upload import SUPPORTED_EXTENSIONS, process_upload
from app.services.upload_logs import get_upload_logs

router = APIRouter(tags=["uploads"])


@router.get("/upload-logs")
def list_upload_logs(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return envelope([UploadLogOut.model_validate(log) for log in get_upload_logs(db, user.id)])


@router.post("/data-upload")
def upload(
    file: UploadFile = File(...),
    dataType: str = Form(...),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    file_name = file.filename or "upload"
    if not file_name.lower().endswith(SUPPORTED_EXTENSIONS):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid file type. Only Excel (.xlsx) and CSV files are supported.",
        )
    content = file.file.read()
    if len(content) > settings.upload_max_bytes:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"File exceeds the {settings.upload_max_bytes // (1024 * 1024)} MB upload limit.",
        )
    try:
        log, stored, errors = process_upload(db, user.id, dataType, file_name, content)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return envelope(
        UploadResult(log=UploadLogOut.model_validate(log), stored=stored, errors=errors),
        f"Successfully processed {stored} records",
    )

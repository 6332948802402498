from datetime import datetime

from pydantic import BaseModel


class UploadLogOut(BaseModel):
    id: int
    fileName: str
    dataType: str
    rowCount: int
    status: str
    createdAt: datetime

    model_config = {"from_attributes": True}


class UploadResult(BaseModel):
    log: UploadLogOut
    stored: int
    errors: list[str]

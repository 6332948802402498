from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from app.api.deps import get_current_user
from app.api.responses import envelope
from app.database import get_db
from app.models.user import User
from app.schemas.company import CompanyOut, CompanyUpsert
from app.services.companies import get_company, upsert_company

router = APIRouter(prefix="/company", tags=["company"])


@router.get("")
def get_profile(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    company = get_company(db, user.id)
    if not company:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Company profile not found"
        )
    return envelope(CompanyOut.model_validate(company))


@router.post("")
def save_profile(
    body: CompanyUpsert,
    response: Response,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    company, created = upsert_company(db, user.id, body)
    if created:
        response.status_code = status.HTTP_201_CREATED
    return envelope(
        CompanyOut.model_validate(company),
        "Company profile created" if created else "Company profile updated",
    )

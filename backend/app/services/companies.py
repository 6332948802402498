from sqlalchemy.orm import Session

from app.models.company import Company
from app.schemas.company import CompanyUpsert


def get_company(db: Session, user_id: int) -> Company | None:
    return db.query(Company).filter(Company.userId == user_id).first()


def upsert_company(db: Session, user_id: int, data: CompanyUpsert) -> tuple[Company, bool]:
    """Create or replace the user's company profile; returns (company, created)."""
    company = get_company(db, user_id)
    created = company is None
    if created:
        company = Company(userId=user_id)
    for field, value in data.model_dump().items():
        setattr(company, field, value)
    company.name = data.name.strip()
    company.isProfileComplete = True
    db.add(company)
    db.commit()
    db.refresh(company)
    return company, created

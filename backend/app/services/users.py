import logging

from sqlalchemy.orm import Session
from fastapi import HTTPException, status

from app.models.user import User
from app.schemas.user import LoginUser, RegisterUser
from app.api.deps import AUTH_REQUIRED, create_access_token
from app.core.security import hash_password, verify_password

logger = logging.getLogger(__name__)


def get_user_by_id(db: Session, user_id: int) -> User | None:
    return db.query(User).filter(User.id == user_id).first()


def get_user_by_email(db: Session, email: str) -> User | None:
    normalized = email.strip().lower()
    return db.query(User).filter(User.email == normalized).first()


def register_user(db: Session, dto: RegisterUser) -> tuple[User, str]:
    existing = get_user_by_email(db, dto.email)
    if existing:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="A user with this email is already registered.",
        )
    user = User(
        name=dto.name.strip(),
        email=dto.email.strip().lower(),
        passwordHash=hash_password(dto.password),
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    token = create_access_token(user.id, user.email)
    return user, token


def login_user(db: Session, dto: LoginUser) -> tuple[User, str]:
    """Issue a token for a registered user whose password matches."""
    user = get_user_by_email(db, dto.email)
    if not user or not verify_password(dto.password, user.passwordHash):
        logger.info("Rejected login for %s", dto.email.strip().lower())
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=AUTH_REQUIRED,
        )
    token = create_access_token(user.id, user.email)
    return user, token

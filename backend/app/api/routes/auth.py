from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.deps import get_current_user
from app.api.responses import envelope
from app.database import get_db
from app.models.user import User
from app.schemas.user import LoginUser, RegisterUser, TokenResponse, UserResponse
from app.services.users import login_user, register_user

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(
    dto: RegisterUser,
    db: Session = Depends(get_db),
):
    user, token = register_user(db, dto)
    return envelope(
        TokenResponse(user=UserResponse.model_validate(user), token=token),
        "Registered",
    )


@router.post("/login")
def login(
    dto: LoginUser,
    db: Session = Depends(get_db),
):
    user, token = login_user(db, dto)
    return envelope(TokenResponse(user=UserResponse.model_validate(user), token=token))


@router.get("/me")
def me(
    user: User = Depends(get_current_user),
):
    return envelope(UserResponse.model_validate(user))

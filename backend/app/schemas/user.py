from datetime import datetime

from pydantic import BaseModel, EmailStr, Field


class RegisterUser(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=72)


class LoginUser(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1, max_length=72)


class UserResponse(BaseModel):
    id: int
    name: str
    email: str
    createdAt: datetime | None = None

    model_config = {"from_attributes": True}


class TokenResponse(BaseModel):
    user: UserResponse
    token: str

# api/v1/schemas/auth.py
from typing import Optional

from pydantic import BaseModel, field_validator

from storefront.domain.models.user import PublicUser, Role


class LoginIn(BaseModel):
    email: str = ""
    password: str = ""

    @field_validator("email", "password", mode="before")
    @classmethod
    def _as_text(cls, v):
        return "" if v is None else str(v)


class CreateUserIn(LoginIn):
    name: str = ""
    role: Optional[Role] = None


class AuthOut(BaseModel):
    success: bool = True
    user: PublicUser

from pydantic import BaseModel, Field, field_validator
from typing import Literal, Optional

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"

class RegisterIn(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    email: str = Field(pattern=EMAIL_PATTERN, max_length=200)
    password: str = Field(min_length=6)
    role: Literal["user", "publisher"] = "user"

    @field_validator("email")
    @classmethod
    def _normalize_email(cls, value: str) -> str:
        return value.strip().lower()

class LoginIn(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None

class TokenOut(BaseModel):
    success: bool = True
    token: str

class UpdateDetailsIn(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    email: Optional[str] = Field(default=None, pattern=EMAIL_PATTERN, max_length=200)

class UpdatePasswordIn(BaseModel):
    current_password: str
    new_password: str = Field(min_length=6)

class ForgotPasswordIn(BaseModel):
    email: str

class ResetPasswordIn(BaseModel):
    password: str = Field(min_length=6)

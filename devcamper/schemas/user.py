from pydantic import BaseModel, Field
from typing import Literal, Optional

from devcamper.schemas.auth import EMAIL_PATTERN

Role = Literal["user", "publisher", "admin"]

class UserCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    email: str = Field(pattern=EMAIL_PATTERN, max_length=200)
    password: str = Field(min_length=6)
    role: Role = "user"

class UserUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    email: Optional[str] = Field(default=None, pattern=EMAIL_PATTERN, max_length=200)
    password: Optional[str] = Field(default=None, min_length=6)
    role: Optional[Role] = None

from pydantic import BaseModel, Field
from typing import Optional

class ReviewCreate(BaseModel):
    title: str = Field(min_length=1, max_length=100)
    text: str = Field(min_length=1)
    rating: int = Field(ge=1, le=10)

class ReviewUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=100)
    text: Optional[str] = Field(default=None, min_length=1)
    rating: Optional[int] = Field(default=None, ge=1, le=10)

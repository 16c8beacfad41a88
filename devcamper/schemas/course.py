from pydantic import BaseModel, Field
from typing import Literal, Optional

MinimumSkill = Literal["beginner", "intermediate", "advanced"]

class CourseCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: str = Field(min_length=1)
    weeks: int = Field(ge=1)
    tuition: float = Field(ge=0)
    minimum_skill: MinimumSkill
    scholarship_available: bool = False

class CourseUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, min_length=1)
    weeks: Optional[int] = Field(default=None, ge=1)
    tuition: Optional[float] = Field(default=None, ge=0)
    minimum_skill: Optional[MinimumSkill] = None
    scholarship_available: Optional[bool] = None

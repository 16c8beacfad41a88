from pydantic import BaseModel, Field
from typing import List, Literal, Optional

from devcamper.schemas.auth import EMAIL_PATTERN

Career = Literal["Web Development", "Mobile Development", "UI/UX", "Data Science", "Business", "Other"]
URL_PATTERN = r"^https?://[^\s/$.?#].[^\s]*$"

class BootcampCreate(BaseModel):
    name: str = Field(min_length=1, max_length=50)
    description: str = Field(min_length=1, max_length=500)
    website: Optional[str] = Field(default=None, pattern=URL_PATTERN)
    phone: Optional[str] = Field(default=None, max_length=20)
    email: Optional[str] = Field(default=None, pattern=EMAIL_PATTERN)
    address: str = Field(min_length=1, max_length=300)
    careers: List[Career] = Field(min_length=1)
    housing: bool = False
    job_assistance: bool = False
    job_guarantee: bool = False
    accept_gi: bool = False

class BootcampUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=50)
    description: Optional[str] = Field(default=None, min_length=1, max_length=500)
    website: Optional[str] = Field(default=None, pattern=URL_PATTERN)
    phone: Optional[str] = Field(default=None, max_length=20)
    email: Optional[str] = Field(default=None, pattern=EMAIL_PATTERN)
    address: Optional[str] = Field(default=None, min_length=1, max_length=300)
    careers: Optional[List[Career]] = Field(default=None, min_length=1)
    housing: Optional[bool] = None
    job_assistance: Optional[bool] = None
    job_guarantee: Optional[bool] = None
    accept_gi: Optional[bool] = None

from pydantic import Field

from .base import RequestModel


class JobCreate(RequestModel):
    title: str = Field(max_length=255)
    description: str
    skills: list[str]
    experience_years: int = Field(default=0, ge=0, le=50)
    experience_months: int = Field(default=0, ge=0, le=11)
    location: str = Field(max_length=255)
    salary: str | None = Field(default=None, max_length=100)


class JobStatusUpdate(RequestModel):
    status: str  # active / closed / draft

from pydantic import Field

from .base import RequestModel


class ApplicationStatusUpdate(RequestModel):
    status: str  # pending / accepted / rejected
    employer_notes: str | None = Field(default=None, max_length=5000)

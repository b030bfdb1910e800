from .application import ApplicationStatusUpdate
from .auth import LoginRequest, ProfileUpdate, RegisterRequest
from .job import JobCreate, JobStatusUpdate

__all__ = [
    "ApplicationStatusUpdate",
    "JobCreate",
    "JobStatusUpdate",
    "LoginRequest",
    "ProfileUpdate",
    "RegisterRequest",
]

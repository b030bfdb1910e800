from pydantic import AliasChoices, Field

from .base import RequestModel


class RegisterRequest(RequestModel):
    first_name: str
    last_name: str | None = None
    username: str
    email: str
    password: str
    role: str  # student / employer
    company_name: str | None = Field(default=None, max_length=255)
    college: str | None = Field(default=None, max_length=255)
    course: str | None = Field(default=None, max_length=255)
    graduation_year: int | None = Field(default=None, ge=1950, le=2100)
    phone: str | None = Field(default=None, max_length=20)
    address: str | None = Field(default=None, max_length=2000)


class LoginRequest(RequestModel):
    # Email or username; admins log in by username.
    identifier: str = Field(min_length=1, validation_alias=AliasChoices("identifier", "email", "username"))
    password: str = Field(min_length=1)


class ProfileUpdate(RequestModel):
    first_name: str | None = Field(default=None, min_length=1, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)
    company_name: str | None = Field(default=None, max_length=255)
    college: str | None = Field(default=None, max_length=255)
    course: str | None = Field(default=None, max_length=255)
    graduation_year: int | None = Field(default=None, ge=1950, le=2100)
    phone: str | None = Field(default=None, max_length=20)
    address: str | None = Field(default=None, max_length=2000)

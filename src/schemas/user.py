"""User schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

# bcrypt only reads the first 72 bytes of a password
MAX_PASSWORD_BYTES = 72


def check_password(value: str | None) -> str | None:
    """Reject passwords bcrypt would refuse or silently truncate."""
    if value is None:
        return value
    if "\x00" in value:
        raise ValueError("Password must not contain NUL characters")
    if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
    return value


class UserCreate(BaseModel):
    """Sign up a new user."""

    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr = Field(..., max_length=255)
    password: str = Field(..., min_length=1)

    @field_validator("name", "email", mode="before")
    @classmethod
    def strip_whitespace(cls, value):
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("password")
    @classmethod
    def validate_password(cls, value: str) -> str:
        return check_password(value)


class UserUpdate(BaseModel):
    """Update a user.

    Only fields present in the request are written; omitted or null fields
    keep their stored value.
    """

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(None, min_length=1, max_length=255)
    email: EmailStr | None = Field(None, max_length=255)
    password: str | None = Field(None, min_length=1)

    @field_validator("name", "email", mode="before")
    @classmethod
    def strip_whitespace(cls, value):
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("password")
    @classmethod
    def validate_password(cls, value: str | None) -> str | None:
        return check_password(value)


class UserResponse(BaseModel):
    """User information response."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: str
    created_at: datetime
    updated_at: datetime


class UserSummary(BaseModel):
    """User entry in the public user listing."""

    model_config = ConfigDict(from_attributes=True)

    name: str
    email: str
    created_at: datetime
    updated_at: datetime


class MessageResponse(BaseModel):
    """Plain acknowledgement."""

    message: str

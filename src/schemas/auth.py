"""Authentication schemas."""

from pydantic import BaseModel, EmailStr, Field, field_validator

from src.schemas.user import UserResponse, check_password


class UserLogin(BaseModel):
    """User login request."""

    email: EmailStr = Field(..., max_length=255)
    password: str = Field(..., min_length=1)

    @field_validator("email", mode="before")
    @classmethod
    def strip_email(cls, value):
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("password")
    @classmethod
    def validate_password(cls, value: str) -> str:
        return check_password(value)


class LoginResponse(BaseModel):
    """Login response with token and user info."""

    message: str
    token: str
    token_type: str = "bearer"  # noqa: S105
    user: UserResponse

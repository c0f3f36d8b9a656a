"""Pydantic schemas for API requests and responses."""

from src.schemas.auth import LoginResponse, UserLogin
from src.schemas.user import MessageResponse, UserCreate, UserResponse, UserSummary, UserUpdate

__all__ = [
    "UserLogin",
    "LoginResponse",
    "UserCreate",
    "UserUpdate",
    "UserResponse",
    "UserSummary",
    "MessageResponse",
]

"""Authentication API endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from src.api.dependencies import get_current_user, get_token_service, request_body
from src.config import Settings, get_settings
from src.database import get_db
from src.models.user import User
from src.schemas.auth import LoginResponse, UserLogin
from src.schemas.user import MessageResponse, UserCreate, UserResponse
from src.services.auth import TokenService, authenticate_user
from src.services.users import create_user

router = APIRouter(prefix="/api/auth", tags=["auth"])

logger = logging.getLogger(__name__)


def set_auth_cookie(response: Response, token: str, settings: Settings) -> None:
    """Mirror the access token into a cookie for browser clients."""
    response.set_cookie(
        key=settings.auth_cookie_name,
        value=token,
        max_age=settings.token_max_age_seconds,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
        path="/",
    )


def clear_auth_cookie(response: Response, settings: Settings) -> None:
    response.delete_cookie(
        key=settings.auth_cookie_name,
        path="/",
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
    )


@router.post("/signup", response_model=MessageResponse)
def signup(
    user_data: Annotated[UserCreate, Depends(request_body(UserCreate))],
    db: Annotated[Session, Depends(get_db)],
):
    """Register a new user."""
    create_user(db, user_data.name, user_data.email, user_data.password)
    return MessageResponse(message="Successfully signed up!")


@router.post("/login", response_model=LoginResponse)
def login(
    credentials: Annotated[UserLogin, Depends(request_body(UserLogin))],
    response: Response,
    db: Annotated[Session, Depends(get_db)],
    token_service: Annotated[TokenService, Depends(get_token_service)],
    settings: Annotated[Settings, Depends(get_settings)],
):
    """Login with email and password."""
    user = authenticate_user(db, credentials.email, credentials.password)
    token = token_service.issue(user.id)
    set_auth_cookie(response, token, settings)
    logger.info(f"User {user.id} logged in")

    return LoginResponse(
        message="Successfully logged in!",
        token=token,
        user=UserResponse.model_validate(user),
    )


@router.get("/logout", response_model=MessageResponse)
def logout(
    response: Response,
    settings: Annotated[Settings, Depends(get_settings)],
):
    """Logout by clearing the auth cookie. Issued tokens stay valid until they expire."""
    clear_auth_cookie(response, settings)
    return MessageResponse(message="Successfully logged out!")


@router.get("/me", response_model=UserResponse)
def get_me(
    current_user: Annotated[User, Depends(get_current_user)],
):
    """Get current user information."""
    return current_user

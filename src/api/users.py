"""User API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from src.api.dependencies import get_owned_user, get_token_identity, load_target_user, request_body
from src.database import get_db
from src.models.user import User
from src.schemas.user import MessageResponse, UserCreate, UserResponse, UserSummary, UserUpdate
from src.services.auth import TokenIdentity
from src.services.users import create_user, delete_user, list_users, update_user

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("", response_model=list[UserSummary])
def get_users(
    db: Annotated[Session, Depends(get_db)],
):
    """List all users without credentials or ids."""
    return list_users(db)


@router.post("", response_model=MessageResponse)
def create_new_user(
    user_data: Annotated[UserCreate, Depends(request_body(UserCreate))],
    db: Annotated[Session, Depends(get_db)],
):
    """Create a user. Same behaviour as signup."""
    create_user(db, user_data.name, user_data.email, user_data.password)
    return MessageResponse(message="Successfully signed up!")


@router.get("/{user_id}", response_model=UserResponse)
def get_user(
    user: Annotated[User, Depends(load_target_user)],
    identity: Annotated[TokenIdentity, Depends(get_token_identity)],
):
    """Get a specific user. Any authenticated caller may read."""
    return user


@router.put("/{user_id}", response_model=MessageResponse)
def update_existing_user(
    user: Annotated[User, Depends(get_owned_user)],
    user_data: Annotated[UserUpdate, Depends(request_body(UserUpdate))],
    db: Annotated[Session, Depends(get_db)],
):
    """Update the caller's own user record."""
    update_user(db, user, user_data.model_dump(exclude_unset=True, exclude_none=True))
    return MessageResponse(message="Update success!")


@router.delete("/{user_id}", response_model=MessageResponse)
def delete_existing_user(
    user: Annotated[User, Depends(get_owned_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Delete the caller's own user record."""
    delete_user(db, user)
    return MessageResponse(message="Delete success!")

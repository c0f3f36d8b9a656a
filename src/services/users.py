"""Credential store operations for user records."""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from src.exceptions import ConflictError
from src.models.user import User
from src.services.passwords import get_password_hash

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("name", "email", "password")


def get_user_by_id(db: Session, user_id: str) -> User | None:
    """Get a user by id."""
    return db.get(User, user_id)


def get_user_by_email(db: Session, email: str) -> User | None:
    """Get a user by email."""
    return db.query(User).filter(User.email == email).first()


def list_users(db: Session) -> list[User]:
    """Get all users in store order."""
    return db.query(User).all()


def _commit_or_conflict(db: Session, email: str) -> None:
    """Commit, turning a unique-email violation into ConflictError."""
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.info(f"Email already registered: {email}")
        raise ConflictError("Email already registered") from None


def create_user(db: Session, name: str, email: str, password: str) -> User:
    """Create a new user, hashing the password before it is stored."""
    user = User(name=name, email=email, password_hash=get_password_hash(password))
    db.add(user)
    _commit_or_conflict(db, email)
    db.refresh(user)
    logger.info(f"Created user {user.id}")
    return user


def update_user(db: Session, user: User, changes: dict) -> User:
    """Apply a partial update to a user.

    Keys absent from ``changes`` are left untouched. A new password is
    re-hashed; the plaintext is never stored.
    """
    unknown = set(changes) - set(UPDATABLE_FIELDS)
    if unknown:
        raise ValueError(f"Cannot update fields: {', '.join(sorted(unknown))}")

    if "name" in changes:
        user.name = changes["name"]
    if "email" in changes:
        user.email = changes["email"]
    if "password" in changes:
        user.password_hash = get_password_hash(changes["password"])

    _commit_or_conflict(db, user.email)
    db.refresh(user)
    logger.info(f"Updated user {user.id}: {', '.join(sorted(changes)) or 'no fields'}")
    return user


def delete_user(db: Session, user: User) -> None:
    """Delete a user."""
    user_id = user.id
    db.delete(user)
    db.commit()
    logger.info(f"Deleted user {user_id}")

"""Authentication service for JWT tokens, login and ownership checks."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from jose import ExpiredSignatureError, JWTError, jwt
from sqlalchemy.orm import Session

from src.config import Settings
from src.exceptions import InvalidCredentialsError, UnauthorizedError
from src.models.user import User
from src.services.passwords import verify_password
from src.services.users import get_user_by_email

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TokenIdentity:
    """Identity asserted by a verified access token."""

    user_id: str
    issued_at: datetime | None


class TokenService:
    """Issues and verifies HMAC-signed JWT access tokens.

    Tokens are stateless: nothing is stored server side, so a token stays
    valid until its signature fails or it expires.
    """

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        expiration_minutes: int | None = 480,
    ):
        if not secret:
            raise ValueError("JWT secret must not be empty")
        self.secret = secret
        self.algorithm = algorithm
        self.expiration_minutes = expiration_minutes

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenService":
        return cls(
            secret=settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
            expiration_minutes=settings.jwt_expiration_minutes,
        )

    def issue(self, user_id: str) -> str:
        """Create a JWT access token for a user."""
        now = datetime.now(UTC)
        to_encode = {
            "sub": str(user_id),
            "iat": now,
        }
        if self.expiration_minutes is not None:
            to_encode["exp"] = now + timedelta(minutes=self.expiration_minutes)
        return jwt.encode(to_encode, self.secret, algorithm=self.algorithm)

    def verify(self, token: str) -> TokenIdentity:
        """Decode and validate a JWT token."""
        try:
            payload = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except ExpiredSignatureError:
            raise UnauthorizedError("jwt expired") from None
        except JWTError:
            raise UnauthorizedError("invalid token") from None

        user_id = payload.get("sub")
        if not user_id:
            raise UnauthorizedError("token does not identify a user")

        issued_at = payload.get("iat")
        return TokenIdentity(
            user_id=user_id,
            issued_at=datetime.fromtimestamp(issued_at, UTC) if issued_at is not None else None,
        )


def authorize(token_user_id: str | None, owner_id: str | None) -> bool:
    """Allow an action only when the token identity owns the resource."""
    if not token_user_id or not owner_id:
        return False
    return token_user_id == owner_id


def authenticate_user(db: Session, email: str, password: str) -> User:
    """Authenticate a user by email and password."""
    user = get_user_by_email(db, email)
    if not user:
        logger.info("Login failed, unknown email")
        raise InvalidCredentialsError("User not found")
    if not verify_password(password, user.password_hash):
        logger.info(f"Login failed, wrong password for user {user.id}")
        raise InvalidCredentialsError("Email and password do not match")
    return user

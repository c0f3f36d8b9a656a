"""Salted one-way password hashing."""

from passlib.context import CryptContext
from passlib.exc import PasswordValueError

from src.config import get_settings
from src.exceptions import PasswordHashingError

settings = get_settings()

# Password hashing context
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__default_rounds=settings.bcrypt_rounds,
)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash.

    Returns False on a mismatch, including passwords bcrypt cannot accept.
    A stored hash that cannot be parsed is a server-side fault, so it raises
    PasswordHashingError instead.
    """
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except PasswordValueError:
        return False
    except (ValueError, TypeError) as e:
        raise PasswordHashingError("Stored password hash could not be verified") from e


def get_password_hash(password: str) -> str:
    """Hash a password with a fresh salt.

    PasswordValueError (a ValueError) propagates for passwords bcrypt
    rejects; request schemas screen those out first.
    """
    try:
        return pwd_context.hash(password)
    except PasswordValueError:
        raise
    except (ValueError, TypeError) as e:
        raise PasswordHashingError("Password could not be hashed") from e

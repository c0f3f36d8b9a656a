"""Tests for password hashing, token handling and the ownership check."""

from datetime import UTC, datetime

import pytest
from jose import jwt

from src.config import Settings
from src.exceptions import InvalidCredentialsError, PasswordHashingError, UnauthorizedError
from src.services.auth import TokenService, authenticate_user, authorize
from src.services.passwords import get_password_hash, verify_password
from src.services.users import create_user

SECRET = "unit-test-secret"  # noqa: S105


class TestPasswordHashing:
    """Tests for the bcrypt password hasher."""

    def test_hash_is_not_plaintext(self):
        hashed = get_password_hash("pw123")
        assert hashed != "pw123"
        assert hashed.startswith("$2b$")

    def test_same_password_gets_different_salts(self):
        assert get_password_hash("pw123") != get_password_hash("pw123")

    def test_verify_matches(self):
        hashed = get_password_hash("pw123")
        assert verify_password("pw123", hashed) is True
        assert verify_password("pw124", hashed) is False

    def test_unhashable_password_is_a_mismatch(self):
        hashed = get_password_hash("pw123")
        assert verify_password("a\x00b", hashed) is False

    def test_malformed_hash_is_internal_failure(self):
        with pytest.raises(PasswordHashingError):
            verify_password("pw123", "not-a-bcrypt-hash")


class TestTokenService:
    """Tests for JWT issue and verify."""

    def test_issue_and_verify(self):
        service = TokenService(secret=SECRET)
        before = datetime.now(UTC).replace(microsecond=0)

        identity = service.verify(service.issue("abc123"))

        assert identity.user_id == "abc123"
        assert identity.issued_at >= before

    def test_expiry_claim(self):
        token = TokenService(secret=SECRET, expiration_minutes=60).issue("abc123")
        claims = jwt.get_unverified_claims(token)
        assert claims["exp"] - claims["iat"] == 3600

    def test_expiry_disabled(self):
        service = TokenService(secret=SECRET, expiration_minutes=None)
        token = service.issue("abc123")
        assert "exp" not in jwt.get_unverified_claims(token)
        assert service.verify(token).user_id == "abc123"

    def test_expired_token(self):
        service = TokenService(secret=SECRET, expiration_minutes=-5)
        with pytest.raises(UnauthorizedError, match="jwt expired"):
            service.verify(service.issue("abc123"))

    def test_wrong_secret(self):
        token = TokenService(secret="someone-else").issue("abc123")
        with pytest.raises(UnauthorizedError, match="invalid token"):
            TokenService(secret=SECRET).verify(token)

    def test_malformed_token(self):
        with pytest.raises(UnauthorizedError):
            TokenService(secret=SECRET).verify("not.a.jwt")

    def test_token_without_subject(self):
        token = jwt.encode({"iat": 0}, SECRET, algorithm="HS256")
        with pytest.raises(UnauthorizedError, match="does not identify a user"):
            TokenService(secret=SECRET).verify(token)

    def test_empty_secret_rejected(self):
        with pytest.raises(ValueError):
            TokenService(secret="")

    def test_from_settings(self):
        settings = Settings(jwt_secret=SECRET, jwt_expiration_minutes=15)
        service = TokenService.from_settings(settings)
        assert service.secret == SECRET
        assert service.expiration_minutes == 15


class TestAuthorize:
    """Tests for the self-only ownership rule."""

    def test_owner_allowed(self):
        assert authorize("u1", "u1") is True

    def test_other_user_denied(self):
        assert authorize("u1", "u2") is False

    @pytest.mark.parametrize("token_user_id,owner_id", [(None, "u1"), ("u1", None), ("", "")])
    def test_missing_identity_denied(self, token_user_id, owner_id):
        assert authorize(token_user_id, owner_id) is False


class TestAuthenticateUser:
    """Tests for email/password authentication."""

    def test_valid_credentials(self, db):
        user = create_user(db, "Ann", "ann@example.com", "pw123")
        assert authenticate_user(db, "ann@example.com", "pw123").id == user.id

    def test_unknown_email(self, db):
        with pytest.raises(InvalidCredentialsError, match="User not found"):
            authenticate_user(db, "nobody@example.com", "pw123")

    def test_wrong_password(self, db):
        create_user(db, "Ann", "ann@example.com", "pw123")
        with pytest.raises(InvalidCredentialsError, match="do not match"):
            authenticate_user(db, "ann@example.com", "wrong")


class TestSettings:
    """Tests for settings validation."""

    def test_empty_expiration_disables_expiry(self):
        settings = Settings(jwt_expiration_minutes="")
        assert settings.jwt_expiration_minutes is None
        assert settings.token_max_age_seconds is None

    def test_token_max_age(self):
        assert Settings(jwt_expiration_minutes=480).token_max_age_seconds == 28800

    def test_production_rejects_default_secret(self):
        with pytest.raises(ValueError, match="JWT_SECRET"):
            Settings(environment="production", database_url="postgresql://db.internal/app")

"""Pytest configuration and fixtures."""

import os

# Keep bcrypt cheap in tests; must be set before settings are first loaded
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from src.database import Base, get_db  # noqa: E402
from src.main import app  # noqa: E402


class AuthHeaders(dict):
    """Dict subclass that also stores the logged-in user's id, email and token."""

    def __init__(self, *args, user_id: str | None = None, email: str | None = None, token: str | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.user_id = user_id
        self.email = email
        self.token = token


# Use test database - PostgreSQL in Docker, SQLite locally
if os.getenv("DATABASE_URL", "").startswith("postgresql"):
    # Running in Docker - use PostgreSQL test database
    SQLALCHEMY_DATABASE_URL = os.getenv("DATABASE_URL").replace("/user_accounts", "/user_accounts_test")
else:
    # Running locally - use SQLite
    SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"

connect_args = {"check_same_thread": False} if "sqlite" in SQLALCHEMY_DATABASE_URL else {}
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args=connect_args)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="session", autouse=True)
def setup_test_database():
    """Create test database schema once at the start of the test session."""
    if "postgresql" in SQLALCHEMY_DATABASE_URL:
        # For PostgreSQL, create the test database
        from sqlalchemy_utils import create_database, database_exists

        # Create test database if it doesn't exist
        if not database_exists(SQLALCHEMY_DATABASE_URL):
            create_database(SQLALCHEMY_DATABASE_URL)

    from src import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    yield
    # Don't drop database - just leave it for next run (each test cleans up after itself)


@pytest.fixture(scope="function", autouse=True)
def db():
    """Create a fresh database session for each test with cleanup."""
    session = TestingSessionLocal()

    yield session

    # Clean up all data after test
    session.rollback()
    for table in reversed(Base.metadata.sorted_tables):
        session.execute(table.delete())
    session.commit()
    session.close()


@pytest.fixture(scope="function")
def client(db):
    """Create a test client with database override."""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def signup_and_login(client, name: str, email: str, password: str) -> AuthHeaders:
    """Sign up a user, log in, and return bearer headers for them."""
    response = client.post(
        "/api/users",
        json={"name": name, "email": email, "password": password},
    )
    assert response.status_code == 200

    response = client.post("/api/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200
    data = response.json()

    # Drop the auth cookie so tests only authenticate through the header they pass
    client.cookies.clear()

    return AuthHeaders(
        {"Authorization": f"Bearer {data['token']}"},
        user_id=data["user"]["id"],
        email=email,
        token=data["token"],
    )


@pytest.fixture
def auth_headers(client):
    """Create a user and return auth headers with user info."""
    return signup_and_login(client, "Test User", "test@example.com", "testpass123")


@pytest.fixture
def other_auth_headers(client):
    """Create a second, unrelated user."""
    return signup_and_login(client, "Other User", "other@example.com", "otherpass123")

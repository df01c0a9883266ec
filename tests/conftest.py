"""Pytest configuration and fixtures."""

import os

import pytest
from fastapi.testclient import TestClient

from src.config import Settings
from src.database import Base, get_db
from src.main import create_app
from src.services.auth import TokenService

TEST_SECRET = "test-secret-key-for-the-test-suite"

# PostgreSQL when TEST_DATABASE_URL is set (Docker), SQLite file otherwise
TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite:///./test.db")


class AuthHeaders(dict):
    """Dict subclass that also stores the user's id, email and raw token."""

    def __init__(self, *args, user_id: int | None = None, email: str = "", token: str = "", **kwargs):
        super().__init__(*args, **kwargs)
        self.user_id = user_id
        self.email = email
        self.token = token


def make_settings(**overrides) -> Settings:
    """Settings for tests, independent of the environment and any .env file."""
    values = {
        "database_url": TEST_DATABASE_URL,
        "jwt_secret": TEST_SECRET,
        "port": 8000,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


test_settings = make_settings()
app = create_app(test_settings)
test_database = app.state.database


@pytest.fixture(scope="session", autouse=True)
def setup_test_database():
    """Create test database schema once at the start of the test session."""
    test_database.create_all()
    yield
    test_database.dispose()


@pytest.fixture(scope="function", autouse=True)
def db():
    """Create a fresh database session for each test with cleanup."""
    session = test_database.session()

    yield session

    # Clean up all data after test
    session.rollback()
    for table in reversed(Base.metadata.sorted_tables):
        session.execute(table.delete())
    session.commit()
    session.close()


def build_client(application, db):
    def override_get_db():
        try:
            yield db
        finally:
            pass

    application.dependency_overrides[get_db] = override_get_db
    # https so the Secure session cookie is sent back by the client
    return TestClient(application, base_url="https://testserver")


@pytest.fixture(scope="function")
def client(db):
    """Create a test client with database override."""
    with build_client(app, db) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def client_factory(db):
    """Build clients for apps with non-default settings."""
    apps = []

    def factory(**overrides):
        application = create_app(make_settings(**overrides))
        apps.append(application)
        return build_client(application, db)

    yield factory

    for application in apps:
        application.dependency_overrides.clear()
        application.state.database.dispose()


@pytest.fixture
def database():
    """Store handle of the test application."""
    return test_database


@pytest.fixture
def jwt_secret():
    """Signing secret the test application verifies tokens with."""
    return TEST_SECRET


@pytest.fixture
def token_service(jwt_secret):
    return TokenService(jwt_secret)


def register(client, name: str, email: str, password: str) -> AuthHeaders:
    """Sign up through the API and return bearer headers for the new user."""
    response = client.post("/signup", json={"name": name, "email": email, "password": password})
    assert response.status_code == 201
    data = response.json()
    token = data["token"]
    return AuthHeaders(
        {"Authorization": f"Bearer {token}"},
        user_id=data["user"]["id"],
        email=data["user"]["email"],
        token=token,
    )


@pytest.fixture
def auth_headers(client):
    """Create a user and return auth headers with user info."""
    return register(client, "Test User", "test@example.com", "testpass123")


@pytest.fixture
def other_auth_headers(client):
    """A second, unrelated user."""
    return register(client, "Other User", "other@example.com", "otherpass123")


@pytest.fixture
def signup_user(client):
    """Sign up additional users: ``signup_user(name, email, password)``."""

    def _signup(name: str, email: str, password: str) -> AuthHeaders:
        return register(client, name, email, password)

    return _signup

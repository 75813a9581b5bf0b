"""Test configuration and fixtures."""
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from bathroom_finder.core.hashing import PasswordHasher
from bathroom_finder.database import Database
from bathroom_finder.main import create_app
from bathroom_finder.services.auth import AuthService
from bathroom_finder.services.user_store import SQLAlchemyUserStore

TEST_PASSWORD = "testpassword123"


@pytest.fixture
def hasher():
    """Cheapest bcrypt cost so tests stay fast."""
    return PasswordHasher(rounds=4)


@pytest_asyncio.fixture
async def database(tmp_path):
    """File-backed SQLite database with fresh tables."""
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    db.connect()
    await db.create_all()

    yield db

    await db.drop_all()
    await db.close()


@pytest.fixture
def user_store(database):
    return SQLAlchemyUserStore(database)


@pytest.fixture
def auth_service(user_store, hasher):
    return AuthService(user_store, hasher)


@pytest.fixture
def user_data():
    return {
        "email": "test@example.com",
        "password": TEST_PASSWORD,
        "name": "Test User",
    }


@pytest_asyncio.fixture
async def test_user(auth_service, user_data):
    """Registered user."""
    return await auth_service.register(user_data)


@pytest_asyncio.fixture
async def client(database, hasher):
    """HTTP client bound to an app that uses the test database."""
    app = create_app(database=database, hasher=hasher)
    transport = ASGITransport(app=app)

    async with AsyncClient(transport=transport, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture
def test_password():
    return TEST_PASSWORD

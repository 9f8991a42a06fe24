import pytest
from typing import AsyncGenerator
from httpx import ASGITransport, AsyncClient

from likeable.app import create_app
from likeable.config import settings
from likeable.database import DatabaseSessionManager
from likeable.migrations import create_migration_engine, upgrade
from likeable.utils.token import generate_token


DEFAULT_OPTIONS = {"allowed_types": ["post", "comment"]}

ANONYMOUS_IP = "1.2.3.4"
ANONYMOUS_UA = "curl/8"

TEST_SECRET_KEY = "test-signing-key-0123456789abcdef0123456789"


@pytest.fixture(autouse=True)
def signing_key(monkeypatch):
    """Configure a token signing key for every test."""
    monkeypatch.setattr(settings, "SECRET_KEY", TEST_SECRET_KEY)
    return TEST_SECRET_KEY


@pytest.fixture
def database_path(tmp_path):
    """Path of a throwaway SQLite database file."""
    return tmp_path / "likes.db"


@pytest.fixture
def migrated_database(database_path):
    """Bring the database to the latest schema through the real migration history."""
    engine = create_migration_engine(f"sqlite:///{database_path}")
    with engine.connect() as connection:
        upgrade(connection)
    engine.dispose()
    return database_path


@pytest.fixture
async def sessionmanager(migrated_database) -> AsyncGenerator[DatabaseSessionManager, None]:
    """Async session manager bound to the migrated database."""
    manager = DatabaseSessionManager(f"sqlite+aiosqlite:///{migrated_database}")
    yield manager
    await manager.close()


@pytest.fixture
async def db_session(sessionmanager):
    """Create a test database session."""
    async with sessionmanager.session() as session:
        yield session


@pytest.fixture
async def make_client(sessionmanager):
    """Build clients for apps configured with the given plugin options."""
    clients = []

    def _make_client(options=None, ip=ANONYMOUS_IP, user_agent=ANONYMOUS_UA, authorizer=None, app=None):
        if app is None:
            app = create_app(
                DEFAULT_OPTIONS if options is None else options,
                authorizer=authorizer,
                sessionmanager=sessionmanager,
            )
        test_client = AsyncClient(
            transport=ASGITransport(app=app, client=(ip, 123)),
            base_url="http://test",
            headers={"User-Agent": user_agent},
        )
        clients.append(test_client)
        return test_client

    yield _make_client

    for test_client in clients:
        await test_client.aclose()


@pytest.fixture
def async_client(make_client) -> AsyncClient:
    """Create an async test client with the default options."""
    return make_client()


@pytest.fixture
def auth_headers(signing_key) -> dict:
    """Create authorization headers for a test user."""
    access_token = generate_token({"user_id": "user-1"})
    return {"Authorization": f"Bearer {access_token}"}


@pytest.fixture
def auth_headers_2(signing_key) -> dict:
    """Create authorization headers for a second test user."""
    access_token = generate_token({"user_id": "user-2"})
    return {"Authorization": f"Bearer {access_token}"}

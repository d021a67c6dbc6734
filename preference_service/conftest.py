import asyncio
import logging
from pathlib import Path
from fastapi import FastAPI
import pytest
from fastapi.testclient import TestClient
import pytest_asyncio
from sqlalchemy import pool
from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine, async_sessionmaker, AsyncSession

from preference_service.core.auth import AuthUser, Authenticator, get_authenticator, get_current_user
from preference_service.core.database import enable_sqlite_foreign_keys, get_db_session
from preference_service.core.logging import setup_logging
from preference_service.core.settings import Settings, get_settings
from preference_service.features.preferences.bootstrap import create_preference_tables
from preference_service.features.users.models.user import User
from preference_service.fixtures.user_factory import UserFactory

from preference_service.main import create_fastapi_app

logger = logging.getLogger(__name__)

TEST_DATABASE_PATH = "sqlite.test.db"
TEST_DATABASE_URL = f"sqlite+aiosqlite:///{TEST_DATABASE_PATH}"

# Application settings for tests (this is created with explicit values to ensure reproducibility)
# ----------------------------------------------------------------------------------------------------------------------


@pytest.fixture(scope="session")
def settings_fixture():
    return Settings.model_construct(
        jwt_secret_key="test",
        database_url=TEST_DATABASE_URL,
        debug=True,
        logger_name="console",
        logger_level="info",
        preferences_bootstrap_on_startup=False,
    )


@pytest.fixture(scope="session")
def setup_logging_fixture(settings_fixture: Settings):
    setup_logging(settings_fixture)
    yield


# Database engine for tests using a throwaway SQLite file
# Create the tables before tests and delete the database file after tests
# This function has to be non-async since it runs before the per-test event loops exist
# ----------------------------------------------------------------------------------------------------------------------


async def create_test_schema(engine: AsyncEngine):
    session_maker = async_sessionmaker(engine)
    async with session_maker() as session:
        await create_preference_tables(session)


@pytest.fixture(scope="session")
def db_engine_fixture(setup_logging_fixture: None):
    Path(TEST_DATABASE_PATH).unlink(missing_ok=True)
    engine = create_async_engine(TEST_DATABASE_URL, poolclass=pool.NullPool)
    enable_sqlite_foreign_keys(engine)

    asyncio.run(create_test_schema(engine))
    logger.info("Tables created for test database.")

    yield engine
    Path(TEST_DATABASE_PATH).unlink(missing_ok=True)


# Run all in a transaction and roll it back after each test
# ----------------------------------------------------------------------------------------------------------------------


@pytest_asyncio.fixture(scope="function", autouse=True)
async def db_fixture(db_engine_fixture: AsyncEngine):
    async with db_engine_fixture.connect() as connection:
        transaction = await connection.begin()
        try:
            session_maker = async_sessionmaker(bind=connection)
            async with session_maker() as session:
                yield session
        finally:
            await transaction.rollback()


# Authenticator for tests
# ----------------------------------------------------------------------------------------------------------------------


@pytest.fixture(scope="function")
def authenticator_fixture(settings_fixture: Settings):
    return Authenticator(settings_fixture)


# Dependency overrides for tests
# ----------------------------------------------------------------------------------------------------------------------


@pytest.fixture(scope="function")
def fastapi_app_fixture(
    db_fixture: AsyncSession,
    settings_fixture: Settings,
    authenticator_fixture: Authenticator,
):
    app = create_fastapi_app(settings_fixture)
    app.dependency_overrides[get_db_session] = lambda: db_fixture
    app.dependency_overrides[get_settings] = lambda: settings_fixture
    app.dependency_overrides[get_authenticator] = lambda: authenticator_fixture
    yield app


@pytest.fixture(scope="function")
def test_client_fixture(fastapi_app_fixture: FastAPI):
    client = TestClient(fastapi_app_fixture)
    yield client


# Fake user log in for tests
# ----------------------------------------------------------------------------------------------------------------------


async def get_auth_user(type: str, db_fixture: AsyncSession) -> tuple[User, AuthUser]:
    user: User = UserFactory.build()
    db_fixture.add(user)
    await db_fixture.commit()
    await db_fixture.refresh(user)
    return user, AuthUser(id=user.id, org_id=user.org_id, type=type, email=user.email)


@pytest_asyncio.fixture(scope="function")
async def auth_user_fixture(db_fixture: AsyncSession) -> AuthUser:
    _, auth_user = await get_auth_user("member", db_fixture)
    return auth_user


@pytest_asyncio.fixture(scope="function")
async def authenticated_user_fixture(fastapi_app_fixture: FastAPI, db_fixture: AsyncSession):
    _, auth_user = await get_auth_user("member", db_fixture)
    fastapi_app_fixture.dependency_overrides[get_current_user] = lambda: auth_user
    yield auth_user


@pytest_asyncio.fixture(scope="function")
async def authenticated_admin_fixture(fastapi_app_fixture: FastAPI, db_fixture: AsyncSession):
    _, auth_user = await get_auth_user("admin", db_fixture)
    fastapi_app_fixture.dependency_overrides[get_current_user] = lambda: auth_user
    yield auth_user

"""
This module sets up the database connection and session management using SQLAlchemy's async capabilities.
It defines a base class for ORM models and provides a dependency for obtaining database sessions.
The database URL is retrieved from the application settings.
The session maker is provided as a dependency to enable easy access to the database in route handlers.

SQLAlchemy Docs: https://docs.sqlalchemy.org/en/20/orm/extensions/asyncio.html#using-asyncio-scoped-session <br/>
Fast API Docs: https://fastapi.tiangolo.com/tutorial/sql-databases/
"""

from typing import Annotated
from functools import lru_cache
import logging
from fastapi import Depends
from sqlalchemy import event
from sqlalchemy.engine.interfaces import DBAPIConnection
from sqlalchemy.pool import ConnectionPoolEntry
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine, async_sessionmaker, AsyncSession

from preference_service.core.settings import SettingsDep

logger = logging.getLogger(__name__)

# The base class for ORM models.
# ----------------------------------------------------------------------------------------------------------------------


class Base(DeclarativeBase):
    __abstract__ = True


# SQLite only enforces foreign keys (and their cascades) when asked to, per connection.
# ----------------------------------------------------------------------------------------------------------------------


def enable_sqlite_foreign_keys(engine: AsyncEngine):
    @event.listens_for(engine.sync_engine, "connect")
    def _(dbapi_connection: DBAPIConnection, connection_record: ConnectionPoolEntry):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


# Dependency that provides an asynchronous database session.
# The database engine is cached to avoid recreating it on each request.
# ----------------------------------------------------------------------------------------------------------------------


@lru_cache
def create_db_engine(database_url: str, debug: bool = False) -> AsyncEngine:
    logger.info("Creating database engine", extra={"database_url": database_url})
    engine = create_async_engine(database_url, echo=debug)
    if engine.dialect.name == "sqlite":
        enable_sqlite_foreign_keys(engine)
    return engine


def create_db_engine_from_settings(settings: SettingsDep):
    return create_db_engine(settings.database_url, debug=settings.debug)


async def get_db_session(settings: SettingsDep):
    engine = create_db_engine_from_settings(settings)
    session_maker = async_sessionmaker(engine)
    async with session_maker() as session:
        yield session


DbDep = Annotated[AsyncSession, Depends(get_db_session)]

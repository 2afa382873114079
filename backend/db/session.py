from typing import Optional
from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine, AsyncSession
from sqlalchemy.orm import sessionmaker
import logging

logger = logging.getLogger(__name__)


def resolve_database_url(database_url: str, service_key: Optional[str] = None):
    """
    Normalizes the configured URL for the async drivers and injects the
    service key as the connection password when one is given.
    """
    # Ensure usage of asyncpg driver
    if database_url.startswith("postgresql://"):
        database_url = database_url.replace("postgresql://", "postgresql+asyncpg://", 1)
    elif database_url.startswith("sqlite:///"):
        database_url = database_url.replace("sqlite:///", "sqlite+aiosqlite:///", 1)

    url = make_url(database_url)
    if service_key:
        url = url.set(password=service_key)
    return url


def create_engine_from_settings(settings) -> AsyncEngine:
    url = resolve_database_url(settings.DATABASE_URL, settings.DATABASE_SERVICE_KEY)

    if url.get_backend_name() == "sqlite":
        logger.info(f"Using Database: SQLite ({url.database})")
        engine = create_async_engine(
            url,
            echo=False,
            connect_args={"check_same_thread": False} # Needed for SQLite
        )

        @event.listens_for(engine.sync_engine, "connect")
        def set_sqlite_pragma(dbapi_connection, connection_record):
            # Match PostgreSQL: inserts with an unknown user_id must fail
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        return engine

    logger.info(f"Using Database: PostgreSQL ({url.host}/{url.database}) with timeout=10s") # Hide credentials
    return create_async_engine(
        url,
        echo=False,
        pool_pre_ping=True,
        connect_args={
            "timeout": 10 # 10 seconds connection timeout
        }
    )


def create_session_factory(engine: AsyncEngine):
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

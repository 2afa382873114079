import logging
from types import SimpleNamespace

import pytest
import pytest_asyncio
from sqlalchemy import insert

from db.schema import metadata, profiles, item_types
from db.session import create_engine_from_settings, create_session_factory
from image_audit.config import Settings

BUCKET = Settings.DEFAULT_IMAGE_BASE_URL
CHECK_USER_ID = Settings.DEFAULT_CHECK_USER_ID


def type_id(n):
    return f"00000000-0000-0000-0001-{n:012d}"


def make_settings(database_url="sqlite:///:memory:", **overrides):
    values = {
        "DATABASE_URL": database_url,
        "DATABASE_SERVICE_KEY": None,
        "IMAGE_BASE_URL": BUCKET,
        "CHECK_USER_ID": CHECK_USER_ID,
        "REFERENCE_ITEM_TYPE": "Sword",
        "GATE_ON_PROPAGATION": False,
        "LOG_LEVEL": "WARNING",
    }
    values.update(overrides)
    return SimpleNamespace(**values)


@pytest.fixture(autouse=True)
def reset_audit_logger():
    # configure_logging() replaces root handlers and detaches the checker logger
    root_logger = logging.getLogger()
    root_handlers, root_level = list(root_logger.handlers), root_logger.level
    yield
    root_logger.handlers = root_handlers
    root_logger.setLevel(root_level)
    audit_logger = logging.getLogger("image_audit")
    audit_logger.handlers = []
    audit_logger.propagate = True
    audit_logger.setLevel(logging.NOTSET)


@pytest.fixture
def settings(tmp_path):
    return make_settings(f"sqlite:///{tmp_path / 'audit.db'}")


@pytest_asyncio.fixture
async def db_engine(settings):
    engine = create_engine_from_settings(settings)
    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def db(db_engine):
    async with create_session_factory(db_engine)() as session:
        yield session


async def seed(db, rows, with_user=True):
    """Insert item type rows given as (id, name, base_image_url) tuples."""
    if with_user:
        await db.execute(insert(profiles).values(id=CHECK_USER_ID, username="image-check"))
    for item_type_id, name, url in rows:
        await db.execute(
            insert(item_types).values(id=item_type_id, name=name, base_image_url=url)
        )
    await db.commit()

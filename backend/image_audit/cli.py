import asyncio
import logging
import sys

from db.session import create_engine_from_settings, create_session_factory
from image_audit.checker import BaseImageChecker
from image_audit.config import settings as default_settings
from image_audit.errors import ConfigurationError
from image_audit.logging_config import configure_logging
from image_audit.store import ItemImageStore

logger = logging.getLogger(__name__)


async def run_checks(settings) -> bool:
    engine = create_engine_from_settings(settings)
    try:
        async with create_session_factory(engine)() as db:
            report = await BaseImageChecker(ItemImageStore(db), settings).run()
            return report.passed
    finally:
        await engine.dispose()


def main(settings=None) -> int:
    settings = settings or default_settings
    try:
        configure_logging(settings.LOG_LEVEL)
    except ConfigurationError as e:
        configure_logging()
        logger.error(f"Configuration Error: {e}")
        return 1

    try:
        success = asyncio.run(run_checks(settings))
    except ConfigurationError as e:
        logger.error(f"Configuration Error: {e}")
        return 1
    except Exception as e:
        logger.error(f"Check failed: {e}")
        return 1
    return 0 if success else 1


if __name__ == "__main__":
    sys.exit(main())

import os
import logging
from dotenv import load_dotenv
from sqlalchemy.engine import make_url

from image_audit.errors import ConfigurationError

# Load environment variables (.env.local wins over .env)
load_dotenv(".env.local")
load_dotenv()

TRUTHY = {"1", "true", "yes", "on"}

class Settings:
    PROJECT_NAME = "Base Image Audit"
    VERSION = "0.1.0"

    DEFAULT_IMAGE_BASE_URL = "https://pub-1f07f440a8204e199f8ad01009c67cf5.r2.dev/items/"
    DEFAULT_CHECK_USER_ID = "00000000-0000-0000-0000-000000000001"
    DEFAULT_REFERENCE_ITEM_TYPE = "Sword"

    @property
    def DATABASE_URL(self):
        url = os.getenv("DATABASE_URL", "").strip()
        if not url:
            raise ConfigurationError("DATABASE_URL is not set")
        return url

    @property
    def DATABASE_SERVICE_KEY(self):
        key = os.getenv("DATABASE_SERVICE_KEY", "").strip()
        if key:
            return key

        # SQLite files and URLs with inline credentials don't need a separate key
        url = self.DATABASE_URL
        if url.startswith("sqlite") or make_url(url).password:
            return None
        raise ConfigurationError("DATABASE_SERVICE_KEY is not set")

    @property
    def IMAGE_BASE_URL(self):
        return os.getenv("IMAGE_BASE_URL") or self.DEFAULT_IMAGE_BASE_URL

    @property
    def CHECK_USER_ID(self):
        return os.getenv("CHECK_USER_ID") or self.DEFAULT_CHECK_USER_ID

    @property
    def REFERENCE_ITEM_TYPE(self):
        return os.getenv("REFERENCE_ITEM_TYPE") or self.DEFAULT_REFERENCE_ITEM_TYPE

    @property
    def GATE_ON_PROPAGATION(self):
        return os.getenv("GATE_ON_PROPAGATION", "").strip().lower() in TRUTHY

    @property
    def LOG_LEVEL(self):
        level = os.getenv("LOG_LEVEL", "WARNING").strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ConfigurationError(f"LOG_LEVEL {level!r} is not a logging level")
        return level

settings = Settings()

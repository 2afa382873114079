class ImageAuditError(Exception):
    """Base class for errors raised by the base image checker."""


class ConfigurationError(ImageAuditError):
    """A required environment setting is missing or malformed."""


class StoreError(ImageAuditError):
    """A database call against the item tables failed."""

import logging
import sys

class ColorFormatter(logging.Formatter):
    """
    Custom formatter to add colors to log levels.
    """
    grey = "\x1b[38;20m"
    blue = "\x1b[34;20m"
    yellow = "\x1b[33;20m"
    red = "\x1b[31;20m"
    bold_red = "\x1b[31;1m"
    reset = "\x1b[0m"
    default_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s (%(filename)s:%(lineno)d)"

    def __init__(self, fmt: str = None):
        super().__init__()
        fmt = fmt or self.default_format
        self.FORMATS = {
            logging.DEBUG: self.grey + fmt + self.reset,
            logging.INFO: self.blue + fmt + self.reset,
            logging.WARNING: self.yellow + fmt + self.reset,
            logging.ERROR: self.red + fmt + self.reset,
            logging.CRITICAL: self.bold_red + fmt + self.reset
        }

    def format(self, record):
        log_fmt = self.FORMATS.get(record.levelno)
        formatter = logging.Formatter(log_fmt)
        return formatter.format(record)

def configure_logging(level: str = "WARNING"):
    """
    Configures the root logger and the checker's progress output.

    Library loggers stay at `level`; the `image_audit` logger always reports
    INFO so progress lines reach stdout.
    """
    # Library noise keeps the full format, checker output is just the message
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(ColorFormatter())

    progress_handler = logging.StreamHandler(sys.stdout)
    progress_handler.setFormatter(ColorFormatter("%(message)s"))

    # Configure Root Logger
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Remove existing handlers to avoid duplicates
    if root_logger.hasHandlers():
        root_logger.handlers.clear()

    root_logger.addHandler(console_handler)

    audit_logger = logging.getLogger("image_audit")
    audit_logger.setLevel(logging.INFO)
    audit_logger.handlers = [progress_handler]
    audit_logger.propagate = False

    # Silence noisy libraries
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)
    logging.getLogger("asyncpg").setLevel(logging.WARNING)

    return audit_logger

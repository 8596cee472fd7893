"""
Logging setup for the loyalty history service.

Console output always; a rotating log file when LOG_FILE is set.
"""
import os
import logging
from logging.handlers import RotatingFileHandler

LOG_FORMAT = '%(asctime)s %(levelname)s [%(name)s] %(message)s'
FILE_LOG_FORMAT = '%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]'

_configured = False


def setup_logging(level: str = None, log_file: str = None) -> None:
    """
    Configure the root logger once per process.

    Args:
        level: Log level name (defaults to LOG_LEVEL env var, then INFO)
        log_file: Optional path for a rotating file handler
    """
    global _configured
    if _configured:
        return

    level_name = (level or os.getenv('LOG_LEVEL', 'INFO')).upper()
    root = logging.getLogger()
    root.setLevel(getattr(logging, level_name, logging.INFO))

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(console_handler)

    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir and not os.path.exists(log_dir):
            os.makedirs(log_dir, exist_ok=True)
        file_handler = RotatingFileHandler(log_file, maxBytes=10240, backupCount=10)
        file_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT))
        file_handler.setLevel(logging.INFO)
        root.addHandler(file_handler)

    # SQL echo is noisy at INFO
    logging.getLogger('sqlalchemy.engine').setLevel(logging.WARNING)

    _configured = True

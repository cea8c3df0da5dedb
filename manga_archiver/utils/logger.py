"""
Logging for manga_archiver.

Modules log through `get_logger(__name__)`. Those loggers propagate to the
`manga_archiver` logger, which writes to a rotating file under LOGS_DIR and
to the console.
"""
import logging
import os
from logging.handlers import RotatingFileHandler

MAIN_LOGGER_NAME = 'manga_archiver'

LOG_FORMAT = '%(asctime)s - %(levelname)s - %(name)s - %(module)s.%(funcName)s:%(lineno)d - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'
MAX_LOG_BYTES = 5 * 1024 * 1024
LOG_BACKUP_COUNT = 5

# logger.py lives in <project>/manga_archiver/utils/
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..', '..'))
LOGS_DIR = os.environ.get('MANGA_ARCHIVER_LOG_DIR') or os.path.join(PROJECT_ROOT, 'workspace', 'logs')
main_log_file = os.path.join(LOGS_DIR, 'manga_archiver.log')


def level_from_name(name: str, default: int = logging.INFO) -> int:
    """Maps a level name such as "debug" to its value, `default` when unknown."""
    level = logging.getLevelName(name.strip().upper())
    return level if isinstance(level, int) else default


LOG_LEVEL = level_from_name(os.environ.get('LOG_LEVEL', 'INFO'))


def _build_file_handler(log_file: str) -> RotatingFileHandler:
    os.makedirs(os.path.dirname(log_file), exist_ok=True)
    return RotatingFileHandler(log_file, maxBytes=MAX_LOG_BYTES, backupCount=LOG_BACKUP_COUNT, encoding='utf-8')


def setup_logger(logger_name, log_file, level=logging.INFO, add_console_handler=True):
    """
    Sends `logger_name` to `log_file` and, optionally, to stderr.

    Calling it again for the same logger closes and replaces its handlers.
    """
    logger = logging.getLogger(logger_name)
    logger.setLevel(level)
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    handlers = [_build_file_handler(log_file)]
    if add_console_handler:
        handlers.append(logging.StreamHandler())

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    return logger


def set_console_level(level: int, logger_name: str = MAIN_LOGGER_NAME) -> None:
    """Raises or lowers the threshold of the console output; the log file is left alone."""
    for handler in logging.getLogger(logger_name).handlers:
        if not isinstance(handler, logging.FileHandler):
            handler.setLevel(level)


logger = setup_logger(MAIN_LOGGER_NAME, main_log_file, LOG_LEVEL)


def get_logger(name: str = MAIN_LOGGER_NAME) -> logging.Logger:
    """
    Returns a logger under the main application logger.
    """
    return logging.getLogger(name)

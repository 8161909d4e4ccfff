import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path

from bearing.utilities.env.parsing import _env_flag

LOG_LEVEL_ENV_VAR = "LOG_LEVEL"
LOG_DIR_ENV_VAR = "BEARING_LOG_DIR"
LOG_TO_FILE_ENV_VAR = "BEARING_LOG_TO_FILE"
DEFAULT_LOG_SUBDIR = Path(".bearing") / "logs"
MAX_LOG_BYTES = 10 * 1024 * 1024  # 10 MiB
BACKUP_COUNT = 5
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_configured_loggers: dict[str, logging.Logger] = {}


def resolve_level(log_level: str) -> int:
    """Return the numeric level for a name such as ``"debug"``."""

    level = logging.getLevelName(log_level.strip().upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {log_level!r}")
    return level


def _env_level() -> int:
    try:
        return resolve_level(os.getenv(LOG_LEVEL_ENV_VAR, "INFO"))
    except ValueError:
        return logging.INFO


def _resolve_log_directory() -> Path:
    """Return the directory where heading logs should be written."""

    log_dir = os.getenv(LOG_DIR_ENV_VAR)
    if log_dir:
        path = Path(log_dir).expanduser()
    else:
        path = Path.home() / DEFAULT_LOG_SUBDIR

    path.mkdir(parents=True, exist_ok=True)
    return path


def log_filename(name: str) -> str:
    """Map a module logger name to its file, dropping the package prefix."""

    # bearing.orientation.estimator -> orientation_estimator.log
    parts = [part for part in name.split(".") if part and part != "bearing"]
    return "_".join(parts or ["bearing"]) + ".log"


def _build_handlers(name: str) -> list[logging.Handler]:
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if _env_flag(LOG_TO_FILE_ENV_VAR, default=True):
        handlers.append(
            RotatingFileHandler(
                _resolve_log_directory() / log_filename(name),
                maxBytes=MAX_LOG_BYTES,
                backupCount=BACKUP_COUNT,
            )
        )
    return handlers


def get_logger(name: str) -> logging.Logger:
    """Return a logger with a stream handler and, unless disabled, a rolling file."""

    logger = logging.getLogger(name)
    level = _env_level()
    logger.setLevel(level)
    if logger.handlers:
        # Configured by an earlier get_logger call or by the host application.
        return logger

    formatter = logging.Formatter(LOG_FORMAT)
    for handler in _build_handlers(name):
        handler.setFormatter(formatter)
        handler.setLevel(level)
        logger.addHandler(handler)
    logger.propagate = False
    _configured_loggers[name] = logger
    return logger


def set_log_level(log_level: str) -> int:
    """Apply ``log_level`` to every logger handed out by :func:`get_logger`."""

    level = resolve_level(log_level)
    for logger in _configured_loggers.values():
        logger.setLevel(level)
        for handler in logger.handlers:
            handler.setLevel(level)
    return level

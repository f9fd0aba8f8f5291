"""Logging infrastructure built on loguru.

Components never configure logging themselves; they receive a logger by
injection (defaulting to get_logger(__name__)). The app layer calls
setup_logging() once with its Settings, and get_logger() falls back to
defaults when nothing has been configured yet.
"""

import sys
import typing as t

from loguru import logger

from ..config.settings import Environment, LogLevel, Settings

if t.TYPE_CHECKING:
    import loguru

_DEVELOPMENT_FORMAT = (
    "<green>{time:HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{extra[name]}</cyan> - <level>{message}</level>"
)
_PLAIN_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {extra[name]} - {message}"

_configured = False


def configure_logger(
    level: LogLevel = LogLevel.INFO,
    environment: Environment = Environment.PRODUCTION,
) -> None:
    """Replace loguru's handlers with one configured for the environment.

    Development gets colourised human-readable output, production emits one
    JSON document per record, testing uses the plain format without colour.
    """
    global _configured

    logger.remove()
    logger.configure(extra={"name": "fetchq"})

    match environment:
        case Environment.DEVELOPMENT:
            logger.add(
                sys.stderr,
                level=level.value,
                format=_DEVELOPMENT_FORMAT,
                colorize=True,
                backtrace=True,
                diagnose=True,
            )
        case Environment.PRODUCTION:
            logger.add(sys.stderr, level=level.value, serialize=True)
        case Environment.TESTING:
            logger.add(
                sys.stderr, level=level.value, format=_PLAIN_FORMAT, colorize=False
            )

    _configured = True


def setup_logging(settings: Settings) -> None:
    """Configure logging from application settings."""
    configure_logger(level=settings.log_level, environment=settings.environment)


def get_logger(name: str) -> "loguru.Logger":
    """Return a logger bound to a module name, configuring defaults if needed."""
    if not _configured:
        configure_logger()
    return logger.bind(name=name)


def is_configured() -> bool:
    return _configured


def reset_logging() -> None:
    """Drop all handlers so the next get_logger() call reconfigures."""
    global _configured

    logger.remove()
    _configured = False

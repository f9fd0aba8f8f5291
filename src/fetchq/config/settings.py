import os
import typing as t
from dataclasses import dataclass, field, fields, replace
from enum import Enum
from pathlib import Path

DEFAULT_URL_PREFIX = "http://desktop.google.com"

ENV_PREFIX = "FETCHQ_"


class Environment(Enum):
    """Runtime environment for the application.

    Kept small and explicit to support simple environment-driven behavior
    without introducing configuration dependencies.
    """

    DEVELOPMENT = "development"
    PRODUCTION = "production"
    TESTING = "testing"


class LogLevel(str, Enum):
    """Log levels understood by loguru."""

    TRACE = "TRACE"
    DEBUG = "DEBUG"
    INFO = "INFO"
    SUCCESS = "SUCCESS"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


@dataclass(frozen=True)
class Settings:
    """Settings container used to bootstrap the app.

    Core code depends on this shape only; the app/CLI layer decides how
    values are populated (defaults, env vars, command-line options).
    """

    environment: Environment = Environment.PRODUCTION
    log_level: LogLevel = LogLevel.INFO
    max_concurrent: int = 6
    url_prefix: str = DEFAULT_URL_PREFIX
    download_dir: Path = field(default_factory=lambda: Path("downloads"))
    timeout: float | None = 60.0


def _read_env(environ: t.Mapping[str, str]) -> dict[str, t.Any]:
    """Collect FETCHQ_* overrides, converted to the field types."""
    converters: dict[str, t.Callable[[str], t.Any]] = {
        "environment": lambda v: Environment(v.lower()),
        "log_level": lambda v: LogLevel(v.upper()),
        "max_concurrent": int,
        "url_prefix": str,
        "download_dir": Path,
        "timeout": float,
    }
    values: dict[str, t.Any] = {}
    for name, convert in converters.items():
        raw = environ.get(f"{ENV_PREFIX}{name.upper()}")
        if raw:
            values[name] = convert(raw)
    return values


def build_settings(
    environ: t.Mapping[str, str] | None = None, **overrides: t.Any
) -> Settings:
    """Build Settings from defaults, environment variables and overrides.

    Precedence is overrides > FETCHQ_* environment variables > defaults.
    Overrides that are None are ignored so CLI options left unset fall
    through to the next layer.

    Args:
        environ: Environment mapping to read. Defaults to os.environ.
        **overrides: Field values to apply on top.

    Raises:
        TypeError: If an override names an unknown setting.
    """
    known = {f.name for f in fields(Settings)}
    unknown = set(overrides) - known
    if unknown:
        raise TypeError(f"Unknown settings: {', '.join(sorted(unknown))}")

    values = _read_env(os.environ if environ is None else environ)
    values.update({k: v for k, v in overrides.items() if v is not None})
    return replace(Settings(), **values)

import logging
import os
from dataclasses import dataclass

from weightcut.clock import DEFAULT_TIMEZONE, normalize_timezone_name
from weightcut.errors import ConfigError

_LOG_FORMATS = ("json", "text")


@dataclass(frozen=True)
class Config:
    log_format: str = "json"
    log_level: int = logging.INFO
    timezone_name: str = DEFAULT_TIMEZONE
    harness_seed: int = 42

    @classmethod
    def from_env(cls) -> "Config":
        log_format = os.environ.get("WEIGHTCUT_LOG_FORMAT", "json").strip().lower()
        if log_format not in _LOG_FORMATS:
            raise ConfigError(f"WEIGHTCUT_LOG_FORMAT must be one of: {', '.join(_LOG_FORMATS)}")

        level_name = os.environ.get("WEIGHTCUT_LOG_LEVEL", "INFO").strip().upper()
        log_level = logging.getLevelName(level_name)
        if not isinstance(log_level, int):
            raise ConfigError(f"WEIGHTCUT_LOG_LEVEL is not a logging level: {level_name!r}")

        raw_timezone = os.environ.get("WEIGHTCUT_TIMEZONE", DEFAULT_TIMEZONE)
        timezone_name = normalize_timezone_name(raw_timezone)
        if timezone_name is None:
            raise ConfigError(f"WEIGHTCUT_TIMEZONE is not a valid IANA timezone: {raw_timezone!r}")

        raw_seed = os.environ.get("WEIGHTCUT_HARNESS_SEED", "42")
        try:
            harness_seed = int(raw_seed)
        except ValueError:
            raise ConfigError(f"WEIGHTCUT_HARNESS_SEED must be an integer: {raw_seed!r}") from None

        return cls(
            log_format=log_format,
            log_level=log_level,
            timezone_name=timezone_name,
            harness_seed=harness_seed,
        )

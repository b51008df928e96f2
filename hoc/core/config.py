"""
Notation symbols, report wording and runtime settings
"""

import os
from dataclasses import dataclass

from .errors import ConfigurationError

VERSION = "0.1.0"

# Contract notation keywords
ARROW_SYMBOLS = {"->", "->/c"}
AND_SYMBOL = "and/c"
OR_SYMBOL = "or/c"
NOT_SYMBOL = "not/c"

# Canonical arrow keyword used when rendering contracts
ARROW_KEYWORD = "->"

# Report wording
RANGE_LABEL = "the range"
ARITY_LABEL = "the number of arguments"
VALUE_LABEL = "the value"

ORDINAL_SUFFIXES = {1: "st", 2: "nd", 3: "rd"}

# Defaults
DEFAULT_HISTORY_LIMIT = 100
DEFAULT_LOG_LEVEL = "WARNING"
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8000

TRUE_STRINGS = {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from None
    if value < 0:
        raise ConfigurationError(f"{name} must not be negative, got {value}")
    return value


def ordinal(n: int) -> str:
    """1 -> '1st', 2 -> '2nd', 11 -> '11th'"""
    if 10 <= n % 100 <= 20:
        return f"{n}th"
    return f"{n}{ORDINAL_SUFFIXES.get(n % 10, 'th')}"


@dataclass
class Settings:
    """Runtime settings, read from HOC_* environment variables"""
    record_history: bool = False
    history_limit: int = DEFAULT_HISTORY_LIMIT
    log_level: str = DEFAULT_LOG_LEVEL
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            record_history=os.getenv("HOC_RECORD_HISTORY", "").lower() in TRUE_STRINGS,
            history_limit=_env_int("HOC_HISTORY_LIMIT", DEFAULT_HISTORY_LIMIT),
            log_level=os.getenv("HOC_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(),
            host=os.getenv("HOC_HOST", DEFAULT_HOST),
            port=_env_int("HOC_PORT", DEFAULT_PORT),
        )


_settings = None


def get_settings() -> Settings:
    """Get or create the process-wide settings"""
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings


def configure(**overrides) -> Settings:
    """Replace selected settings, e.g. configure(record_history=True)"""
    global _settings
    current = get_settings()
    _settings = Settings(**{**current.__dict__, **overrides})
    return _settings


def reset_settings() -> None:
    """Forget cached settings; the next get_settings() rereads the environment"""
    global _settings
    _settings = None

from __future__ import annotations
import os
from dataclasses import dataclass


# Defaults
_DEFAULT_PROMPT = ">> "
_DEFAULT_LOG_LEVEL = "WARNING"

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


def flag_from_env(var: str, default: bool) -> bool:
    raw = os.environ.get(var)
    if raw is None or not raw.strip():
        return default
    value = raw.strip().lower()
    if value in _TRUTHY:
        return True
    if value in _FALSY:
        return False
    return default


def str_from_env(var: str, default: str) -> str:
    raw = os.environ.get(var)
    return raw if raw else default


@dataclass
class Settings:
    trace: bool = False
    log_level: str = _DEFAULT_LOG_LEVEL
    prompt: str = _DEFAULT_PROMPT
    color: bool = True
    pprint_options: str = ""


def get_settings() -> Settings:
    """Front-end settings from MONKEY_* environment variables."""
    return Settings(
        trace=flag_from_env("MONKEY_TRACE", False),
        log_level=str_from_env("MONKEY_LOG_LEVEL", _DEFAULT_LOG_LEVEL).upper(),
        prompt=str_from_env("MONKEY_PROMPT", _DEFAULT_PROMPT),
        color=flag_from_env("MONKEY_COLOR", True),
        pprint_options=str_from_env("MONKEY_PPRINT", ""),
    )

"""Settings for the Corgo bot, read from the environment once and cached.

``config.runtime`` knows how to parse each variable. This module decides which
ones matter, refuses to start without a token, logs a redacted snapshot and
hands out typed getters. Call :func:`reload_config` after changing the
environment (tests do).
"""

from __future__ import annotations

import logging
import os
import re
from typing import Callable, Dict, Optional

from config import runtime as _runtime
from shared.redaction import mask_secret, sanitize_text

__all__ = [
    "reload_config",
    "get_config_snapshot",
    "get_env_name",
    "get_bot_name",
    "get_bot_version",
    "get_command_prefix",
    "get_port",
    "get_log_level",
    "get_discord_token",
    "get_mod_role_id",
    "get_cohort_category_id",
    "get_cohort_role_prefix",
    "get_cohort_role_colour",
    "get_listening_party_channel_id",
    "get_welcome_channel_id",
    "get_welcome_messages_path",
    "redact_value",
]

log = logging.getLogger("corgo.config")

_REQUIRED_ENV = ("DISCORD_TOKEN",)
_UNSET = "—"
_DIGITS = re.compile(r"\d+")


def _check_required() -> None:
    missing = [name for name in _REQUIRED_ENV if not (os.getenv(name) or "").strip()]
    if missing:
        raise RuntimeError(f"Missing required environment variable: {', '.join(missing)}")


def _snowflake_env(name: str) -> Optional[int]:
    """First run of digits in ``name``, so ``<#123>`` pasted from Discord works too."""

    match = _DIGITS.search(os.getenv(name) or "")
    return int(match.group(0)) if match else None


# Key -> loader. Order is the order of the startup log line.
_SCHEMA: Dict[str, Callable[[], object]] = {
    "ENV_NAME": _runtime.get_env_name,
    "BOT_NAME": _runtime.get_bot_name,
    "BOT_VERSION": lambda: os.getenv("BOT_VERSION", "dev"),
    "DISCORD_TOKEN": lambda: os.getenv("DISCORD_TOKEN", ""),
    "LOG_LEVEL": lambda: os.getenv("LOG_LEVEL", "INFO"),
    "PORT": _runtime.get_port,
    "COMMAND_PREFIX": _runtime.get_command_prefix,
    "MOD_ROLE_ID": _runtime.get_mod_role_id,
    "COHORT_CATEGORY_ID": _runtime.get_cohort_category_id,
    "COHORT_ROLE_PREFIX": _runtime.get_cohort_role_prefix,
    "COHORT_ROLE_COLOUR": _runtime.get_cohort_role_colour,
    "LISTENING_PARTY_CHANNEL_ID": _runtime.get_listening_party_channel_id,
    "WELCOME_CHANNEL_ID": lambda: _snowflake_env("WELCOME_CHANNEL_ID"),
    "WELCOME_MESSAGES_PATH": _runtime.get_welcome_messages_path,
}

_CONFIG: Dict[str, object] = {}


def redact_value(key: str, value: object) -> str:
    """Render ``value`` for logs; anything under a token-ish key is masked."""

    if value is None or value == "":
        return _UNSET
    text = str(value).strip()
    name = key.upper()
    if "TOKEN" in name or name.endswith("_SECRET"):
        scrubbed = sanitize_text(text)
        return scrubbed if scrubbed != text else mask_secret(text)
    return str(sanitize_text(text))


def reload_config() -> Dict[str, object]:
    """Re-read the environment, replace the cache and return a copy of it."""

    global _CONFIG

    _check_required()
    snapshot = {key: loader() for key, loader in _SCHEMA.items()}
    if snapshot["COHORT_CATEGORY_ID"] is None:
        log.warning(
            "Cohort category not configured; set COHORT_CATEGORY_ID to enable !create_cohort."
        )
    _CONFIG = snapshot
    log.info(
        "config loaded",
        extra={"config": {key: redact_value(key, value) for key, value in snapshot.items()}},
    )
    return dict(_CONFIG)


reload_config()


def get_config_snapshot() -> Dict[str, object]:
    return dict(_CONFIG)


def _text(key: str, default: str) -> str:
    value = _CONFIG.get(key)
    return value if isinstance(value, str) and value else default


def _positive_id(key: str) -> Optional[int]:
    value = _CONFIG.get(key)
    return value if isinstance(value, int) and value > 0 else None


def get_env_name(default: str = "dev") -> str:
    return _text("ENV_NAME", default)


def get_bot_name(default: str = "Corgo") -> str:
    return _text("BOT_NAME", default)


def get_bot_version(default: str = "dev") -> str:
    return _text("BOT_VERSION", default)


def get_command_prefix(default: str = "!") -> str:
    return _text("COMMAND_PREFIX", default)


def get_discord_token() -> str:
    return _text("DISCORD_TOKEN", "")


def get_log_level(default: str = "INFO") -> str:
    return _text("LOG_LEVEL", default).strip().upper() or default


def get_port(default: int = 10000) -> int:
    return _positive_id("PORT") or default


def get_mod_role_id() -> int:
    return _positive_id("MOD_ROLE_ID") or _runtime.DEFAULT_MOD_ROLE_ID


def get_cohort_category_id() -> Optional[int]:
    return _positive_id("COHORT_CATEGORY_ID")


def get_cohort_role_prefix() -> str:
    # An empty prefix is allowed, so no truthiness check here.
    value = _CONFIG.get("COHORT_ROLE_PREFIX")
    return value if isinstance(value, str) else _runtime.DEFAULT_COHORT_ROLE_PREFIX


def get_cohort_role_colour() -> int:
    value = _CONFIG.get("COHORT_ROLE_COLOUR")
    return value if isinstance(value, int) else _runtime.DEFAULT_COHORT_ROLE_COLOUR


def get_listening_party_channel_id() -> Optional[int]:
    return _positive_id("LISTENING_PARTY_CHANNEL_ID")


def get_welcome_channel_id() -> Optional[int]:
    return _positive_id("WELCOME_CHANNEL_ID")


def get_welcome_messages_path() -> str:
    return _text("WELCOME_MESSAGES_PATH", _runtime.DEFAULT_WELCOME_MESSAGES_PATH)

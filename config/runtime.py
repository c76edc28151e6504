from __future__ import annotations

# config/runtime.py
import os
from pathlib import Path
from typing import Optional

# Party Corgi moderator role and the #listening-party channel.
DEFAULT_MOD_ROLE_ID = 639531892437286959
DEFAULT_LISTENING_PARTY_CHANNEL_ID = 742445700998103132
DEFAULT_COHORT_ROLE_PREFIX = "cohort: "
DEFAULT_COHORT_ROLE_COLOUR = 16744330
# Absolute path to the templates shipped inside this package.
DEFAULT_WELCOME_MESSAGES_PATH = str(Path(__file__).resolve().parent / "welcome_messages.json")


def get_port(default: int = 10000) -> int:
    """
    Returns the port for the aiohttp health server.
    Hosting platforms provide $PORT; locally we fall back to 10000.
    """
    try:
        return int(os.getenv("PORT", str(default)))
    except ValueError:
        return default


def get_env_name(default: str = "dev") -> str:
    return os.getenv("ENV_NAME", default)


def get_bot_name(default: str = "Corgo") -> str:
    return os.getenv("BOT_NAME", default)


def _coerce_int(value: Optional[str], fallback: int) -> int:
    try:
        if value is None:
            raise TypeError
        return int(value)
    except (TypeError, ValueError):
        return fallback


def get_command_prefix(default: str = "!") -> str:
    value = (os.getenv("COMMAND_PREFIX") or "").strip()
    return value or default


def get_mod_role_id(default: int = DEFAULT_MOD_ROLE_ID) -> int:
    """Role required for moderator-only commands such as ``create_cohort``."""

    return _coerce_int(os.getenv("MOD_ROLE_ID"), default)


def get_cohort_category_id() -> Optional[int]:
    """
    Category that receives new cohort channels.

    COHORT_CATEGORY_ID wins; the legacy A_CLUB_CAT_ID name is still honoured.
    You can grab the value from "Copy ID" on the category.
    """

    for key in ("COHORT_CATEGORY_ID", "A_CLUB_CAT_ID"):
        raw = os.getenv(key)
        if raw is None or not raw.strip():
            continue
        value = _coerce_int(raw.strip(), 0)
        return value if value > 0 else None
    return None


def get_cohort_role_prefix(default: str = DEFAULT_COHORT_ROLE_PREFIX) -> str:
    value = os.getenv("COHORT_ROLE_PREFIX")
    return default if value is None else value


def get_cohort_role_colour(default: int = DEFAULT_COHORT_ROLE_COLOUR) -> int:
    raw = (os.getenv("COHORT_ROLE_COLOUR") or "").strip()
    if not raw:
        return default
    # Accepts 16744330, 0xFF7F8A or #FF7F8A.
    try:
        if raw.startswith("#"):
            return int(raw[1:], 16)
        return int(raw, 0)
    except ValueError:
        return default


def get_listening_party_channel_id(default: int = DEFAULT_LISTENING_PARTY_CHANNEL_ID) -> int:
    return _coerce_int(os.getenv("LISTENING_PARTY_CHANNEL_ID"), default)


def get_welcome_messages_path(default: str = DEFAULT_WELCOME_MESSAGES_PATH) -> str:
    value = (os.getenv("WELCOME_MESSAGES_PATH") or "").strip()
    return value or default

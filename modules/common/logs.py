"""One-line lifecycle messages meant for people tailing the bot's output."""

import logging

_pylog = logging.getLogger("corgo")

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


class _HumanLog:
    """``log.human("info", "cohort ready", channel="demo")`` → ``cohort ready • channel=demo``."""

    def human(self, level: str, message: str, **fields):
        parts = [message]
        parts.extend(f"{key}={value}" for key, value in fields.items() if value is not None)
        _pylog.log(_LEVELS.get(level.lower(), logging.INFO), " • ".join(parts), extra=fields)


log = _HumanLog()


def guild_label(guild) -> str:
    if guild is None:
        return "dm"
    return getattr(guild, "name", None) or str(getattr(guild, "id", "dm"))


def user_label(guild, user_id) -> str:
    return f"{guild_label(guild)}:{user_id}"

"""Randomised welcome lines posted when a member joins."""

from __future__ import annotations

import json
import logging
import random
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

__all__ = [
    "DEFAULT_WELCOME",
    "WelcomeMessage",
    "load_welcome_messages",
    "pick_welcome_message",
]

log = logging.getLogger("corgo.general.welcome")


@dataclass(frozen=True, slots=True)
class WelcomeMessage:
    before_mention: str
    after_mention: str

    def render(self, mention: str) -> str:
        return f"{self.before_mention}{mention}{self.after_mention}"


DEFAULT_WELCOME = WelcomeMessage(before_mention="Welcome to the server, ", after_mention=".")


def load_welcome_messages(path: str | Path) -> list[WelcomeMessage]:
    """Read ``[{"before_mention": ..., "after_mention": ...}, ...]`` from ``path``.

    Missing or malformed files yield an empty list; entries lacking either key
    are skipped.
    """

    target = Path(path)
    try:
        with target.open("r", encoding="utf-8") as handle:
            payload = json.load(handle)
    except FileNotFoundError:
        log.error("welcome messages file not found", extra={"path": str(target)})
        return []
    except (OSError, ValueError):
        log.exception("welcome messages file unreadable", extra={"path": str(target)})
        return []

    if not isinstance(payload, list):
        log.error("welcome messages file must hold a list", extra={"path": str(target)})
        return []

    messages: list[WelcomeMessage] = []
    for entry in payload:
        if not isinstance(entry, dict):
            continue
        before = entry.get("before_mention")
        after = entry.get("after_mention")
        if not isinstance(before, str) or not isinstance(after, str):
            continue
        messages.append(WelcomeMessage(before_mention=before, after_mention=after))
    return messages


def pick_welcome_message(
    messages: Sequence[WelcomeMessage], rng: random.Random | None = None
) -> WelcomeMessage:
    if not messages:
        log.error("no welcome message available; using default")
        return DEFAULT_WELCOME
    chooser = rng or random
    return chooser.choice(list(messages))

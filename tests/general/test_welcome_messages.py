from __future__ import annotations

import json
import random
from pathlib import Path

from modules.general.welcome import (
    DEFAULT_WELCOME,
    WelcomeMessage,
    load_welcome_messages,
    pick_welcome_message,
)

PROJECT_ROOT = Path(__file__).resolve().parents[2]


def test_bundled_messages_load():
    messages = load_welcome_messages(PROJECT_ROOT / "config" / "welcome_messages.json")

    assert messages
    assert all(isinstance(message, WelcomeMessage) for message in messages)


def test_render_wraps_mention():
    assert WelcomeMessage("Hey ", ", glad you're here!").render("<@1>") == (
        "Hey <@1>, glad you're here!"
    )


def test_invalid_entries_are_skipped(tmp_path):
    target = tmp_path / "welcome.json"
    target.write_text(
        json.dumps(
            [
                {"before_mention": "Hi ", "after_mention": "!"},
                {"before_mention": "missing after"},
                "not an object",
                {"before_mention": 1, "after_mention": "."},
            ]
        ),
        encoding="utf-8",
    )

    assert load_welcome_messages(target) == [WelcomeMessage("Hi ", "!")]


def test_missing_or_malformed_files_yield_empty(tmp_path):
    assert load_welcome_messages(tmp_path / "absent.json") == []

    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    assert load_welcome_messages(broken) == []

    wrong_shape = tmp_path / "object.json"
    wrong_shape.write_text(json.dumps({"before_mention": "x"}), encoding="utf-8")
    assert load_welcome_messages(wrong_shape) == []


def test_pick_falls_back_to_default():
    assert pick_welcome_message([]) is DEFAULT_WELCOME


def test_pick_uses_supplied_rng():
    messages = [WelcomeMessage(str(index), "") for index in range(5)]

    first = pick_welcome_message(messages, random.Random(7))
    second = pick_welcome_message(messages, random.Random(7))

    assert first == second
    assert first in messages

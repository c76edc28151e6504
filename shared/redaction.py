"""Scrub bot tokens, webhook urls and ``key=value`` secrets out of text before it is logged."""

from __future__ import annotations

import hashlib
import re
from typing import Any

__all__ = ["mask_secret", "sanitize_text"]

_WEBHOOK = re.compile(r"https://(?:ptb\.|canary\.)?discord(?:app)?\.com/api/webhooks/\d+/\S+", re.I)
# Three dot-separated base64url segments: user id, timestamp, hmac.
_BOT_TOKEN = re.compile(r"[\w-]{24,}\.[\w-]{6}\.[\w-]{27,}")
_ASSIGNED = re.compile(r"(?P<key>\b(?:token|secret|password|api[_-]?key)\s*[=:]\s*)(?P<value>[^\s,;]+)", re.I)
# Long opaque strings mixing letters and digits.
_OPAQUE = re.compile(r"(?<![\w-])(?=[\w-]*[A-Za-z])(?=[\w-]*\d)[\w-]{32,}(?![\w-])")


def mask_secret(text: str) -> str:
    """``***`` plus a short stable digest, so equal secrets stay recognisable in logs."""

    digest = hashlib.sha1(text.encode("utf-8", "ignore")).hexdigest()
    return f"***{digest[:4]}"


def sanitize_text(value: Any) -> Any:
    if value is None:
        return None
    text = str(value)
    for pattern in (_WEBHOOK, _BOT_TOKEN):
        text = pattern.sub(lambda match: mask_secret(match.group(0)), text)
    text = _ASSIGNED.sub(lambda match: match.group("key") + mask_secret(match.group("value")), text)
    return _OPAQUE.sub(lambda match: mask_secret(match.group(0)), text)

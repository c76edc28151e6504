"""Which parts of the process are up, as seen by ``/ready`` and ``/health``."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Dict

__all__ = [
    "REQUIRED",
    "components_snapshot",
    "overall_ready",
    "required_components",
    "reset_components",
    "set_component",
]

# "runtime" flips when the web app is built, "discord" on ready/disconnect.
REQUIRED = frozenset({"runtime", "discord"})


@dataclass(frozen=True)
class _State:
    ok: bool
    ts: float

    def as_dict(self) -> dict[str, float | bool]:
        return {"ok": self.ok, "ts": self.ts}


_DOWN = _State(ok=False, ts=0.0)
_states: Dict[str, _State] = {}


def required_components() -> frozenset[str]:
    return REQUIRED


def set_component(name: str, ok: bool) -> None:
    _states[name] = _State(ok=bool(ok), ts=time.time())


def reset_components() -> None:
    _states.clear()


def components_snapshot(include_required: bool = True) -> dict[str, dict[str, float | bool]]:
    """Reported components; with ``include_required`` unreported required ones appear as down."""

    names = set(_states)
    if include_required:
        names |= REQUIRED
    return {name: _states.get(name, _DOWN).as_dict() for name in sorted(names)}


def overall_ready() -> bool:
    return all(_states.get(name, _DOWN).ok for name in REQUIRED)

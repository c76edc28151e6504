"""Permission overwrites applied to freshly provisioned cohort channels."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Optional

import discord

__all__ = [
    "COHORT_MEMBER_ALLOW",
    "EVERYONE_DENY",
    "OverwriteRule",
    "build_cohort_overwrites",
    "serialize_rules",
    "to_overwrite_mapping",
]

# Read access is inherited from the category, so only messaging is touched.
COHORT_MEMBER_ALLOW = discord.Permissions(send_messages=True)
EVERYONE_DENY = discord.Permissions(send_messages=True, send_tts_messages=True)


@dataclass(frozen=True, slots=True)
class OverwriteRule:
    """Allow/deny bitsets for one role on one channel."""

    subject_id: int
    allow: discord.Permissions
    deny: discord.Permissions

    def __post_init__(self) -> None:
        overlap = self.allow.value & self.deny.value
        if overlap:
            raise ValueError(
                f"overwrite for {self.subject_id} both allows and denies {overlap:#x}"
            )

    def to_overwrite(self) -> discord.PermissionOverwrite:
        return discord.PermissionOverwrite.from_pair(self.allow, self.deny)


def build_cohort_overwrites(role_id: int, everyone_id: int) -> list[OverwriteRule]:
    """Mute everybody except holders of ``role_id``.

    The everyone rule comes first and the cohort role rule last. Rules are
    applied in order, so if both identifiers are the same the cohort role
    rule is the one left standing.
    """

    return [
        OverwriteRule(
            subject_id=int(everyone_id),
            allow=discord.Permissions.none(),
            deny=discord.Permissions(EVERYONE_DENY.value),
        ),
        OverwriteRule(
            subject_id=int(role_id),
            allow=discord.Permissions(COHORT_MEMBER_ALLOW.value),
            deny=discord.Permissions.none(),
        ),
    ]


def to_overwrite_mapping(
    rules: Iterable[OverwriteRule],
    resolve: Callable[[int], Optional[discord.abc.Snowflake]],
) -> Dict[discord.abc.Snowflake, discord.PermissionOverwrite]:
    """Convert rules into the mapping ``create_text_channel`` expects.

    ``resolve`` maps a subject id to the role object used as key. discord.py
    only sends a role overwrite for :class:`discord.Role` keys, so an id that
    cannot be resolved raises :class:`LookupError` instead of falling back to
    a bare snowflake. A later rule for the same subject replaces an earlier
    one.
    """

    by_subject: Dict[int, OverwriteRule] = {}
    for rule in rules:
        by_subject.pop(rule.subject_id, None)
        by_subject[rule.subject_id] = rule

    mapping: Dict[discord.abc.Snowflake, discord.PermissionOverwrite] = {}
    for subject_id, rule in by_subject.items():
        target = resolve(subject_id)
        if target is None:
            raise LookupError(f"no role object for overwrite subject {subject_id}")
        mapping[target] = rule.to_overwrite()
    return mapping


def serialize_rules(rules: Iterable[OverwriteRule]) -> str:
    """Render rules as a stable one-liner for log fields."""

    parts: list[str] = []
    for rule in rules:
        flags: list[str] = []
        for name, value in rule.allow:
            if value:
                flags.append(f"+{name}")
        for name, value in rule.deny:
            if value:
                flags.append(f"-{name}")
        parts.append(f"{rule.subject_id}:{','.join(sorted(flags)) or 'empty'}")
    return "; ".join(parts) if parts else "empty"

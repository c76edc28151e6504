"""Channel provisioning for cohorts."""

from __future__ import annotations

import logging
from typing import Iterable, Optional

import discord

from .errors import ChannelCreationFailed, EveryoneRoleMissing
from .permissions import (
    OverwriteRule,
    build_cohort_overwrites,
    serialize_rules,
    to_overwrite_mapping,
)

__all__ = [
    "EVERYONE_ROLE_NAME",
    "find_everyone_role",
    "provision_channel",
    "provision_cohort_channel",
]

log = logging.getLogger("corgo.cohorts.channels")

EVERYONE_ROLE_NAME = "@everyone"


def find_everyone_role(guild: discord.Guild) -> discord.Role:
    """Return the guild's default role or raise :class:`EveryoneRoleMissing`."""

    role = getattr(guild, "default_role", None)
    if role is not None:
        return role
    role = discord.utils.get(getattr(guild, "roles", None) or [], name=EVERYONE_ROLE_NAME)
    if role is not None:
        return role
    raise EveryoneRoleMissing(getattr(guild, "id", None))


def _resolve_category(guild: discord.Guild, category_id: int) -> discord.abc.Snowflake:
    channel = guild.get_channel(category_id)
    if channel is not None:
        return channel
    # Not cached yet; the API only needs the id.
    return discord.Object(id=category_id, type=discord.CategoryChannel)


async def provision_channel(
    guild: discord.Guild,
    name: str,
    category_id: int,
    overwrites: Iterable[OverwriteRule],
    *,
    roles: Iterable[discord.Role] = (),
    reason: Optional[str] = None,
) -> discord.TextChannel:
    """Create a text channel under ``category_id`` with ``overwrites``.

    Overwrite subjects are looked up in ``roles`` first and then in the
    guild cache. A role created moments ago is usually missing from the
    cache, so callers pass the role objects they already hold. Overwrites
    travel with the create call. Names are not checked against existing
    channels.
    """

    rules = list(overwrites)
    known = {role.id: role for role in roles}
    try:
        mapping = to_overwrite_mapping(
            rules, lambda subject_id: known.get(subject_id) or guild.get_role(subject_id)
        )
    except LookupError as exc:
        raise ChannelCreationFailed(name) from exc
    category = _resolve_category(guild, category_id)
    log.info(
        "creating cohort channel",
        extra={
            "channel_name": name,
            "category_id": category_id,
            "overwrites": serialize_rules(rules),
        },
    )
    try:
        channel = await guild.create_text_channel(
            name,
            category=category,
            overwrites=mapping,
            reason=reason,
        )
    except discord.HTTPException as exc:
        raise ChannelCreationFailed(name) from exc
    log.info("cohort channel created", extra={"channel_id": channel.id, "channel_name": name})
    return channel


async def provision_cohort_channel(
    guild: discord.Guild,
    name: str,
    category_id: int,
    role: discord.Role,
    *,
    reason: Optional[str] = None,
) -> discord.TextChannel:
    """Create the cohort channel where only ``role`` may talk."""

    everyone = find_everyone_role(guild)
    rules = build_cohort_overwrites(role.id, everyone.id)
    return await provision_channel(
        guild, name, category_id, rules, roles=(everyone, role), reason=reason
    )

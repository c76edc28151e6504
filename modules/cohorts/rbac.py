"""Role-membership gate for moderator commands."""

from __future__ import annotations

import logging
from typing import AbstractSet, Optional

import discord
from discord.ext import commands

from shared.config import get_mod_role_id

__all__ = ["authorize", "member_role_ids", "moderator_only"]

log = logging.getLogger("corgo.cohorts.rbac")

DENIED_REPLY = "Moderators only."


def authorize(member_role_ids: Optional[AbstractSet[int]], required_role_id: int) -> bool:
    """Allow iff the membership set holds ``required_role_id``.

    ``None`` means the member record could not be resolved; that denies.
    """

    if member_role_ids is None:
        return False
    return int(required_role_id) in member_role_ids


def member_role_ids(
    author: discord.abc.User | None, guild: discord.Guild | None = None
) -> Optional[frozenset[int]]:
    """Role ids held by ``author`` in ``guild``, or ``None`` when unknown."""

    if author is None:
        return None
    roles = getattr(author, "roles", None)
    if roles is None and guild is not None:
        member = guild.get_member(author.id)
        roles = getattr(member, "roles", None)
    if roles is None:
        return None
    return frozenset(int(role.id) for role in roles)


def _required_role_id(ctx: commands.Context) -> int:
    settings = getattr(getattr(ctx, "cog", None), "config", None)
    role_id = getattr(settings, "mod_role_id", None)
    return int(role_id) if role_id else get_mod_role_id()


def moderator_only():
    """Allow members holding the moderator role; reply and refuse otherwise."""

    async def predicate(ctx: commands.Context) -> bool:
        required = _required_role_id(ctx)
        roles = member_role_ids(getattr(ctx, "author", None), getattr(ctx, "guild", None))
        if authorize(roles, required):
            return True
        # Help rendering runs checks to grey out commands and must stay quiet.
        if getattr(ctx, "_corgo_suppress_denials", False):
            raise commands.CheckFailure(DENIED_REPLY)
        log.info(
            "moderator check denied",
            extra={
                "command": getattr(getattr(ctx, "command", None), "qualified_name", None),
                "user_id": getattr(getattr(ctx, "author", None), "id", None),
                "member_known": roles is not None,
            },
        )
        try:
            await ctx.reply(DENIED_REPLY, mention_author=False)
        except Exception:
            log.debug("denial reply not delivered", exc_info=True)
        raise commands.CheckFailure(DENIED_REPLY)

    return commands.check(predicate)

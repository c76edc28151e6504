"""Find-or-create for the role backing a cohort."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

import discord

from .errors import RoleCreationFailed

__all__ = ["RoleResolution", "find_role_by_name", "resolve_role"]

log = logging.getLogger("corgo.cohorts.roles")

Notify = Callable[[str], Awaitable[object]]


@dataclass(frozen=True, slots=True)
class RoleResolution:
    role: discord.Role
    created: bool


def find_role_by_name(guild: discord.Guild, name: str) -> Optional[discord.Role]:
    """Exact, case-sensitive lookup in the guild's role list."""

    return discord.utils.get(getattr(guild, "roles", None) or [], name=name)


async def _send_notice(notify: Optional[Notify], content: str) -> None:
    if notify is None:
        return
    try:
        await notify(content)
    except Exception:
        log.warning("role notice not delivered", exc_info=True)


async def resolve_role(
    guild: discord.Guild,
    name: str,
    colour: int,
    *,
    notify: Optional[Notify] = None,
    reason: Optional[str] = None,
) -> RoleResolution:
    """Return the role called ``name``, creating it when absent.

    An existing role is returned untouched and ``notify`` receives a short
    notice. Creation is attempted once; platform errors surface as
    :class:`RoleCreationFailed` with the original exception as its cause.
    """

    existing = find_role_by_name(guild, name)
    if existing is not None:
        log.info(
            "cohort role reused",
            extra={"role_exists": True, "role_id": existing.id, "role_name": name},
        )
        await _send_notice(notify, f"{existing.name} Role already exists!")
        return RoleResolution(role=existing, created=False)

    log.info("creating cohort role", extra={"role_exists": False, "role_name": name})
    try:
        role = await guild.create_role(
            name=name,
            colour=discord.Colour(colour),
            reason=reason,
        )
    except discord.HTTPException as exc:
        raise RoleCreationFailed(name) from exc
    log.info("cohort role created", extra={"role_id": role.id, "role_name": name})
    return RoleResolution(role=role, created=True)

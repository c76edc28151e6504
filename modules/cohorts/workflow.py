"""Cohort provisioning: one role plus one channel where only that role talks.

Naming convention: for an input ``art-club`` the role is called
``<role_prefix>art-club`` (``cohort: art-club`` by default) and the channel
is called ``art-club``. The shared suffix is what ties the two together.

The workflow runs strictly in order and makes exactly one role attempt and
one channel attempt. Nothing is rolled back: a role created before a failed
channel create stays in the guild.
"""

from __future__ import annotations

import enum
import logging
import time
from dataclasses import dataclass, field
from typing import Optional

import discord
from discord.ext import commands

from config.runtime import DEFAULT_COHORT_ROLE_COLOUR, DEFAULT_COHORT_ROLE_PREFIX
from shared import config as shared_config
from shared.redaction import sanitize_text

from .channels import provision_cohort_channel
from .errors import CategoryNotConfigured, CohortError, MissingArgument
from .roles import resolve_role

__all__ = [
    "CohortConfig",
    "CohortOutcome",
    "CohortState",
    "CohortWorkflow",
    "derive_names",
]

log = logging.getLogger("corgo.cohorts.workflow")

ACK_MESSAGE = "Spinning up cohort..."
FAILURE_MESSAGE = "Failed to create cohort"
USAGE_MESSAGE = "Missing cohort name. Usage: `create_cohort <name>`"
NOT_CONFIGURED_MESSAGE = "Cohort category is not configured; ask an admin to set COHORT_CATEGORY_ID."


class CohortState(enum.Enum):
    START = "start"
    ROLE_RESOLVED = "role_resolved"
    CHANNEL_ATTEMPTED = "channel_attempted"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class CohortConfig:
    """Startup configuration handed to :class:`CohortWorkflow`."""

    category_id: Optional[int]
    mod_role_id: int
    role_prefix: str = DEFAULT_COHORT_ROLE_PREFIX
    role_colour: int = DEFAULT_COHORT_ROLE_COLOUR

    @classmethod
    def from_env(cls) -> "CohortConfig":
        return cls(
            category_id=shared_config.get_cohort_category_id(),
            mod_role_id=shared_config.get_mod_role_id(),
            role_prefix=shared_config.get_cohort_role_prefix(),
            role_colour=shared_config.get_cohort_role_colour(),
        )


@dataclass(slots=True)
class CohortOutcome:
    state: CohortState = CohortState.START
    role_name: Optional[str] = None
    channel_name: Optional[str] = None
    role: Optional[discord.Role] = None
    role_created: bool = False
    channel: Optional[discord.TextChannel] = None
    error: Optional[CohortError] = None
    transitions: list[CohortState] = field(default_factory=lambda: [CohortState.START])

    @property
    def succeeded(self) -> bool:
        return self.state is CohortState.SUCCEEDED

    def advance(self, state: CohortState) -> None:
        self.state = state
        self.transitions.append(state)


def derive_names(raw: str, prefix: str = DEFAULT_COHORT_ROLE_PREFIX) -> tuple[str, str]:
    """Return ``(role_name, channel_name)`` for a cohort input."""

    value = raw.strip()
    return f"{prefix}{value}", value


def _success_message(channel: discord.abc.GuildChannel, role: discord.Role) -> str:
    return (
        f"Successfully created cohort channel: {channel.mention}! "
        f"Feel free to add users with the {role.mention} role."
    )


class CohortWorkflow:
    """Drive role resolution and channel provisioning for one request."""

    def __init__(self, config: CohortConfig) -> None:
        self.config = config

    async def _best_effort_send(self, ctx: commands.Context, content: str) -> None:
        try:
            await ctx.send(content)
        except Exception:
            log.warning("cohort notice not delivered", exc_info=True)

    async def _final_reply(self, ctx: commands.Context, content: str) -> None:
        try:
            await ctx.reply(content, mention_author=False)
        except Exception:
            log.exception("cohort outcome reply not delivered")

    async def run(self, ctx: commands.Context, raw_name: Optional[str]) -> CohortOutcome:
        outcome = CohortOutcome()
        started = time.perf_counter()
        try:
            await self._provision(ctx, raw_name, outcome)
        except CohortError as exc:
            outcome.error = exc
            outcome.advance(CohortState.FAILED)
        except Exception:
            log.exception("cohort workflow crashed", extra={"channel_name": outcome.channel_name})
            outcome.advance(CohortState.FAILED)

        elapsed_ms = int((time.perf_counter() - started) * 1000)
        if outcome.succeeded:
            await self._final_reply(ctx, _success_message(outcome.channel, outcome.role))
            log.info(
                "cohort provisioned",
                extra={
                    "role_id": outcome.role.id,
                    "role_created": outcome.role_created,
                    "channel_id": outcome.channel.id,
                    "channel_name": outcome.channel_name,
                    "ms": elapsed_ms,
                },
            )
            return outcome

        await self._final_reply(ctx, self._failure_message(outcome.error))
        if outcome.error is not None:
            cause = outcome.error.cause
            log.warning(
                "cohort provisioning failed",
                extra={
                    "error": type(outcome.error).__name__,
                    "detail": sanitize_text(str(outcome.error)),
                    "cause": sanitize_text(repr(cause)) if cause is not None else None,
                    "role_created": outcome.role_created,
                    "ms": elapsed_ms,
                },
            )
        return outcome

    def _failure_message(self, error: Optional[CohortError]) -> str:
        if isinstance(error, MissingArgument):
            return USAGE_MESSAGE
        if isinstance(error, CategoryNotConfigured):
            return NOT_CONFIGURED_MESSAGE
        return FAILURE_MESSAGE

    async def _provision(
        self, ctx: commands.Context, raw_name: Optional[str], outcome: CohortOutcome
    ) -> None:
        if raw_name is None or not raw_name.strip():
            raise MissingArgument("a cohort name is required")
        category_id = self.config.category_id
        if not category_id:
            log.error("cohort category not configured; set COHORT_CATEGORY_ID")
            raise CategoryNotConfigured("cohort category is not configured")

        role_name, channel_name = derive_names(raw_name, self.config.role_prefix)
        outcome.role_name = role_name
        outcome.channel_name = channel_name
        guild = ctx.guild
        author = getattr(ctx, "author", None)
        reason = f"create_cohort by {getattr(author, 'id', 'unknown')}"

        await self._best_effort_send(ctx, ACK_MESSAGE)

        resolution = await resolve_role(
            guild,
            role_name,
            self.config.role_colour,
            notify=lambda content: ctx.send(content),
            reason=reason,
        )
        outcome.role = resolution.role
        outcome.role_created = resolution.created
        outcome.advance(CohortState.ROLE_RESOLVED)

        outcome.advance(CohortState.CHANNEL_ATTEMPTED)
        outcome.channel = await provision_cohort_channel(
            guild,
            channel_name,
            category_id,
            resolution.role,
            reason=reason,
        )
        outcome.advance(CohortState.SUCCEEDED)

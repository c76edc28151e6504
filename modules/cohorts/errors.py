"""Failure taxonomy for the cohort provisioning workflow."""

from __future__ import annotations

__all__ = [
    "CohortError",
    "MissingArgument",
    "RoleCreationFailed",
    "ChannelCreationFailed",
    "EveryoneRoleMissing",
    "CategoryNotConfigured",
]


class CohortError(Exception):
    """Base class for every failure the cohort workflow reports to chat."""

    @property
    def cause(self) -> BaseException | None:
        """Underlying platform error, when one triggered this failure."""

        return self.__cause__


class MissingArgument(CohortError):
    """The command was invoked without a cohort name."""


class RoleCreationFailed(CohortError):
    """The platform rejected the role create call."""

    def __init__(self, role_name: str) -> None:
        super().__init__(f"failed to create role {role_name!r}")
        self.role_name = role_name


class ChannelCreationFailed(CohortError):
    """The platform rejected the channel create call."""

    def __init__(self, channel_name: str) -> None:
        super().__init__(f"failed to create channel {channel_name!r}")
        self.channel_name = channel_name


class EveryoneRoleMissing(CohortError):
    """The guild has no @everyone role, which the platform guarantees."""

    def __init__(self, guild_id: int | None) -> None:
        super().__init__(f"guild {guild_id} has no @everyone role")
        self.guild_id = guild_id


class CategoryNotConfigured(CohortError):
    """No cohort category id was supplied at startup."""

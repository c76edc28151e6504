"""Moderator command surface for cohort provisioning."""

from __future__ import annotations

from typing import Optional

from discord.ext import commands

from .rbac import moderator_only
from .workflow import CohortConfig, CohortOutcome, CohortWorkflow


class Cohorts(commands.Cog, name="Mod"):
    """Moderator tools."""

    def __init__(self, bot: commands.Bot, config: Optional[CohortConfig] = None) -> None:
        self.bot = bot
        self.config = config or CohortConfig.from_env()
        self.workflow = CohortWorkflow(self.config)

    @commands.command(name="create_cohort", usage="<name>")
    @commands.guild_only()
    @moderator_only()
    async def create_cohort(
        self, ctx: commands.Context, name: Optional[str] = None
    ) -> CohortOutcome:
        """Provision a channel only members of a matching role can talk in.

        Creates (or reuses) the role `cohort: <name>` and a `<name>` channel in
        the cohort category that everyone else can read but not post in.
        """

        return await self.workflow.run(ctx, name)

"""Cohort provisioning extension."""

import logging

from discord.ext import commands

from .cog import Cohorts

__all__ = ["Cohorts", "setup"]


async def setup(bot: commands.Bot) -> None:
    """Load the Cohorts cog."""

    await bot.add_cog(Cohorts(bot))
    logging.getLogger("corgo.cohorts.cog").info("Cohorts cog loaded")

"""General commands extension."""

import logging

from discord.ext import commands

from .cog import General

__all__ = ["General", "setup"]


async def setup(bot: commands.Bot) -> None:
    """Load the General cog."""

    await bot.add_cog(General(bot))
    logging.getLogger("corgo.general.cog").info("General cog loaded")

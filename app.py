"""Corgo entry point: build the bot, wire gateway health and command errors, run."""

from __future__ import annotations

import asyncio
import logging

import discord
from discord.ext import commands

from shared import config as settings
from shared import health as healthmod
from modules.common.logs import user_label
from modules.common.runtime import Runtime

logging.basicConfig(
    level=settings.get_log_level(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
log = logging.getLogger("corgo.app")


def build_bot() -> commands.Bot:
    intents = discord.Intents.default()
    # Prefix commands need message text; welcomes need join events.
    intents.message_content = True
    intents.members = True
    bot = commands.Bot(
        command_prefix=commands.when_mentioned_or(settings.get_command_prefix()),
        intents=intents,
    )
    bot.remove_command("help")
    return bot


bot = build_bot()
runtime = Runtime(bot)


@bot.event
async def on_ready():
    healthmod.set_component("discord", True)
    log.info(
        "connected as %s | env=%s | prefix=%s | mod_role=%s | cohort_category=%s",
        bot.user,
        settings.get_env_name(),
        settings.get_command_prefix(),
        settings.get_mod_role_id(),
        settings.get_cohort_category_id(),
    )


@bot.event
async def on_resumed():
    healthmod.set_component("discord", True)


@bot.event
async def on_disconnect():
    healthmod.set_component("discord", False)


@bot.event
async def on_command_error(ctx: commands.Context, error: commands.CommandError):
    who = user_label(ctx.guild, getattr(ctx.author, "id", None))
    name = getattr(ctx.command, "qualified_name", None)

    # Unknown commands and refused checks need no reply of ours.
    if isinstance(error, (commands.CommandNotFound, commands.CheckFailure)):
        log.debug("command refused: cmd=%s user=%s err=%r", name, who, error)
        return

    if isinstance(error, commands.UserInputError):
        try:
            await ctx.reply(f"⚠️ {error}", mention_author=False)
        except discord.HTTPException:
            log.warning("input error reply not delivered: cmd=%s user=%s", name, who)
        return

    cause = getattr(error, "original", error)
    log.error(
        "command crashed: cmd=%s user=%s",
        name,
        who,
        exc_info=(type(cause), cause, cause.__traceback__),
    )


async def main() -> None:
    token = settings.get_discord_token()
    if not token:
        raise RuntimeError("DISCORD_TOKEN not set")
    try:
        await runtime.start(token)
    finally:
        await runtime.close()


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()

from __future__ import annotations

import asyncio

import discord
from discord.ext import commands

import modules.cohorts as cohorts_module
from modules.cohorts.cog import Cohorts
from modules.cohorts.workflow import CohortConfig, CohortState


def _bot() -> commands.Bot:
    return commands.Bot(command_prefix="!", intents=discord.Intents.none())


def test_setup_registers_create_cohort():
    async def runner():
        bot = _bot()
        await cohorts_module.setup(bot)
        return bot

    bot = asyncio.run(runner())

    command = bot.get_command("create_cohort")
    assert command is not None
    assert command.cog_name == "Mod"
    assert len(command.checks) == 2


def test_config_defaults_come_from_environment():
    cog = Cohorts(_bot())

    assert cog.config.category_id == 4242
    assert cog.config.mod_role_id == 639531892437286959
    assert cog.config.role_prefix == "cohort: "


def test_command_callback_runs_workflow(fake_discord_env):
    guild = fake_discord_env.Guild()
    guild.add_category(10)
    ctx = fake_discord_env.Context(guild, fake_discord_env.Member(5))
    cog = Cohorts(_bot(), CohortConfig(category_id=10, mod_role_id=1))

    outcome = asyncio.run(Cohorts.create_cohort.callback(cog, ctx, "demo"))

    assert outcome.state is CohortState.SUCCEEDED
    assert guild.call_names() == ["create_role", "create_text_channel"]

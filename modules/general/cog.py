"""Everyday commands and listeners: ping, pin, help, welcome and listening-party pins."""

from __future__ import annotations

import logging
from typing import Optional

import discord
from discord.ext import commands

from shared import config as shared_config
from shared.help import (
    HelpEntry,
    HelpSection,
    build_command_embed,
    build_overview_embed,
    not_found_message,
)

from .welcome import WelcomeMessage, load_welcome_messages, pick_welcome_message

log = logging.getLogger("corgo.general.cog")

# Message activity type for Spotify "listen along" invites.
LISTEN_ACTIVITY_TYPE = 3


def is_listen_along(message: discord.Message) -> bool:
    activity = getattr(message, "activity", None)
    if not isinstance(activity, dict):
        return False
    return activity.get("type") == LISTEN_ACTIVITY_TYPE


class General(commands.Cog):
    """General purpose commands."""

    def __init__(
        self,
        bot: commands.Bot,
        *,
        listening_party_channel_id: Optional[int] = None,
        welcome_channel_id: Optional[int] = None,
        welcome_messages: Optional[list[WelcomeMessage]] = None,
    ) -> None:
        self.bot = bot
        self.listening_party_channel_id = (
            listening_party_channel_id
            if listening_party_channel_id is not None
            else shared_config.get_listening_party_channel_id()
        )
        self.welcome_channel_id = (
            welcome_channel_id
            if welcome_channel_id is not None
            else shared_config.get_welcome_channel_id()
        )
        if welcome_messages is None:
            welcome_messages = load_welcome_messages(shared_config.get_welcome_messages_path())
        self.welcome_messages = welcome_messages

    @commands.command(name="ping")
    async def ping(self, ctx: commands.Context) -> None:
        """Check that the bot is awake."""

        try:
            await ctx.send("Pong!")
        except discord.HTTPException:
            log.warning("ping reply not delivered", exc_info=True)

    @commands.command(name="pin", usage="<message_id>")
    async def pin(self, ctx: commands.Context, message_id: Optional[str] = None) -> None:
        """Pin a message from this channel by its id."""

        try:
            target_id = int((message_id or "").strip())
        except ValueError:
            await ctx.reply("Usage: `pin <message_id>`", mention_author=False)
            return

        try:
            message = await ctx.channel.fetch_message(target_id)
            await message.pin()
        except discord.HTTPException:
            log.warning(
                "pin failed",
                exc_info=True,
                extra={"message_id": target_id, "channel_id": getattr(ctx.channel, "id", None)},
            )

    @commands.command(name="help", usage="[command]")
    async def help_command(self, ctx: commands.Context, *, query: Optional[str] = None) -> None:
        """Show the command list, or details for one command."""

        prefix = getattr(ctx, "clean_prefix", None) or shared_config.get_command_prefix()
        version = shared_config.get_bot_version()

        if query and query.strip():
            name = query.strip().removeprefix(prefix)
            command = self.bot.get_command(name)
            if command is None or command.hidden:
                names = [cmd.qualified_name for cmd in self.bot.walk_commands() if not cmd.hidden]
                await ctx.send(not_found_message(name, names))
                return
            entry = await self._describe(ctx, command)
            embed = build_command_embed(prefix=prefix, entry=entry, bot_version=version)
            await ctx.send(embed=embed)
            return

        sections: list[HelpSection] = []
        grouped: dict[str, list[commands.Command]] = {}
        for command in self.bot.commands:
            if command.hidden:
                continue
            label = command.cog_name or "Other"
            grouped.setdefault(label, []).append(command)

        for label in sorted(grouped):
            entries = [
                await self._describe(ctx, command)
                for command in sorted(grouped[label], key=lambda cmd: cmd.qualified_name)
            ]
            cog = self.bot.get_cog(label)
            blurb = (cog.description or "") if cog is not None else ""
            sections.append(HelpSection(label=label, entries=entries, blurb=blurb))

        embed = build_overview_embed(
            bot_name=shared_config.get_bot_name(),
            bot_version=version,
            prefix=prefix,
            sections=sections,
        )
        await ctx.send(embed=embed)

    async def _describe(self, ctx: commands.Context, command: commands.Command) -> HelpEntry:
        setattr(ctx, "_corgo_suppress_denials", True)
        try:
            available = await command.can_run(ctx)
        except commands.CommandError:
            available = False
        finally:
            setattr(ctx, "_corgo_suppress_denials", False)
        return HelpEntry(
            name=command.qualified_name,
            usage=command.usage or command.signature,
            summary=command.short_doc,
            description=command.help or "",
            aliases=tuple(command.aliases),
            available=available,
        )

    @commands.Cog.listener()
    async def on_message(self, message: discord.Message) -> None:
        author = getattr(message, "author", None)
        if getattr(author, "bot", False):
            return
        channel_id = getattr(message.channel, "id", None)
        if not self.listening_party_channel_id or channel_id != self.listening_party_channel_id:
            return
        if not is_listen_along(message):
            return
        try:
            await message.pin()
        except discord.HTTPException:
            log.warning("listening party pin failed", exc_info=True, extra={"message_id": message.id})
        else:
            log.info("listening party invite pinned", extra={"message_id": message.id})

    @commands.Cog.listener()
    async def on_member_join(self, member: discord.Member) -> None:
        if getattr(member, "bot", False):
            return
        guild = member.guild
        channel = None
        if self.welcome_channel_id:
            channel = guild.get_channel(self.welcome_channel_id)
        if channel is None:
            channel = getattr(guild, "system_channel", None)
        if channel is None:
            log.debug("no welcome channel available", extra={"guild_id": guild.id})
            return
        welcome = pick_welcome_message(self.welcome_messages)
        try:
            await channel.send(welcome.render(member.mention))
        except discord.HTTPException:
            log.warning("welcome message not delivered", exc_info=True, extra={"user_id": member.id})

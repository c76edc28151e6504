"""Embeds for ``!help``: a grouped overview and a per-command card."""

from __future__ import annotations

import difflib
from dataclasses import dataclass
from typing import Iterable, Sequence

import discord

HELP_TIP = (
    "Hello! こんにちは！Hola! Bonjour! 您好!\n"
    "If you want more information about a specific command, just pass the command as argument."
)
STRIKE_TIP = "~~Strikethrough~~ commands are unavailable because they require a role you lack."
COMMAND_NOT_FOUND = "Could not find: `{}`."
MAX_SUGGESTIONS = 3
# Discord rejects field values over 1024 characters.
FIELD_BUDGET = 900
EMPTY = "—"


@dataclass(frozen=True)
class HelpEntry:
    """One command as a given invoker sees it."""

    name: str
    usage: str = ""
    summary: str = ""
    description: str = ""
    aliases: Sequence[str] = ()
    available: bool = True

    def invocation(self, prefix: str, *, with_usage: bool = False) -> str:
        text = f"{prefix}{self.name.strip()}"
        usage = self.usage.strip()
        return f"{text} {usage}" if with_usage and usage else text

    def overview_line(self, prefix: str) -> str:
        line = f"`{self.invocation(prefix)}` — {self.summary.strip() or EMPTY}"
        if not self.available:
            line = f"~~{line}~~"
        return f"• {line}"


@dataclass(frozen=True)
class HelpSection:
    label: str
    entries: Sequence[HelpEntry]
    blurb: str = ""


def footer_text(bot_version: str) -> str:
    return f"Bot v{bot_version}"


def fit_lines(lines: Sequence[str], budget: int = FIELD_BUDGET) -> str:
    """Join ``lines`` until ``budget`` is spent, then summarise the rest."""

    kept: list[str] = []
    used = -1
    for index, line in enumerate(lines):
        used += len(line) + 1
        if kept and used > budget:
            kept.append(f"+{len(lines) - index} more…")
            break
        kept.append(line)
    return "\n".join(kept) or EMPTY


def build_overview_embed(
    *,
    bot_name: str,
    bot_version: str,
    prefix: str,
    sections: Sequence[HelpSection],
) -> discord.Embed:
    embed = discord.Embed(title=f"{bot_name} · help", colour=discord.Colour.blurple())
    blocked = any(not entry.available for section in sections for entry in section.entries)
    embed.description = f"{HELP_TIP}\n\n{STRIKE_TIP}" if blocked else HELP_TIP

    for section in sections:
        if not section.entries:
            continue
        body = fit_lines([entry.overview_line(prefix) for entry in section.entries])
        blurb = section.blurb.strip()
        embed.add_field(
            name=section.label,
            value=f"{blurb}\n{body}" if blurb else body,
            inline=False,
        )

    embed.set_footer(text=footer_text(bot_version))
    return embed


def build_command_embed(*, prefix: str, entry: HelpEntry, bot_version: str) -> discord.Embed:
    embed = discord.Embed(
        title=entry.invocation(prefix),
        description=entry.description.strip() or EMPTY,
        colour=discord.Colour.blurple(),
    )
    embed.add_field(name="Usage", value=f"`{entry.invocation(prefix, with_usage=True)}`", inline=False)

    aliases = [f"`{prefix}{alias.strip()}`" for alias in entry.aliases if alias and alias.strip()]
    if aliases:
        embed.add_field(name="Aliases", value=", ".join(aliases), inline=False)
    if not entry.available:
        embed.add_field(name="Access", value="You lack the role this command requires.", inline=False)

    embed.set_footer(text=footer_text(bot_version))
    return embed


def not_found_message(query: str, candidates: Iterable[str]) -> str:
    """``Could not find`` line, plus up to three close matches when there are any."""

    text = COMMAND_NOT_FOUND.format(query)
    matches = difflib.get_close_matches(query, list(candidates), n=MAX_SUGGESTIONS, cutoff=0.6)
    if matches:
        text += " Did you mean " + ", ".join(f"`{name}`" for name in matches) + "?"
    return text

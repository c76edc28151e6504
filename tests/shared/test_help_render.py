from shared.help import (
    STRIKE_TIP,
    HelpEntry,
    HelpSection,
    build_command_embed,
    build_overview_embed,
    fit_lines,
    not_found_message,
)


def _entry(name: str, *, available: bool = True, aliases=()) -> HelpEntry:
    return HelpEntry(
        name=name,
        usage="<name>",
        summary=f"{name} summary",
        description=f"{name} details",
        aliases=aliases,
        available=available,
    )


def test_overview_lists_sections_with_footer():
    embed = build_overview_embed(
        bot_name="Corgo",
        bot_version="1.2.3",
        prefix="!",
        sections=[
            HelpSection(label="General", entries=[_entry("ping")]),
            HelpSection(label="Empty", entries=[]),
        ],
    )

    assert embed.title == "Corgo · help"
    assert [field.name for field in embed.fields] == ["General"]
    assert embed.fields[0].value == "• `!ping` — ping summary"
    assert embed.footer.text == "Bot v1.2.3"
    assert STRIKE_TIP not in embed.description


def test_unavailable_commands_are_struck_through():
    embed = build_overview_embed(
        bot_name="Corgo",
        bot_version="1.0",
        prefix="!",
        sections=[
            HelpSection(
                label="Mod",
                entries=[_entry("create_cohort", available=False)],
                blurb="Moderator tools.",
            )
        ],
    )

    assert embed.fields[0].value == (
        "Moderator tools.\n• ~~`!create_cohort` — create_cohort summary~~"
    )
    assert embed.description.endswith(STRIKE_TIP)


def test_fit_lines_summarises_overflow():
    lines = [f"line {index:02d} " + "x" * 40 for index in range(60)]

    value = fit_lines(lines)

    assert len(value) <= 1024
    assert value.splitlines()[-1].endswith("more…")
    assert fit_lines([]) == "—"
    assert fit_lines(["only"]) == "only"


def test_command_embed_shows_usage_and_aliases():
    embed = build_command_embed(
        prefix="!",
        entry=_entry("create_cohort", aliases=("cc", " ")),
        bot_version="1.0",
    )

    fields = {field.name: field.value for field in embed.fields}
    assert embed.title == "!create_cohort"
    assert embed.description == "create_cohort details"
    assert fields["Usage"] == "`!create_cohort <name>`"
    assert fields["Aliases"] == "`!cc`"
    assert "Access" not in fields


def test_command_embed_flags_missing_access():
    embed = build_command_embed(
        prefix="!",
        entry=_entry("create_cohort", available=False),
        bot_version="1.0",
    )

    assert any(field.name == "Access" for field in embed.fields)


def test_not_found_offers_suggestions():
    candidates = ["ping", "pin", "help", "create_cohort"]

    assert not_found_message("pong", candidates).startswith("Could not find: `pong`.")
    assert "`ping`" in not_found_message("pong", candidates)
    assert not_found_message("zzz", candidates) == "Could not find: `zzz`."

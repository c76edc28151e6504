from __future__ import annotations

from types import SimpleNamespace

import discord
import pytest


class FakeRole(discord.Object):
    def __init__(self, role_id: int, name: str) -> None:
        super().__init__(id=role_id)
        self.name = name
        self.mention = f"<@&{role_id}>"


class FakeTextChannel:
    def __init__(self, channel_id: int, name: str, *, category=None, overwrites=None) -> None:
        self.id = channel_id
        self.name = name
        self.category = category
        self.overwrites = dict(overwrites or {})
        self.mention = f"<#{channel_id}>"


class FakeCategory:
    def __init__(self, channel_id: int, name: str = "Adventure Club") -> None:
        self.id = channel_id
        self.name = name


class FakeMember:
    def __init__(self, user_id: int, roles=()) -> None:
        self.id = user_id
        self.display_name = f"user-{user_id}"
        self.roles = list(roles)
        self.bot = False


class FakeGuild:
    """Records every platform call so tests can count them."""

    def __init__(self, guild_id: int = 900, *, with_everyone: bool = True) -> None:
        self.id = guild_id
        self.name = "Party Corgi"
        self.roles: list[FakeRole] = []
        self.default_role: FakeRole | None = None
        if with_everyone:
            self.default_role = FakeRole(guild_id, "@everyone")
            self.roles.append(self.default_role)
        self.channels: dict[int, object] = {}
        self.members: dict[int, FakeMember] = {}
        self.calls: list[tuple[str, dict]] = []
        self.role_error: Exception | None = None
        self.channel_error: Exception | None = None
        self._next_id = 5000

    def _allocate_id(self) -> int:
        self._next_id += 1
        return self._next_id

    def add_category(self, category_id: int) -> FakeCategory:
        category = FakeCategory(category_id)
        self.channels[category_id] = category
        return category

    def add_role(self, name: str) -> FakeRole:
        role = FakeRole(self._allocate_id(), name)
        self.roles.append(role)
        return role

    def get_role(self, role_id: int):
        for role in self.roles:
            if role.id == role_id:
                return role
        return None

    def get_channel(self, channel_id: int):
        return self.channels.get(channel_id)

    def get_member(self, user_id: int):
        return self.members.get(user_id)

    async def create_role(self, *, name: str, colour: discord.Colour, reason=None) -> FakeRole:
        self.calls.append(("create_role", {"name": name, "colour": colour, "reason": reason}))
        if self.role_error is not None:
            raise self.role_error
        return self.add_role(name)

    async def create_text_channel(self, name: str, *, category=None, overwrites=None, reason=None):
        self.calls.append(
            (
                "create_text_channel",
                {"name": name, "category": category, "overwrites": overwrites, "reason": reason},
            )
        )
        if self.channel_error is not None:
            raise self.channel_error
        channel = FakeTextChannel(
            self._allocate_id(), name, category=category, overwrites=overwrites
        )
        self.channels[channel.id] = channel
        return channel

    def call_names(self) -> list[str]:
        return [name for name, _ in self.calls]


class FakeContext:
    def __init__(self, guild: FakeGuild | None, author: FakeMember, *, fail_send: bool = False) -> None:
        self.guild = guild
        self.author = author
        self.channel = SimpleNamespace(id=77)
        self.sent: list[str] = []
        self.replies: list[str] = []
        self.fail_send = fail_send
        self.cog = None
        self.command = None

    async def send(self, content: str | None = None, **_kwargs) -> None:
        if self.fail_send:
            raise discord.HTTPException(_response(500), "boom")
        self.sent.append(content)

    async def reply(self, content: str, *, mention_author: bool = False) -> None:
        self.replies.append(content)


def _response(status: int) -> SimpleNamespace:
    return SimpleNamespace(status=status, reason="error")


def http_error(status: int = 400, message: str = "rejected") -> discord.HTTPException:
    return discord.HTTPException(_response(status), message)


def forbidden_error(message: str = "Missing Permissions") -> discord.Forbidden:
    return discord.Forbidden(_response(403), message)


@pytest.fixture
def fake_discord_env():
    return SimpleNamespace(
        Role=FakeRole,
        Guild=FakeGuild,
        Member=FakeMember,
        Context=FakeContext,
        TextChannel=FakeTextChannel,
        http_error=http_error,
        forbidden_error=forbidden_error,
    )

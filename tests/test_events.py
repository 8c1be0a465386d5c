"""
HackeyeBot - Event Cog Tests
============================

Tests that gateway events reach the pipeline and that handler failures
are contained.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from hackeye.events import EVENT_COGS
from hackeye.events.channels import ChannelEvents
from hackeye.events.guilds import GuildEvents
from hackeye.events.members import MemberEvents, member_label
from hackeye.events.messages import MessageEvents, contains_link
from hackeye.services.guild_logs import LogCategory


@pytest.fixture
def event_bot():
    """Bot double with a mocked pipeline and guild log service."""
    bot = MagicMock()
    bot.pipeline = MagicMock()
    bot.pipeline.on_join = AsyncMock()
    bot.pipeline.on_message = AsyncMock()
    bot.pipeline.on_permission_change = AsyncMock()
    bot.guild_logs = MagicMock()
    bot.guild_logs.notify = AsyncMock(return_value=True)
    return bot


def test_event_cog_registry():
    assert EVENT_COGS == [
        "hackeye.events.members",
        "hackeye.events.messages",
        "hackeye.events.channels",
        "hackeye.events.guilds",
    ]


# =============================================================================
# Link Detection
# =============================================================================

@pytest.mark.parametrize("content,expected", [
    ("check https://example.com", True),
    ("HTTP://SHOUTY.example", True),
    ("visit www.example.com", True),
    ("no links here", False),
    ("", False),
    (None, False),
])
def test_contains_link(content, expected):
    assert contains_link(content) is expected


# =============================================================================
# Members
# =============================================================================

class TestMemberEvents:
    """Tests for member join routing."""

    @pytest.mark.asyncio
    async def test_join_reaches_pipeline(self, event_bot, mock_discord_member):
        await MemberEvents(event_bot).on_member_join(mock_discord_member)

        event_bot.pipeline.on_join.assert_awaited_once_with(
            mock_discord_member.guild.id,
            mock_discord_member.created_at,
            "testuser",
            guild_name="Test Server",
            member_label="testuser (123456789)",
        )

    @pytest.mark.asyncio
    async def test_bot_accounts_are_scored(self, event_bot, mock_discord_member):
        mock_discord_member.bot = True
        await MemberEvents(event_bot).on_member_join(mock_discord_member)
        event_bot.pipeline.on_join.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_pipeline_error_is_contained(self, event_bot, mock_discord_member):
        event_bot.pipeline.on_join = AsyncMock(side_effect=RuntimeError("pool closed"))
        await MemberEvents(event_bot).on_member_join(mock_discord_member)

    @pytest.mark.asyncio
    async def test_no_pipeline_yet(self, event_bot, mock_discord_member):
        event_bot.pipeline = None
        await MemberEvents(event_bot).on_member_join(mock_discord_member)

    def test_member_label(self, mock_discord_member):
        assert member_label(mock_discord_member) == "testuser (123456789)"


# =============================================================================
# Messages
# =============================================================================

def _message(guild, bot_author=False, content="hello"):
    message = MagicMock()
    message.guild = guild
    message.author.bot = bot_author
    message.content = content
    return message


class TestMessageEvents:
    """Tests for message routing."""

    @pytest.mark.asyncio
    async def test_guild_message_recorded(self, event_bot, mock_discord_guild):
        await MessageEvents(event_bot).on_message(_message(mock_discord_guild, content="https://x.io"))
        event_bot.pipeline.on_message.assert_awaited_once_with(mock_discord_guild.id, True)

    @pytest.mark.asyncio
    async def test_bot_author_skipped(self, event_bot, mock_discord_guild):
        await MessageEvents(event_bot).on_message(_message(mock_discord_guild, bot_author=True))
        event_bot.pipeline.on_message.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_direct_message_skipped(self, event_bot):
        await MessageEvents(event_bot).on_message(_message(None))
        event_bot.pipeline.on_message.assert_not_awaited()


# =============================================================================
# Permissions
# =============================================================================

class TestChannelEvents:
    """Tests for permission change routing."""

    @pytest.mark.asyncio
    async def test_role_create_and_delete_recorded(self, event_bot, mock_discord_guild):
        role = MagicMock(guild=mock_discord_guild)
        cog = ChannelEvents(event_bot)

        await cog.on_guild_role_create(role)
        await cog.on_guild_role_delete(role)

        assert event_bot.pipeline.on_permission_change.await_count == 2

    @pytest.mark.asyncio
    async def test_role_update_without_permission_change_skipped(self, event_bot, mock_discord_guild):
        before = MagicMock(guild=mock_discord_guild, permissions=8)
        after = MagicMock(guild=mock_discord_guild, permissions=8)

        await ChannelEvents(event_bot).on_guild_role_update(before, after)

        event_bot.pipeline.on_permission_change.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_role_update_with_permission_change_recorded(self, event_bot, mock_discord_guild):
        before = MagicMock(guild=mock_discord_guild, permissions=0)
        after = MagicMock(guild=mock_discord_guild, permissions=8)

        await ChannelEvents(event_bot).on_guild_role_update(before, after)

        event_bot.pipeline.on_permission_change.assert_awaited_once_with(mock_discord_guild.id)

    @pytest.mark.asyncio
    async def test_channel_overwrite_change_recorded(self, event_bot, mock_discord_guild):
        before = MagicMock(guild=mock_discord_guild, overwrites={})
        after = MagicMock(guild=mock_discord_guild, overwrites={"everyone": "deny"})
        cog = ChannelEvents(event_bot)

        await cog.on_guild_channel_update(before, after)
        await cog.on_guild_channel_update(after, after)

        event_bot.pipeline.on_permission_change.assert_awaited_once()


# =============================================================================
# Guilds
# =============================================================================

class TestGuildEvents:
    """Tests for guild membership handlers."""

    @pytest.mark.asyncio
    async def test_guild_join_announces(self, event_bot, mock_discord_guild):
        await GuildEvents(event_bot).on_guild_join(mock_discord_guild)

        event_bot.guild_logs.notify.assert_awaited_once_with(
            mock_discord_guild.id, LogCategory.SYSTEM, "HackeyeBot added to guild"
        )

    @pytest.mark.asyncio
    async def test_guild_remove_forgets_channels(self, event_bot, mock_discord_guild):
        await GuildEvents(event_bot).on_guild_remove(mock_discord_guild)
        event_bot.guild_logs.forget_guild.assert_called_once_with(mock_discord_guild.id)

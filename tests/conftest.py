"""
HackeyeBot - Test Fixtures
==========================

Shared fixtures for all tests.
"""

import os
import sys
import tempfile
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

# Keep log files out of the working tree; must be set before the logger loads
os.environ.setdefault("HACKEYE_LOGS_DIR", tempfile.mkdtemp(prefix="hackeye-test-logs-"))
os.environ["TESTING"] = "1"


# Literal epoch used by scenario tests: 2023-11-14 22:13:20 UTC
T0 = 1_700_000_000.0
DAY = 86400.0


@pytest.fixture
def temp_db_path(tmp_path):
    """Create a temporary database path for testing."""
    return tmp_path / "test_hackeye.db"


@pytest.fixture
def test_db(temp_db_path):
    """Create a fresh test database instance."""
    from hackeye.core.database import DatabaseManager

    DatabaseManager._instance = None
    db = DatabaseManager(temp_db_path)

    yield db

    db.close()
    DatabaseManager._instance = None


@pytest.fixture
def mock_notifier():
    """Notification sink that records calls and reports delivery."""
    notifier = MagicMock()
    notifier.notify = AsyncMock(return_value=True)
    return notifier


@pytest.fixture
def mock_text_channel():
    """Create a mock Discord text channel."""
    channel = MagicMock()
    channel.id = 444555666
    channel.name = "security-incidents"
    channel.send = AsyncMock(return_value=MagicMock(id=111222333))
    return channel


@pytest.fixture
def mock_discord_guild(mock_text_channel):
    """Create a mock Discord guild that can create text channels."""
    guild = MagicMock()
    guild.id = 987654321
    guild.name = "Test Server"
    guild.member_count = 42
    guild.get_channel = MagicMock(return_value=None)
    guild.fetch_channel = AsyncMock(return_value=None)
    guild.create_text_channel = AsyncMock(return_value=mock_text_channel)
    return guild


@pytest.fixture
def mock_bot(mock_discord_guild):
    """Create a mock bot that knows one guild."""
    bot = MagicMock()
    guilds = {mock_discord_guild.id: mock_discord_guild}
    bot.get_guild = MagicMock(side_effect=lambda guild_id: guilds.get(guild_id))
    bot.guilds = [mock_discord_guild]
    return bot


@pytest.fixture
def mock_discord_member(mock_discord_guild):
    """Create a mock Discord member joining the mock guild."""
    from datetime import datetime, timezone
    member = MagicMock()
    member.id = 123456789
    member.name = "testuser"
    member.bot = False
    member.created_at = datetime(2020, 9, 13, 12, 0, 0, tzinfo=timezone.utc)
    member.guild = mock_discord_guild
    member.__str__ = MagicMock(return_value="testuser")
    return member

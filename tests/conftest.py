"""Shared fixtures: a controllable clock and in-memory stand-ins for Discord objects."""

from types import SimpleNamespace

import discord
import pytest

from config.root_config import Config, BotConfig, ServerConfig, DisplayConfig, PeakConfig
from utility.server_query import ServerStatus

CHANNEL_ID = 123456789
HOUR = 60 * 60


class FakeClock:
    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def advance(self, seconds: float):
        self.now += seconds

    def __call__(self) -> float:
        return self.now


def not_found() -> discord.NotFound:
    return discord.NotFound(SimpleNamespace(status=404, reason="Not Found"), "Unknown Message")


class FakeMessage:
    def __init__(self, message_id: int, fail_edit: Exception = None):
        self.id = message_id
        self.edits = []
        self.fail_edit = fail_edit

    async def edit(self, **kwargs):
        if self.fail_edit:
            raise self.fail_edit
        self.edits.append(kwargs)
        return self


class FakeChannel:
    def __init__(self, channel_id: int = CHANNEL_ID):
        self.id = channel_id
        self.messages = {}
        self.sent = []
        self.fetched = []
        self._next_id = 1000

    async def send(self, **kwargs):
        message = FakeMessage(self._next_id)
        self._next_id += 1
        self.messages[message.id] = message
        self.sent.append(kwargs)
        return message

    async def fetch_message(self, message_id: int):
        self.fetched.append(message_id)
        if message_id not in self.messages:
            raise not_found()
        return self.messages[message_id]

    def edit_count(self) -> int:
        return sum(len(m.edits) for m in self.messages.values())


class FakeBot:
    def __init__(self, channel: FakeChannel = None):
        self.channels = {channel.id: channel} if channel else {}
        self.presences = []

    def get_channel(self, channel_id: int):
        return self.channels.get(channel_id)

    async def change_presence(self, **kwargs):
        self.presences.append(kwargs)


class FakeResponse:
    def __init__(self):
        self.messages = []
        self.deferred = None

    def is_done(self) -> bool:
        return self.deferred is not None or bool(self.messages)

    async def defer(self, **kwargs):
        self.deferred = kwargs

    async def send_message(self, content, **kwargs):
        self.messages.append((content, kwargs))


class FakeFollowup:
    def __init__(self):
        self.messages = []

    async def send(self, content, **kwargs):
        self.messages.append((content, kwargs))


class FakeUser:
    def __init__(self, user_id: int, name: str):
        self.id = user_id
        self.name = name

    def __str__(self):
        return self.name


class FakeInteraction:
    def __init__(self, command_name: str = "refresh"):
        self.response = FakeResponse()
        self.followup = FakeFollowup()
        self.command = SimpleNamespace(name=command_name)
        self.user = FakeUser(191561233755799554, "tester")
        self.channel_id = CHANNEL_ID
        self.original_deleted = False

    async def delete_original_response(self):
        self.original_deleted = True


class FakeLoop:
    """Stands in for a discord.ext.tasks.Loop."""

    def __init__(self, running=False):
        self.running = running
        self.interval = None
        self.started_with = None
        self.start_count = 0

    def is_running(self):
        return self.running

    def change_interval(self, seconds):
        self.interval = seconds

    def start(self, *args):
        self.started_with = args
        self.start_count += 1
        self.running = True


class FakeQuery:
    """Stands in for server_query.query; fails while `error` is set."""

    def __init__(self, players: int = 3, max_players: int = 16):
        self.status = ServerStatus(
            players=[f"player{i}" for i in range(players)],
            max_players=max_players,
            ping=42,
            map="gm_construct",
            server_name="Test Server",
        )
        self.error = None
        self.calls = []

    def set_players(self, count: int):
        self.status.players = [f"player{i}" for i in range(count)]

    async def __call__(self, game, host, port, timeout):
        self.calls.append((game, host, port, timeout))
        if self.error:
            raise self.error
        return self.status


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def channel():
    return FakeChannel()


@pytest.fixture
def fake_bot(channel):
    return FakeBot(channel)


@pytest.fixture
def fake_query():
    return FakeQuery()


@pytest.fixture
def interaction():
    return FakeInteraction()


@pytest.fixture
def config(tmp_path):
    return Config(
        bot=BotConfig(bot_token="token", channel_id=CHANNEL_ID, request_timeout_sec=1.0),
        server=ServerConfig(game="garrysmod", host="10.0.0.5", port=27015),
        display=DisplayConfig(title="My Server"),
        peak=PeakConfig(data_file=str(tmp_path / "peak.yaml")),
    )

import asyncio
from enum import Enum

import discord

from config.root_config import Config
from state.peak_tracker import PeakTracker
from state.state import State, STATE_FILE, save_state
import utility.server_query as server_query
from utility.server_query import QueryError, ServerStatus
from utility.status_snapshot import StatusSnapshot
from utility.embed_builder import build_status_embed, build_link_view, build_presence_text
from utility.logger import get_logger
log = get_logger()

ACTIVITY_TYPES = {
    "playing": discord.ActivityType.playing,
    "watching": discord.ActivityType.watching,
    "listening": discord.ActivityType.listening,
    "competing": discord.ActivityType.competing,
}


class TickResult(Enum):
    CREATED = "created"    # New status message sent
    EDITED = "edited"      # Existing status message edited in place
    RESET = "reset"        # Stored message was gone, id cleared for the next tick
    DEGRADED = "degraded"  # Query failed, presence set to offline
    ABORTED = "aborted"    # Channel missing or Discord error, nothing changed


class StatusPublisher:
    """
    Runs one status tick: query the game server, record the peak, and
    create or edit the single status message this bot owns.

    Owns the runtime State (the message id) and the PeakTracker. Ticks are
    serialized so a refresh command can't interleave with the timer.
    """

    def __init__(self, bot, config: Config, tracker: PeakTracker, state: State,
                 state_file: str = STATE_FILE, query=server_query.query):
        self.bot = bot
        self.config = config
        self.tracker = tracker
        self.state = state
        self.state_file = state_file
        self.query = query
        self._lock = asyncio.Lock()

    async def tick(self, interaction: discord.Interaction = None) -> TickResult:
        """
        Run one tick. Never raises, the caller is a task loop that must keep going.
        Args:
            interaction: Set when triggered by /refresh, acknowledged after a successful edit.
        """
        async with self._lock:
            try:
                return await self._run_tick(interaction)
            except Exception as e:
                log.exception(f"Task status_update: Unexpected error during tick: {e}")
                return TickResult.ABORTED

    async def _run_tick(self, interaction) -> TickResult:
        server = self.config.server
        try:
            status = await self.query(server.game, server.host, server.port, server.query_timeout_sec)
        except QueryError as e:
            log.warning(f"Task status_update: Server query failed, showing offline: {e}")
            await self._set_presence(self.config.bot.presence.offline_text, discord.Status.idle,
                                     discord.ActivityType.watching)
            return TickResult.DEGRADED

        snapshot = self._derive(status)
        await self._set_presence(build_presence_text(snapshot, self.config), discord.Status.dnd,
                                 self._activity_type())
        return await self._upsert(snapshot, interaction)

    def _derive(self, status: ServerStatus) -> StatusSnapshot:
        players_online = len(status.players)
        peak = None
        if self.config.display.show_peak_24h:
            peak = self.tracker.record(players_online)
        return StatusSnapshot(
            online=True,
            players_online=players_online,
            max_players=status.max_players,
            ping=status.ping,
            map=status.map,
            peak_24h=peak,
        )

    async def _upsert(self, snapshot: StatusSnapshot, interaction) -> TickResult:
        channel_id = self.config.bot.channel_id
        channel = self.bot.get_channel(channel_id)
        if channel is None:
            log.error(f"Task status_update: Channel {channel_id} not found, check bot.channel_id in the config")
            return TickResult.ABORTED

        embed = build_status_embed(snapshot, self.config)
        view = build_link_view(self.config)
        timeout = self.config.bot.request_timeout_sec

        try:
            if self.state.message_id is None:
                message = await asyncio.wait_for(channel.send(embed=embed, view=view), timeout)
                self.state.message_id = message.id
                save_state(self.state, self.state_file)
                log.info(f"Task status_update: Status message sent, message id {message.id} saved")
                return TickResult.CREATED

            try:
                message = await asyncio.wait_for(channel.fetch_message(self.state.message_id), timeout)
            except discord.NotFound:
                log.warning(f"Task status_update: Status message {self.state.message_id} not found, "
                            "a new one will be sent next tick")
                self.state.message_id = None
                save_state(self.state, self.state_file)
                return TickResult.RESET

            await asyncio.wait_for(message.edit(embed=embed, view=view), timeout)
        except asyncio.TimeoutError:
            log.error(f"Task status_update: Discord did not answer within {timeout}s, skipping this tick")
            return TickResult.ABORTED
        except discord.HTTPException as e:
            log.error(f"Task status_update: Failed to publish status in channel {channel_id}: {e}")
            return TickResult.ABORTED

        log.debug(f"Task status_update: Status message {self.state.message_id} updated")
        if interaction is not None:
            await self._acknowledge(interaction)
        return TickResult.EDITED

    async def _acknowledge(self, interaction: discord.Interaction):
        try:
            if interaction.response.is_done():
                await interaction.followup.send("Status refreshed!", ephemeral=True)
            else:
                await interaction.response.send_message("Status refreshed!", ephemeral=True)
        except (discord.HTTPException, discord.InteractionResponded) as e:
            log.warning(f"Could not acknowledge refresh from {interaction.user}: {e}")

    def _activity_type(self) -> discord.ActivityType:
        name = self.config.bot.presence.activity_type.lower()
        return ACTIVITY_TYPES.get(name, discord.ActivityType.watching)

    async def _set_presence(self, text: str, status: discord.Status, activity_type: discord.ActivityType):
        """Best effort, a failed presence update never affects the tick."""
        try:
            await self.bot.change_presence(activity=discord.Activity(type=activity_type, name=text), status=status)
        except (discord.DiscordException, ConnectionError) as e:
            log.warning(f"Failed to update presence: {e}")

    async def set_starting_presence(self):
        await self._set_presence(self.config.bot.presence.starting_text, discord.Status.online,
                                 discord.ActivityType.watching)

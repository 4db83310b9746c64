import sys
import discord
from discord.ext import commands

import config.config as cfg
import state.state as st
from state.peak_tracker import PeakTracker
from utility.status_publisher import StatusPublisher
import tasks.status_tasks as status_tasks
import commands.status_commands as status_commands
from utility.logger import get_logger
log = get_logger()


def create_bot(config: cfg.Config) -> commands.Bot:
    """Build the bot with its publisher, tracker and commands wired together."""
    intents = discord.Intents.default()
    intents.message_content = False

    bot = commands.Bot(command_prefix="!", intents=intents)

    tracker = PeakTracker(config.peak.data_file)
    tracker.load()
    publisher = StatusPublisher(bot, config, tracker, st.load_state())

    status_commands.register_commands(bot, publisher)

    # ──────────────────────────
    # Bot Lifecycle
    # ──────────────────────────
    @bot.event
    async def on_ready():
        await publisher.set_starting_presence()

        if config.bot.sync_commands:
            try:
                log.info("Attempting to sync commands...")
                synced_commands = await bot.tree.sync()
                log.info(f"Synced {len(synced_commands)} commands.")
            except discord.HTTPException as e:
                log.error(f"Error syncing slash commands: {e}")
        else:
            log.info("Skipping commands sync.")

        status_tasks.start_status_task(publisher, config.bot.update_interval_sec)
        log.info(f"Logged in as {bot.user}")

    return bot


def main():
    log.info("############### Status Bot Start ###############")
    config = cfg.load_config()
    if config is None:
        log.error("ERROR: Failed to load configuration. Exiting...")
        sys.exit(1)

    bot = create_bot(config)
    try:
        bot.run(config.bot.bot_token)
    except discord.LoginFailure as e:
        log.error(f"ERROR: Discord rejected the bot token: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()

from discord.ext import tasks

from utility.logger import get_logger
log = get_logger()

DEFAULT_INTERVAL_SEC = 60

# ──────────────────────────
# Background Task: Status Message
# ──────────────────────────
# tasks.loop awaits each tick before sleeping, so ticks never overlap.
@tasks.loop(seconds=DEFAULT_INTERVAL_SEC)
async def status_update_task(publisher):
    """Query the server and refresh the status message. The first run happens right at start."""
    log.debug("Task status_update: Running Task")
    result = await publisher.tick()
    log.debug(f"Task status_update: Tick finished ({result.value})")


def start_status_task(publisher, interval_sec: int = DEFAULT_INTERVAL_SEC) -> bool:
    """
    Start the status loop unless it is already running (on_ready fires again after reconnects).
    Returns:
        bool: True if the loop was started by this call.
    """
    if status_update_task.is_running():
        log.debug("Task status_update: Already running, not starting again.")
        return False
    status_update_task.change_interval(seconds=interval_sec)
    status_update_task.start(publisher)
    log.info(f"Task status_update: Started, refreshing every {interval_sec} seconds")
    return True

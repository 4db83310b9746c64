import discord

from utility.logger import get_logger
log = get_logger()

# ──────────────────────────
# Interaction Helpers
# ──────────────────────────
async def log_interaction(interaction: discord.Interaction):
    """Log who ran which command and where."""
    command = interaction.command.name if interaction.command else "unknown"
    log.info(f"[Command] /{command} used by {interaction.user} (ID: {interaction.user.id}) "
             f"in channel {interaction.channel_id}")

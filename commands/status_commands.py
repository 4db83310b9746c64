import discord

import utility.helper_functions as helpers
from utility.status_publisher import TickResult
from utility.logger import get_logger
log = get_logger()

# ──────────────────────────
# Slash Commands
# ──────────────────────────
def register_commands(bot, publisher):

    @bot.tree.command(name="refresh", description="Refresh the server status message now")
    async def slash_refresh(interaction: discord.Interaction):
        """
        Run a status tick right away. Only a successful edit of the
        existing status message is acknowledged.
        """
        await helpers.log_interaction(interaction)

        # A tick can outlast Discord's 3 second response window, defer first
        try:
            await interaction.response.defer(ephemeral=True, thinking=True)
        except discord.HTTPException as e:
            log.warning(f"/refresh could not defer the response: {e}")

        result = await publisher.tick(interaction)
        log.debug(f"/refresh finished ({result.value})")

        if result is not TickResult.EDITED and interaction.response.is_done():
            # Nothing to acknowledge, drop the "thinking..." placeholder
            try:
                await interaction.delete_original_response()
            except discord.HTTPException as e:
                log.warning(f"/refresh could not remove the deferred response: {e}")

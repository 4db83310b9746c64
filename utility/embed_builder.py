import datetime
from typing import Optional

import discord

from config.root_config import Config, DEFAULT_EMBED_COLOR
from utility.status_snapshot import StatusSnapshot
from utility.logger import get_logger
log = get_logger()

STATUS_EMOJI = "🟢"
PLAYERS_EMOJI = "👥"
PING_EMOJI = "📡"
ADDRESS_EMOJI = "🌐"
MAP_EMOJI = "🗺️"
GAMEMODE_EMOJI = "🎮"
PEAK_EMOJI = "📈"

# ──────────────────────────
# Status Message Rendering
# ──────────────────────────
def parse_color(value) -> discord.Colour:
    """Accepts '#rrggbb', '0xrrggbb' or an int. Falls back to the default color."""
    try:
        if isinstance(value, int):
            colour = discord.Colour(value)
        else:
            colour = discord.Colour.from_str(str(value))
    except (ValueError, TypeError):
        colour = None
    # Discord rejects embeds whose color is not a 24-bit RGB value
    if colour is None or not 0 <= colour.value <= 0xFFFFFF:
        log.warning(f"Invalid embed color {value!r}, using {DEFAULT_EMBED_COLOR}")
        return discord.Colour.from_str(DEFAULT_EMBED_COLOR)
    return colour


def build_status_embed(snapshot: StatusSnapshot, config: Config,
                       timestamp: Optional[datetime.datetime] = None) -> discord.Embed:
    """
    Build the status embed from one tick's snapshot and the display settings.
    """
    display = config.display
    embed = discord.Embed(
        title=f"{STATUS_EMOJI} {display.title}",
        colour=parse_color(display.color),
        timestamp=timestamp or discord.utils.utcnow(),
    )

    if display.image:
        embed.set_image(url=display.image)

    embed.description = "\n".join([
        display.description,
        "",
        f"{PLAYERS_EMOJI} **Players online:** `{snapshot.players_online}/{snapshot.max_players}`",
    ])

    embed.add_field(name=f"{ADDRESS_EMOJI} Address", value=f"`{config.server.address}`", inline=True)
    embed.add_field(name="Status", value=f"{STATUS_EMOJI} Online", inline=True)

    if display.show_ping:
        embed.add_field(name=f"{PING_EMOJI} Ping", value=f"`{snapshot.ping}ms`", inline=True)
    if display.show_gamemode:
        embed.add_field(name=f"{GAMEMODE_EMOJI} Gamemode", value=f"`{config.server.gamemode}`", inline=True)
    if display.show_map:
        embed.add_field(name=f"{MAP_EMOJI} Map", value=f"`{snapshot.map}`", inline=True)
    if display.show_peak_24h and snapshot.peak_24h is not None:
        embed.add_field(name=f"{PEAK_EMOJI} 24h peak", value=f"`{snapshot.peak_24h} player(s)`", inline=True)

    if display.footer_text:
        embed.set_footer(text=display.footer_text, icon_url=display.footer_icon or None)

    return embed


def build_link_view(config: Config) -> Optional[discord.ui.View]:
    """
    One link button per configured button. Must be called from a running event loop.
    Returns None when no button has both a label and a url.
    """
    view = discord.ui.View(timeout=None)
    for button in config.display.buttons:
        if not button.label or not button.url:
            continue
        view.add_item(discord.ui.Button(label=button.label, url=button.url, style=discord.ButtonStyle.link))
    return view if view.children else None


def build_presence_text(snapshot: StatusSnapshot, config: Config) -> str:
    text = f"{snapshot.players_online}/{snapshot.max_players}"
    if config.display.show_ping:
        text += f" | Ping: {snapshot.ping}ms"
    return text

import asyncio

import discord

from config.root_config import ButtonConfig
from utility.embed_builder import build_status_embed, build_link_view, build_presence_text, parse_color
from utility.status_snapshot import StatusSnapshot


def snapshot(**overrides):
    values = dict(online=True, players_online=7, max_players=32, ping=55, map="rp_downtown", peak_24h=19)
    values.update(overrides)
    return StatusSnapshot(**values)


def field_names(embed):
    return [f.name for f in embed.fields]


def test_embed_shows_players_address_and_enabled_fields(config):
    config.display.footer_text = "Powered by coffee"
    config.display.image = "https://example.com/banner.png"
    embed = build_status_embed(snapshot(), config)

    assert embed.title == "🟢 My Server"
    assert "`7/32`" in embed.description
    assert field_names(embed) == ["🌐 Address", "Status", "📡 Ping", "🗺️ Map", "📈 24h peak"]
    assert embed.fields[0].value == "`10.0.0.5:27015`"
    assert embed.fields[-1].value == "`19 player(s)`"
    assert embed.footer.text == "Powered by coffee"
    assert embed.image.url == "https://example.com/banner.png"


def test_flags_hide_fields(config):
    config.display.show_ping = False
    config.display.show_map = False
    config.display.show_peak_24h = False
    config.display.show_gamemode = True
    config.server.gamemode = "DarkRP"
    embed = build_status_embed(snapshot(), config)

    assert field_names(embed) == ["🌐 Address", "Status", "🎮 Gamemode"]
    assert embed.fields[-1].value == "`DarkRP`"


def test_color_parsing():
    assert parse_color("#2b2d31") == discord.Colour(0x2B2D31)
    assert parse_color(0xFF0000) == discord.Colour(0xFF0000)
    assert parse_color("not a color") == discord.Colour(0x2B2D31)


def test_link_view_skips_incomplete_buttons(config):
    config.display.buttons = [
        ButtonConfig(label="Join", url="steam://connect/10.0.0.5:27015"),
        ButtonConfig(label="", url="https://example.com"),
        ButtonConfig(label="Discord", url="https://discord.gg/example"),
    ]

    async def build():
        return build_link_view(config)

    view = asyncio.run(build())
    assert [b.label for b in view.children] == ["Join", "Discord"]
    assert all(b.style == discord.ButtonStyle.link for b in view.children)


def test_no_view_without_buttons(config):
    async def build():
        return build_link_view(config)

    assert asyncio.run(build()) is None


def test_presence_text(config):
    assert build_presence_text(snapshot(), config) == "7/32 | Ping: 55ms"
    config.display.show_ping = False
    assert build_presence_text(snapshot(), config) == "7/32"


def test_out_of_range_color_falls_back():
    assert parse_color(-1) == discord.Colour(0x2B2D31)
    assert parse_color(0x1000000) == discord.Colour(0x2B2D31)
    assert parse_color(0xFFFFFF) == discord.Colour(0xFFFFFF)


def test_empty_title_and_description_render(config):
    config.display.title = None
    config.display.description = None
    config.display.__post_init__()
    embed = build_status_embed(snapshot(), config)
    assert embed.title == "🟢 "
    assert embed.description.startswith("\n")

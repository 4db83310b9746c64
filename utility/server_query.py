import asyncio
from dataclasses import dataclass, field
from typing import List

import a2s

from utility.logger import get_logger
log = get_logger()

# ──────────────────────────
# Game Server Query (A2S / Source Query Protocol)
# ──────────────────────────

# Games answering A2S_INFO / A2S_PLAYER on their query port.
A2S_GAMES = {
    "garrysmod",
    "csgo",
    "cs2",
    "css",
    "cstrike",
    "tf2",
    "l4d",
    "l4d2",
    "dods",
    "hl2dm",
    "insurgency",
    "rust",
    "ark",
    "arma3",
    "dayz",
    "valheim",
    "projectzomboid",
    "7daystodie",
}


class QueryError(Exception):
    """The server could not be queried (timeout, unreachable, bad reply, unknown game)."""


@dataclass
class ServerStatus:
    players: List[str] = field(default_factory=list)
    max_players: int = 0
    ping: int = 0  # ms
    map: str = "Unknown"
    server_name: str = ""


async def query(game: str, host: str, port: int, timeout: float = 5.0) -> ServerStatus:
    """
    Query a game server for its info and player list.
    Args:
        game (str): Game identifier, must be one of A2S_GAMES.
        host (str): Server host name or IP.
        port (int): Query port.
        timeout (float): Seconds allowed for each request.
    Returns:
        ServerStatus: The server's current status.
    Raises:
        QueryError: If the server did not answer or answered garbage.
    """
    if game not in A2S_GAMES:
        raise QueryError(f"Unsupported game type '{game}'")

    address = (host, port)
    try:
        info = await asyncio.wait_for(a2s.ainfo(address, timeout=timeout), timeout)
        players = await asyncio.wait_for(a2s.aplayers(address, timeout=timeout), timeout)
    except asyncio.TimeoutError as e:
        raise QueryError(f"Query to {host}:{port} timed out") from e
    except (OSError, a2s.BrokenMessageError, a2s.BufferExhaustedError) as e:
        raise QueryError(f"Query to {host}:{port} failed: {e}") from e

    names = [p.name for p in players]
    log.debug(f"Query: {host}:{port} answered {len(names)}/{info.max_players} players on {info.map_name}")
    return ServerStatus(
        players=names,
        max_players=info.max_players or 0,
        ping=round((info.ping or 0) * 1000),
        map=info.map_name or "Unknown",
        server_name=info.server_name,
    )

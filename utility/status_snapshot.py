from dataclasses import dataclass
from typing import Optional

@dataclass
class StatusSnapshot:
    """The status of one tick, used for rendering and never persisted."""
    online: bool
    players_online: int
    max_players: int
    ping: int
    map: str
    peak_24h: Optional[int] = None  # None when peak tracking is disabled

from dataclasses import dataclass, field
from typing import List, Optional

DEFAULT_EMBED_COLOR = "#2b2d31"

@dataclass
class PresenceConfig:
    activity_type: str = "watching"  # playing, watching, listening or competing
    starting_text: str = "Watching the server..."
    offline_text: str = "Server offline"

@dataclass
class BotConfig:
    bot_token: str = ""
    channel_id: int = 0
    sync_commands: bool = True
    update_interval_sec: int = 60
    request_timeout_sec: float = 15.0  # Upper bound for each Discord call made by a tick
    presence: PresenceConfig = field(default_factory=PresenceConfig)

@dataclass
class ServerConfig:
    game: str = "garrysmod"
    host: str = "127.0.0.1"
    port: int = 27015
    gamemode: str = "Sandbox"  # Display only, A2S does not report it reliably
    query_timeout_sec: float = 5.0

    @property
    def address(self) -> str:
        return f"{self.host}:{self.port}"

@dataclass
class ButtonConfig:
    label: str = ""
    url: str = ""

@dataclass
class DisplayConfig:
    title: str = "Game Server"
    description: str = "A live overview of the game server."
    color: str = DEFAULT_EMBED_COLOR
    image: Optional[str] = None
    footer_text: Optional[str] = None
    footer_icon: Optional[str] = None
    show_ping: bool = True
    show_map: bool = True
    show_gamemode: bool = False
    show_peak_24h: bool = True
    buttons: List[ButtonConfig] = field(default_factory=list)

    def __post_init__(self):
        """ Empty YAML values (title: null) become empty strings so rendering never sees None. """
        if self.title is None:
            self.title = ""
        if self.description is None:
            self.description = ""
        if self.color is None:
            self.color = DEFAULT_EMBED_COLOR

@dataclass
class PeakConfig:
    data_file: str = "_data/peak.yaml"

@dataclass
class Config:
    bot: BotConfig = field(default_factory=BotConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)
    peak: PeakConfig = field(default_factory=PeakConfig)

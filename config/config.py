import os
from typing import Optional

import yaml

from config.root_config import *
from utility.logger import get_logger
log = get_logger()

CONFIG_FILE = "config.yaml"


class ConfigError(Exception):
    """Raised when config.yaml has a missing or invalid value."""


# ──────────────────────────
# Configuration Helper Functions
# ──────────────────────────
def load_config(path: str = CONFIG_FILE) -> Optional[Config]:
    """
    Load the configuration from a YAML file into a Config dataclass.
    If the file does not exist an example config is written in its place.
    Args:
        path (str): Path to the YAML file.
    Returns:
        Config: The loaded configuration, or None if it could not be used.
    """
    if not os.path.exists(path):
        log.error(f"Config file {path} not found. Writing an example config, edit it and restart.")
        save_config(Config(), path)
        return None
    try:
        log.debug("Loading config...")
        with open(path, "r", encoding="utf-8") as file:
            data = yaml.safe_load(file) or {}
        config = _parse_config(data)
        _validate_config(config)
    except (OSError, yaml.YAMLError, TypeError, ValueError, AttributeError, ConfigError) as e:
        log.error(f"Failed to load config: {e}")
        return None
    log.info("Finished loading config")
    return config


def _parse_config(data: dict) -> Config:
    bot = data.get("bot") or {}
    display = dict(data.get("display") or {})
    buttons = [ButtonConfig(**b) for b in display.pop("buttons", None) or []]
    server = dict(data.get("server") or {})
    if "port" in server:
        server["port"] = int(server["port"])
    return Config(
        bot=BotConfig(
            bot_token=bot.get("bot_token", ""),
            channel_id=int(bot.get("channel_id", 0) or 0),
            sync_commands=bot.get("sync_commands", True),
            update_interval_sec=int(bot.get("update_interval_sec", 60)),
            request_timeout_sec=float(bot.get("request_timeout_sec", 15.0)),
            presence=PresenceConfig(**(bot.get("presence") or {})),
        ),
        server=ServerConfig(**server),
        display=DisplayConfig(buttons=buttons, **display),
        peak=PeakConfig(**(data.get("peak") or {})),
    )


def _validate_config(config: Config):
    if not config.bot.bot_token:
        raise ConfigError("bot.bot_token is required")
    if config.bot.channel_id <= 0:
        raise ConfigError("bot.channel_id is required")
    if config.bot.update_interval_sec <= 0:
        raise ConfigError("bot.update_interval_sec must be positive")
    if config.bot.request_timeout_sec <= 0:
        raise ConfigError("bot.request_timeout_sec must be positive")
    if float(config.server.query_timeout_sec) <= 0:
        raise ConfigError("server.query_timeout_sec must be positive")
    if not config.server.host:
        raise ConfigError("server.host is required")
    if not 0 < config.server.port < 65536:
        raise ConfigError(f"server.port {config.server.port!r} is not a valid port")
    for button in config.display.buttons:
        if not button.label or not button.url:
            log.warning(f"Button {button} is missing a label or url and will not be shown.")


def save_config(config: Config, path: str = CONFIG_FILE) -> bool:
    """
    Save the Config dataclass to a YAML file.
    Args:
        config (Config): The configuration to save.
        path (str): Path to the YAML file.
    """
    try:
        with open(path, "w", encoding="utf-8") as file:
            yaml.dump(
                {
                    "bot": {
                        **config.bot.__dict__,
                        "presence": config.bot.presence.__dict__,
                    },
                    "server": config.server.__dict__,
                    "display": {
                        **config.display.__dict__,
                        "buttons": [b.__dict__ for b in config.display.buttons],
                    },
                    "peak": config.peak.__dict__,
                },
                file,
                default_flow_style=False,
                allow_unicode=True,
            )
    except OSError as e:
        log.error(f"Failed to save config: {e}")
        return False
    return True

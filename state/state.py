import os
import yaml
from dataclasses import dataclass
from typing import Optional

from utility.logger import get_logger
log = get_logger()

STATE_FILE = "_data/state.yaml"

@dataclass
class State:
    message_id: Optional[int] = None  # The status message this bot owns, None until first send

# ──────────────────────────
# State keeping
# ──────────────────────────
def load_state(path: str = STATE_FILE) -> State:
    """
    Load the runtime state from a YAML file.
    A missing or unreadable file gives a fresh State.
    Returns:
        State: data class
    """
    if not os.path.exists(path):
        return State()
    try:
        with open(path, "r", encoding="utf-8") as file:
            data = yaml.safe_load(file) or {}
        message_id = data.get("message_id")
        state = State(message_id=int(message_id) if message_id is not None else None)
    except (OSError, yaml.YAMLError, AttributeError, TypeError, ValueError) as e:
        log.error(f"Failed to load state: {e}")
        return State()
    log.debug("Finished loading state")
    return state

def save_state(state: State, path: str = STATE_FILE) -> bool:
    """
    Save the runtime state to a YAML file.
    Failures are logged, the in-memory state stays authoritative.
    """
    try:
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(path, "w", encoding="utf-8") as file:
            yaml.dump({"message_id": state.message_id}, file, default_flow_style=False)
    except OSError as e:
        log.error(f"Failed to save state: {e}")
        return False
    return True

import os
import time
from dataclasses import dataclass, field
from typing import Callable, List

import yaml

from utility.logger import get_logger
log = get_logger()

WINDOW_MS = 24 * 60 * 60 * 1000  # 24 hours


@dataclass(frozen=True)
class Sample:
    timestamp: int  # epoch millis
    players: int


@dataclass
class PeakWindow:
    entries: List[Sample] = field(default_factory=list)  # Chronological, oldest first
    peak24h: int = 0


class PeakTracker:
    """
    Keeps every player count sample seen in the last 24 hours and answers
    the maximum among them.

    Raw samples are stored rather than a running max so that the peak can
    drop again once the sample that set it falls out of the window.
    """

    def __init__(self, data_file: str, clock: Callable[[], float] = time.time):
        self.data_file = data_file
        self.clock = clock
        self.window = PeakWindow()

    @property
    def peak24h(self) -> int:
        return self.window.peak24h

    def _now_ms(self) -> int:
        return int(self.clock() * 1000)

    def record(self, players_online: int) -> int:
        """
        Add a sample for now, drop samples older than 24h and persist.
        Returns:
            int: The max player count over the trailing 24 hours.
        """
        now = self._now_ms()
        cutoff = now - WINDOW_MS

        entries = self.window.entries + [Sample(timestamp=now, players=players_online)]
        self.window.entries = [s for s in entries if s.timestamp >= cutoff]
        self.window.peak24h = max((s.players for s in self.window.entries), default=0)

        log.debug(f"Peak: recorded {players_online} players, {len(self.window.entries)} samples, 24h peak {self.window.peak24h}")
        self.save()
        return self.window.peak24h

    def load(self):
        """
        Load the window from disk. A missing or malformed file resets to an
        empty window instead of failing.
        """
        self.window = PeakWindow()
        if not os.path.exists(self.data_file):
            log.info(f"Peak: no data file at {self.data_file}, starting empty")
            return
        try:
            with open(self.data_file, "r", encoding="utf-8") as file:
                data = yaml.safe_load(file)
            entries = _parse_entries(data)
        except (OSError, yaml.YAMLError, TypeError, ValueError) as e:
            log.error(f"Peak: failed to load {self.data_file}, starting empty: {e}")
            return
        self.window.entries = entries
        self.window.peak24h = max((s.players for s in entries), default=0)
        log.debug(f"Peak: loaded {len(entries)} samples, 24h peak {self.window.peak24h}")

    def save(self) -> bool:
        """Write the window to disk. Failures are logged and swallowed."""
        try:
            directory = os.path.dirname(self.data_file)
            if directory:
                os.makedirs(directory, exist_ok=True)
            with open(self.data_file, "w", encoding="utf-8") as file:
                yaml.dump(
                    {
                        "entries": [{"timestamp": s.timestamp, "players": s.players} for s in self.window.entries],
                        "peak24h": self.window.peak24h,
                    },
                    file,
                    default_flow_style=False,
                    sort_keys=False,
                )
        except OSError as e:
            log.error(f"Peak: failed to save {self.data_file}: {e}")
            return False
        return True


def _parse_entries(data) -> List[Sample]:
    # Also accepts the legacy peakData.json layout, JSON being valid YAML.
    if not isinstance(data, dict) or not isinstance(data.get("entries"), list):
        raise ValueError("expected a mapping with an 'entries' list")
    entries = []
    for raw in data["entries"]:
        if not isinstance(raw, dict):
            raise ValueError(f"malformed entry {raw!r}")
        timestamp, players = raw.get("timestamp"), raw.get("players")
        if not _is_int(timestamp) or not _is_int(players) or players < 0:
            raise ValueError(f"malformed entry {raw!r}")
        entries.append(Sample(timestamp=timestamp, players=players))
    return entries


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)

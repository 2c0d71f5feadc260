"""
Telemetry History - Rolling per-channel storage for strip charts.
"""

import logging
from typing import Dict, List, Deque
from collections import deque
from dataclasses import dataclass, field

import numpy as np

from .sample import Sample

logger = logging.getLogger(__name__)

# Channel name -> Sample attribute
CHANNELS: Dict[str, str] = {
    "altitude": "altitude",
    "rpm": "rpm",
    "airspeed": "airspeed",
    "ground_speed": "ground_speed",
    "roll": "roll",
    "pitch": "pitch",
}


@dataclass
class HistorySnapshot:
    """Copy of the six channels plus their shared relative time axis."""
    x: List[float] = field(default_factory=list)
    altitude: List[float] = field(default_factory=list)
    rpm: List[float] = field(default_factory=list)
    airspeed: List[float] = field(default_factory=list)
    ground_speed: List[float] = field(default_factory=list)
    roll: List[float] = field(default_factory=list)
    pitch: List[float] = field(default_factory=list)

    def channel(self, name: str) -> List[float]:
        if name not in CHANNELS:
            raise KeyError(f"Unknown history channel: {name}")
        return getattr(self, name)

    def __len__(self) -> int:
        return len(self.x)


class TelemetryHistory:
    """
    Fixed-capacity ring buffers, one per charted channel.

    All channels share one length: every push appends to each of them
    and the deques evict their oldest entry together once full.
    """

    def __init__(self, capacity: int, samples_per_second: int):
        """
        Initialize the history.

        Args:
            capacity: Maximum entries per channel
            samples_per_second: Rate used to build the time axis
        """
        if capacity <= 0:
            raise ValueError("History capacity must be positive")

        self._capacity = capacity
        self._samples_per_second = samples_per_second
        self._channels: Dict[str, Deque[float]] = {
            name: deque(maxlen=capacity) for name in CHANNELS
        }

        logger.debug(f"Initialized TelemetryHistory with capacity {capacity}")

    @property
    def capacity(self) -> int:
        return self._capacity

    def push(self, sample: Sample):
        """Append the tracked channels of one sample."""
        for name, attr in CHANNELS.items():
            self._channels[name].append(getattr(sample, attr))

    def time_axis(self) -> List[float]:
        """Negative offsets in seconds, ending at 0 for the newest entry."""
        n = len(self)
        if n == 0:
            return []
        axis = -np.arange(n - 1, -1, -1, dtype=float) / self._samples_per_second
        return [float(v) + 0.0 for v in axis]

    def snapshot(self) -> HistorySnapshot:
        return HistorySnapshot(
            x=self.time_axis(),
            **{name: list(buf) for name, buf in self._channels.items()}
        )

    def clear(self):
        for buf in self._channels.values():
            buf.clear()
        logger.info("History cleared")

    def lengths(self) -> Dict[str, int]:
        return {name: len(buf) for name, buf in self._channels.items()}

    def __len__(self) -> int:
        return len(self._channels["altitude"])

import logging
from dataclasses import dataclass
from typing import List, Sequence

import numpy as np

from ..acquisition.history import HistorySnapshot

logger = logging.getLogger(__name__)

SPARK_BLOCKS = "▁▂▃▄▅▆▇█"


@dataclass(frozen=True)
class ChartConfig:
    """Display settings for one strip chart."""
    channel: str
    title: str
    y_min: float
    y_max: float
    color: str
    unit: str = ""


CHART_CONFIGS: List[ChartConfig] = [
    ChartConfig("altitude", "Altitude", 0, 10, "#3388ff", "m"),
    ChartConfig("rpm", "Propeller RPM", 0, 200, "#ff6384", "rpm"),
    ChartConfig("airspeed", "Airspeed", 0, 10, "#36a2eb", "m/s"),
    ChartConfig("ground_speed", "Ground Speed", 0, 10, "#ffce56", "m/s"),
    ChartConfig("roll", "Roll", -10, 10, "#4bc0c0", "°"),
    ChartConfig("pitch", "Pitch", -10, 10, "#9966ff", "°"),
]


def sparkline(values: Sequence[float], y_min: float, y_max: float, width: int) -> str:
    """
    Render the newest ``width`` values as block characters.

    Values are clamped to [y_min, y_max]; shorter series are left-padded
    with blanks so the newest value stays at the right edge.
    """
    if width <= 0:
        return ""
    if y_max <= y_min:
        raise ValueError("y_max must be greater than y_min")

    recent = np.asarray(list(values)[-width:], dtype=float)
    if recent.size == 0:
        return " " * width

    scaled = (np.clip(recent, y_min, y_max) - y_min) / (y_max - y_min)
    idx = np.minimum((scaled * len(SPARK_BLOCKS)).astype(int), len(SPARK_BLOCKS) - 1)
    line = "".join(SPARK_BLOCKS[i] for i in idx)
    return line.rjust(width)


def chart_lines(snapshot: HistorySnapshot, width: int) -> List[tuple]:
    """(config, latest value, sparkline) for every chart."""
    rows = []
    for cfg in CHART_CONFIGS:
        series = snapshot.channel(cfg.channel)
        latest = series[-1] if series else None
        rows.append((cfg, latest, sparkline(series, cfg.y_min, cfg.y_max, width)))
    return rows


def window_span(snapshot: HistorySnapshot, window_seconds: float) -> tuple:
    """X-axis range: at least the configured window, ending at 0."""
    if not snapshot.x:
        return (-window_seconds, 0.0)
    return (min(min(snapshot.x), -window_seconds), max(max(snapshot.x), 0.0))

"""
Renderers - Consumers of telemetry samples (PFD, strip charts, trajectory).
"""

from .trajectory import TrajectoryTracker, haversine
from .pfd import project_horizon, attitude_grid
from .charts import ChartConfig, CHART_CONFIGS, sparkline

__all__ = [
    "TrajectoryTracker",
    "haversine",
    "project_horizon",
    "attitude_grid",
    "ChartConfig",
    "CHART_CONFIGS",
    "sparkline"
]

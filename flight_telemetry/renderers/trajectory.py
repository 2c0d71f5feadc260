"""
Trajectory Tracker - Flight path recording and distance accumulation.
"""

import logging
from collections import deque
from dataclasses import dataclass
from typing import Deque, Dict, List, Optional, Tuple

import numpy as np

from ..config import BoundingBox, TrajectoryConfig, DEFAULT_CONFIG
from ..acquisition.sample import Sample

logger = logging.getLogger(__name__)

EARTH_RADIUS_M = 6371000.0


@dataclass(frozen=True)
class CourseMarker:
    lat: float
    lon: float
    label: str
    color: str


# Platform, 1 km pylon and turn points on Lake Biwa
COURSE_MARKERS: Dict[str, List[CourseMarker]] = {
    "biwako": [
        CourseMarker(35.294230, 136.254344, "P", "red"),
        CourseMarker(35.297069, 136.243910, "K", "blue"),
        CourseMarker(35.368138, 136.174102, "T", "green"),
        CourseMarker(35.274218, 136.136190, "O", "green"),
    ],
}


def haversine(lat1, lon1, lat2, lon2):
    """Great-circle distance in meters. Accepts scalars or numpy arrays."""
    lat1, lon1, lat2, lon2 = map(np.radians, (lat1, lon1, lat2, lon2))
    dlat = lat2 - lat1
    dlon = lon2 - lon1
    a = np.sin(dlat / 2) ** 2 + np.cos(lat1) * np.cos(lat2) * np.sin(dlon / 2) ** 2
    return EARTH_RADIUS_M * 2 * np.arctan2(np.sqrt(a), np.sqrt(1 - a))


class TrajectoryTracker:

    def __init__(
        self,
        config: TrajectoryConfig = None,
        areas: Dict[str, BoundingBox] = None
    ):
        self.config = config or DEFAULT_CONFIG.trajectory
        self.areas = dict(areas or DEFAULT_CONFIG.map_areas)

        if self.config.default_area not in self.areas:
            raise KeyError(f"Unknown map area: {self.config.default_area}")

        self._area_key = self.config.default_area
        self._points: Deque[Tuple[float, float]] = deque(maxlen=self.config.max_points)
        self._enabled = False
        self._position: Optional[Tuple[float, float]] = None
        self._heading = 0.0

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def area_key(self) -> str:
        return self._area_key

    @property
    def area(self) -> BoundingBox:
        return self.areas[self._area_key]

    @property
    def position(self) -> Optional[Tuple[float, float]]:
        return self._position

    @property
    def heading(self) -> float:
        return self._heading

    @property
    def markers(self) -> List[CourseMarker]:
        return list(COURSE_MARKERS.get(self._area_key, []))

    def on_sample(self, sample: Sample):
        # (0, 0) means no GPS fix
        if sample.latitude == 0 and sample.longitude == 0:
            return

        self._position = (sample.latitude, sample.longitude)
        self._heading = sample.gps_course

        if self._enabled:
            self._points.append(self._position)

    def start(self):
        self._enabled = True
        logger.info("Trajectory recording started")

    def stop(self):
        self._enabled = False
        logger.info("Trajectory recording stopped")

    def reset(self):
        self._points.clear()
        logger.info("Trajectory reset")

    def points(self) -> List[Tuple[float, float]]:
        return list(self._points)

    def distance_m(self) -> float:
        """Cumulative path length of the recorded track."""
        if len(self._points) < 2:
            return 0.0
        track = np.asarray(self._points, dtype=float)
        legs = haversine(track[:-1, 0], track[:-1, 1], track[1:, 0], track[1:, 1])
        return float(np.sum(legs))

    def change_area(self, key: str):
        if key not in self.areas:
            raise KeyError(f"Unknown map area: {key}")
        self._area_key = key
        self.reset()
        logger.info(f"Map area changed to {key}")

    def cycle_area(self) -> str:
        keys = list(self.areas)
        nxt = keys[(keys.index(self._area_key) + 1) % len(keys)]
        self.change_area(nxt)
        return nxt

    def to_grid(self, lat: float, lon: float, width: int, height: int) -> Tuple[int, int]:
        """Project a position onto a width x height grid of the current area."""
        box = self.area
        x = round((lon - box.lon_min) / (box.lon_max - box.lon_min) * width)
        y = round(height - (lat - box.lat_min) / (box.lat_max - box.lat_min) * height)
        return (
            max(0, min(x, width - 1)),
            max(0, min(y, height - 1)),
        )

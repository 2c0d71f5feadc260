import logging
from typing import Any, Dict, Optional
from datetime import datetime

import numpy as np

from ..config import BoundingBox, BIWAKO_FLIGHT_AREA

logger = logging.getLogger(__name__)


class FallbackGenerator:
    """Synthetic telemetry records for when the endpoint is unreachable.

    Records use the endpoint's own field names so they go through exactly
    the same ingest path as real payloads.
    """

    ALTITUDE_RANGE = (0.0, 10.0)
    AIRSPEED_RANGE = (0.0, 10.0)
    GROUND_SPEED_RANGE = (0.0, 10.0)
    ATTITUDE_RANGE = (-5.0, 5.0)
    RPM_RANGE = (0, 200)
    GPS_ALTITUDE_RANGE = (0.0, 100.0)
    HEADING_RANGE = (0.0, 360.0)
    TEMPERATURE_RANGE = (20.0, 30.0)
    CONTROL_RANGE = (-10.0, 10.0)
    TRIM_RANGE = (-5.0, 5.0)

    def __init__(
        self,
        area: BoundingBox = BIWAKO_FLIGHT_AREA,
        seed: Optional[int] = None
    ):
        self.area = area
        self._rng = np.random.default_rng(seed)
        self._generated = 0

    @property
    def generated_count(self) -> int:
        return self._generated

    def _uniform(self, bounds) -> float:
        low, high = bounds
        return float(self._rng.uniform(low, high))

    def generate(self, now: datetime = None) -> Dict[str, Any]:
        now = now or datetime.now()

        record = {
            "Altitude": self._uniform(self.ALTITUDE_RANGE),
            "AirSpeed": self._uniform(self.AIRSPEED_RANGE),
            "Roll_Mad6": self._uniform(self.ATTITUDE_RANGE),
            "Pitch_Mad6": self._uniform(self.ATTITUDE_RANGE),
            "Latitude": self._uniform((self.area.lat_min, self.area.lat_max)),
            "Longitude": self._uniform((self.area.lon_min, self.area.lon_max)),
            "PropellerRotationSpeed": int(self._rng.integers(*self.RPM_RANGE)),
            "GPSSpeed": self._uniform(self.GROUND_SPEED_RANGE),
            "GPSAltitude": self._uniform(self.GPS_ALTITUDE_RANGE),
            "GPSCourse": self._uniform(self.HEADING_RANGE),
            "Temperature": self._uniform(self.TEMPERATURE_RANGE),
            "Elevator": self._uniform(self.CONTROL_RANGE),
            "Rudder": self._uniform(self.CONTROL_RANGE),
            "Trim": self._uniform(self.TRIM_RANGE),
            "Yaw_Mad6": self._uniform(self.HEADING_RANGE),
            "Date": now.strftime("%Y/%m/%d"),
            "Time": now.strftime("%H:%M:%S"),
        }

        self._generated += 1
        return record

"""
Telemetry sample record and endpoint field mapping.
"""

import logging
import math
import time
from dataclasses import dataclass, field, replace, asdict
from typing import Any, Callable, Dict, Mapping, Tuple

logger = logging.getLogger(__name__)


@dataclass
class Sample:
    """A fully populated snapshot of aircraft state."""
    date: str = "-"
    time: str = "-"
    timestamp: float = 0.0

    latitude: float = 0.0
    longitude: float = 0.0
    altitude: float = 0.0
    gps_altitude: float = 0.0
    gps_course: float = 0.0

    ground_speed: float = 0.0
    airspeed: float = 0.0
    rpm: int = 0
    temperature: float = 0.0

    # Control surfaces
    elevator_angle: float = 0.0
    rudder_angle: float = 0.0
    rudder_trim: float = 0.0

    # Attitude (degrees)
    roll: float = 0.0
    pitch: float = 0.0
    yaw: float = 0.0

    def copy(self) -> "Sample":
        return replace(self)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class AttitudeOffsets:
    """Operator-captured attitude bias subtracted from raw readings."""
    roll: float = 0.0
    pitch: float = 0.0
    yaw: float = 0.0


def to_float(value: Any, default: float = 0.0) -> float:
    """Coerce a payload value to float, falling back to default."""
    if value is None or value == "":
        return default
    try:
        result = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(result) or math.isinf(result):
        return default
    return result


def to_int(value: Any, default: int = 0) -> int:
    """Coerce a payload value to int; "120.7" becomes 120."""
    return int(to_float(value, float(default)))


def to_text(value: Any, default: str = "-") -> str:
    if value is None or value == "":
        return default
    return str(value)


# Endpoint key -> (Sample attribute, coercion)
FIELD_MAP: Dict[str, Tuple[str, Callable[[Any], Any]]] = {
    "Latitude": ("latitude", to_float),
    "Longitude": ("longitude", to_float),
    "Altitude": ("altitude", to_float),
    "GPSAltitude": ("gps_altitude", to_float),
    "GPSCourse": ("gps_course", to_float),
    "GPSSpeed": ("ground_speed", to_float),
    "AirSpeed": ("airspeed", to_float),
    "PropellerRotationSpeed": ("rpm", to_int),
    "Yaw_Mad6": ("yaw", to_float),
    "Roll_Mad6": ("roll", to_float),
    "Pitch_Mad6": ("pitch", to_float),
    "Temperature": ("temperature", to_float),
    "Elevator": ("elevator_angle", to_float),
    "Rudder": ("rudder_angle", to_float),
    "Trim": ("rudder_trim", to_float),
    "Date": ("date", to_text),
    "Time": ("time", to_text),
}


def sample_from_record(
    record: Mapping[str, Any],
    invert_roll: bool = False,
    timestamp: float = None
) -> Sample:
    """
    Build a raw (uncorrected) Sample from an endpoint record.

    Every field is coerced independently; missing or unparsable values
    take the field default, so this never raises for a mapping input.

    Args:
        record: Flat key-value record in endpoint naming
        invert_roll: Negate Roll_Mad6 (mirrored sensor mounting)
        timestamp: Ingest time, defaults to now

    Returns:
        Sample with every field populated
    """
    values: Dict[str, Any] = {}
    for key, (attr, coerce) in FIELD_MAP.items():
        values[attr] = coerce(record.get(key))

    if invert_roll and values["roll"] != 0.0:
        values["roll"] = -values["roll"]

    unknown = set(record.keys()) - set(FIELD_MAP.keys())
    if unknown:
        logger.debug(f"Ignoring unmapped payload keys: {sorted(unknown)}")

    values["timestamp"] = time.time() if timestamp is None else timestamp
    return Sample(**values)

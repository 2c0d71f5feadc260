"""
Configuration settings for the Flight Telemetry Dashboard.
"""

from dataclasses import dataclass, field
from typing import Dict
from enum import Enum, auto


class ConnectionStatus(Enum):
    """Data source status reported to the presentation layer."""
    CONNECTED = auto()
    DISCONNECTED = auto()
    ERROR = auto()
    SIMULATING = auto()    # Real source unreachable, synthetic samples


class AcquisitionState(Enum):
    """Telemetry core state machine states."""
    IDLE = auto()
    FETCHING = auto()      # HTTP request outstanding
    INGESTING = auto()     # Real payload being applied
    SIMULATING = auto()    # Fallback sample being applied


@dataclass(frozen=True)
class BoundingBox:
    """Geographic area in decimal degrees."""
    lat_min: float
    lat_max: float
    lon_min: float
    lon_max: float

    def __post_init__(self):
        if self.lat_min > self.lat_max or self.lon_min > self.lon_max:
            raise ValueError(f"Inverted bounding box: {self}")

    def contains(self, lat: float, lon: float) -> bool:
        return (self.lat_min <= lat <= self.lat_max
                and self.lon_min <= lon <= self.lon_max)


# Lake Biwa flight area used for fallback positions
BIWAKO_FLIGHT_AREA = BoundingBox(
    lat_min=35.2191, lat_max=35.42,
    lon_min=136.097, lon_max=136.279
)


@dataclass
class AcquisitionConfig:
    """Configuration for the telemetry acquisition core."""
    endpoint_url: str = "https://62u95gbc60.execute-api.us-east-1.amazonaws.com/test/items/hpa/latest"
    samples_per_second: int = 3
    request_timeout: float = 5.0  # seconds
    auxiliary_interval: float = 60.0  # weather/wind refresh, seconds
    invert_roll: bool = True  # Roll_Mad6 sensor is mounted mirrored
    fallback_area: BoundingBox = BIWAKO_FLIGHT_AREA

    def __post_init__(self):
        if self.samples_per_second <= 0:
            raise ValueError("samples_per_second must be positive")

    @property
    def poll_interval(self) -> float:
        return 1.0 / self.samples_per_second


@dataclass
class HistoryConfig:
    """Configuration for the rolling chart history."""
    window_seconds: int = 20

    def __post_init__(self):
        if self.window_seconds <= 0:
            raise ValueError("window_seconds must be positive")

    def capacity(self, samples_per_second: int) -> int:
        return self.window_seconds * samples_per_second + 1


@dataclass
class SocketConfig:
    """Configuration for the push-socket acquisition strategy."""
    url: str = "ws://localhost:8080"
    base_delay: float = 1.0  # seconds, doubled per attempt
    max_delay: float = 10.0
    max_reconnect_attempts: int = 5


@dataclass
class TrajectoryConfig:
    """Configuration for the trajectory tracker."""
    max_points: int = 1000
    default_area: str = "biwako"


@dataclass
class TUIConfig:
    """Configuration for the TUI."""
    refresh_rate_ms: int = 500
    log_buffer_size: int = 100
    chart_width: int = 48
    map_width: int = 40
    map_height: int = 12


@dataclass
class SystemConfig:
    """Master configuration container."""
    acquisition: AcquisitionConfig = field(default_factory=AcquisitionConfig)
    history: HistoryConfig = field(default_factory=HistoryConfig)
    socket: SocketConfig = field(default_factory=SocketConfig)
    trajectory: TrajectoryConfig = field(default_factory=TrajectoryConfig)
    tui: TUIConfig = field(default_factory=TUIConfig)

    use_socket: bool = False
    offline: bool = False  # Skip the network entirely, simulate every tick

    # Named map areas for the trajectory view
    map_areas: Dict[str, BoundingBox] = field(default_factory=lambda: {
        "fuzigawa": BoundingBox(35.1172, 35.1247, 138.6284, 138.6353),
        "ootone": BoundingBox(35.8543, 35.8641, 140.2365, 140.2461),
        "okegawa": BoundingBox(35.9716, 35.9814, 139.5194, 139.529),
        "biwako": BoundingBox(35.1187, 35.5204, 135.9861, 136.3499),
    })

    @property
    def history_capacity(self) -> int:
        return self.history.capacity(self.acquisition.samples_per_second)


# Global default configuration
DEFAULT_CONFIG = SystemConfig()

"""
Acquisition Layer - Telemetry polling, fallback simulation and rolling history.
"""

from .sample import Sample, AttitudeOffsets, sample_from_record
from .history import TelemetryHistory, HistorySnapshot
from .events import EventChannel
from .simulator import FallbackGenerator
from .core import TelemetryCore
from .socket_source import SocketAcquisition

__all__ = [
    "Sample",
    "AttitudeOffsets",
    "sample_from_record",
    "TelemetryHistory",
    "HistorySnapshot",
    "EventChannel",
    "FallbackGenerator",
    "TelemetryCore",
    "SocketAcquisition"
]

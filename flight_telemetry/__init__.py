"""
Flight Telemetry Dashboard - Real-time aircraft telemetry monitoring

Polls a telemetry endpoint (or falls back to synthetic data), keeps a
rolling history for charting and renders it in a terminal dashboard.
"""

__version__ = "1.0.0"
__author__ = "Industrial Systems Architect"

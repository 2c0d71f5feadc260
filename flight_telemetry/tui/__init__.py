"""
Terminal dashboard for live flight telemetry.
"""

from .dashboard import FlightDashboard

__all__ = ["FlightDashboard"]

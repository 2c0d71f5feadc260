import asyncio
import logging
from typing import Optional

from .config import SystemConfig, ConnectionStatus, DEFAULT_CONFIG
from .acquisition import TelemetryCore, SocketAcquisition, Sample
from .renderers import TrajectoryTracker
from .tui.dashboard import FlightDashboard

logger = logging.getLogger(__name__)


class FlightTelemetryApp:
    """Application context: owns the core and every renderer, wires them once."""

    def __init__(
        self,
        config: SystemConfig = None,
        core: TelemetryCore = None,
        dashboard: FlightDashboard = None
    ):
        self.config = config or DEFAULT_CONFIG
        self.core = core or TelemetryCore(self.config)
        self.socket: Optional[SocketAcquisition] = None
        if self.config.use_socket:
            self.socket = SocketAcquisition(self.core, self.config.socket)

        self.trajectory = TrajectoryTracker(self.config.trajectory, self.config.map_areas)
        self.dashboard = dashboard or FlightDashboard(
            config=self.config.tui,
            zero_attitude_callback=self.core.reset_attitude_offsets,
            clear_history_callback=self._clear_history,
            trajectory=self.trajectory,
        )

        self.core.subscribe(self.trajectory.on_sample)
        self.core.subscribe(self._on_sample)
        self.core.subscribe_status(self._on_status)

    def _on_sample(self, sample: Sample):
        self.dashboard.update_sample(sample)
        self.dashboard.update_history(self.core.get_history())
        self.dashboard.update_trajectory(self.trajectory)
        self.dashboard.update_status(self.core.status, self.core.get_statistics())

    def _on_status(self, status: ConnectionStatus):
        if status == ConnectionStatus.SIMULATING:
            self.dashboard.log_message("[yellow]Endpoint unreachable, showing simulated data[/yellow]")
        elif status == ConnectionStatus.CONNECTED:
            self.dashboard.log_message("[green]Connected to data source[/green]")
        elif status == ConnectionStatus.ERROR:
            self.dashboard.log_message("[red]Data source error[/red]")
        else:
            self.dashboard.log_message("[dim]Data source disconnected[/dim]")
        self.dashboard.update_status(status, self.core.get_statistics())

    def _clear_history(self):
        self.core.clear_history()
        self.dashboard.update_history(self.core.get_history())

    async def start(self):
        if self.socket is not None:
            await self.core.start(poll=False)
            self.socket.start()
        else:
            await self.core.start()

    async def shutdown(self):
        if self.socket is not None:
            await self.socket.stop()
        await self.core.shutdown()

    async def run_async(self):
        await self.start()
        try:
            await self.dashboard.run_async()
        finally:
            await self.shutdown()

    def run(self):
        asyncio.run(self.run_async())

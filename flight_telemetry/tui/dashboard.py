import logging
import threading
from typing import Optional, Dict, Callable, Any
from datetime import datetime
from collections import deque

from textual.app import App, ComposeResult
from textual.containers import Horizontal, Vertical
from textual.css.query import NoMatches
from textual.widgets import Header, Footer, Static, RichLog
from textual.binding import Binding

from rich.text import Text
from rich.panel import Panel
from rich.table import Table
from rich.console import Group

from ..config import ConnectionStatus, TUIConfig, DEFAULT_CONFIG
from ..acquisition.sample import Sample
from ..acquisition.history import HistorySnapshot
from ..renderers.charts import chart_lines
from ..renderers.pfd import attitude_grid, heading_label
from ..renderers.trajectory import TrajectoryTracker

logger = logging.getLogger(__name__)

STATUS_STYLES = {
    ConnectionStatus.CONNECTED: ("green", "●", "LIVE"),
    ConnectionStatus.SIMULATING: ("yellow", "◉", "SIMULATION"),
    ConnectionStatus.ERROR: ("red", "!", "ERROR"),
    ConnectionStatus.DISCONNECTED: ("dim", "○", "DISCONNECTED"),
}


class FlightDataPanel(Static):

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self._sample = Sample()

    def update_sample(self, sample: Sample):
        self._sample = sample
        self.refresh()

    def render(self) -> Panel:
        s = self._sample
        table = Table(show_header=False, expand=True, box=None)
        table.add_column("Parameter", style="cyan", no_wrap=True)
        table.add_column("Value", justify="right", no_wrap=True)

        rows = [
            ("Date", s.date),
            ("Time", s.time),
            ("Latitude", f"{s.latitude:.6f}"),
            ("Longitude", f"{s.longitude:.6f}"),
            ("Altitude", f"{s.altitude:.1f} m"),
            ("RPM", f"{s.rpm}"),
            ("Airspeed", f"{s.airspeed:.1f} m/s"),
            ("Ground Speed", f"{s.ground_speed:.1f} m/s"),
            ("GPS Altitude", f"{s.gps_altitude:.1f} m"),
            ("GPS Course", f"{s.gps_course:.1f}°"),
            ("Temperature", f"{s.temperature:.1f} °C"),
            ("Elevator", f"{s.elevator_angle:.1f}°"),
            ("Rudder Trim", f"{s.rudder_trim:.1f}°"),
            ("Rudder", f"{s.rudder_angle:.1f}°"),
            ("Roll", f"{s.roll:.2f}°"),
            ("Pitch", f"{s.pitch:.2f}°"),
            ("Yaw", f"{s.yaw:.2f}°"),
        ]
        for name, value in rows:
            table.add_row(name, value)

        return Panel(table, title="Flight Data", border_style="blue")


class AttitudePanel(Static):
    """Primary flight display: horizon window with speed/altitude/heading."""

    GRID_WIDTH = 31
    GRID_HEIGHT = 9

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self._sample = Sample()

    def update_sample(self, sample: Sample):
        self._sample = sample
        self.refresh()

    def render(self) -> Panel:
        s = self._sample
        rows = attitude_grid(s.roll, s.pitch, self.GRID_WIDTH, self.GRID_HEIGHT)

        horizon = Text()
        for row in rows:
            for ch in row:
                if ch == "+":
                    horizon.append(ch, style="bold white")
                elif ch == " ":
                    horizon.append("·", style="sky_blue1")
                else:
                    horizon.append(ch, style="orange4")
            horizon.append("\n")

        readout = (
            f"[bold]SPD[/bold] {s.airspeed:5.1f}   "
            f"[bold]ALT[/bold] {s.altitude:5.1f}   "
            f"[bold]HDG[/bold] {s.gps_course:05.1f} {heading_label(s.gps_course)}\n"
            f"[dim]roll {s.roll:+.1f}°  pitch {s.pitch:+.1f}°[/dim]"
        )
        return Panel(Group(horizon, Text.from_markup(readout)), title="PFD", border_style="cyan")


class ChartsPanel(Static):

    def __init__(self, chart_width: int = 48, **kwargs):
        super().__init__(**kwargs)
        self._chart_width = chart_width
        self._snapshot = HistorySnapshot()

    def update_history(self, snapshot: HistorySnapshot):
        self._snapshot = snapshot
        self.refresh()

    def render(self) -> Panel:
        table = Table(show_header=False, expand=True, box=None)
        table.add_column("Channel", no_wrap=True, width=14)
        table.add_column("Now", justify="right", width=10, no_wrap=True)
        table.add_column("Chart", no_wrap=True)

        for cfg, latest, line in chart_lines(self._snapshot, self._chart_width):
            now = "---" if latest is None else f"{latest:.1f} {cfg.unit}"
            table.add_row(
                Text(cfg.title, style=cfg.color),
                now,
                Text(line, style=cfg.color)
            )

        span = len(self._snapshot)
        return Panel(table, title=f"History ({span} samples)", border_style="magenta")


class TrajectoryPanel(Static):

    def __init__(self, width: int = 40, height: int = 12, **kwargs):
        super().__init__(**kwargs)
        self._grid_width = width
        self._grid_height = height
        self._tracker: Optional[TrajectoryTracker] = None

    def update_trajectory(self, tracker: TrajectoryTracker):
        self._tracker = tracker
        self.refresh()

    def render(self) -> Panel:
        tracker = self._tracker
        if tracker is None:
            return Panel("Waiting for position...", title="Map")

        w, h = self._grid_width, self._grid_height
        grid = [[" "] * w for _ in range(h)]

        for lat, lon in tracker.points():
            x, y = tracker.to_grid(lat, lon, w, h)
            grid[y][x] = "·"
        for marker in tracker.markers:
            x, y = tracker.to_grid(marker.lat, marker.lon, w, h)
            grid[y][x] = marker.label
        if tracker.position is not None:
            x, y = tracker.to_grid(*tracker.position, w, h)
            grid[y][x] = "✈"

        body = "\n".join("".join(row) for row in grid)
        rec = "[red]● REC[/red]" if tracker.enabled else "[dim]○ idle[/dim]"
        footer = f"{rec}  {len(tracker.points())} pts  distance {tracker.distance_m():.1f} m"

        return Panel(
            Group(Text(body), Text.from_markup(footer)),
            title=f"Map: {tracker.area_key}",
            border_style="green"
        )


class SourceStatusPanel(Static):

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self._status = ConnectionStatus.DISCONNECTED
        self._stats: Dict[str, Any] = {}

    def update_status(self, status: ConnectionStatus, stats: Dict[str, Any] = None):
        self._status = status
        if stats is not None:
            self._stats = stats
        self.refresh()

    def render(self) -> Panel:
        color, icon, label = STATUS_STYLES[self._status]
        lines = [f"[bold]Source:[/bold] [{color}]{icon} {label}[/{color}]"]
        if self._stats:
            lines.append(
                f"[bold]Polls:[/bold] {self._stats.get('polls_started', 0)}  "
                f"[bold]Dropped:[/bold] {self._stats.get('ticks_dropped', 0)}"
            )
            lines.append(
                f"[bold]Live:[/bold] {self._stats.get('real_samples', 0)}  "
                f"[bold]Simulated:[/bold] {self._stats.get('fallback_samples', 0)}"
            )
        return Panel("\n".join(lines), title="Data Source", border_style=color if color != "dim" else "white")


class FlightDashboard(App):

    CSS = """
    Screen {
        layout: horizontal;
    }

    #left-column {
        width: 1fr;
        height: 100%;
    }

    #center-column {
        width: 2fr;
        height: 100%;
    }

    #status-panel {
        height: auto;
    }

    #pfd-panel {
        height: auto;
    }

    #charts-panel {
        height: auto;
    }

    #map-panel {
        height: auto;
    }

    #log-panel {
        height: 1fr;
        border: solid green;
    }
    """

    BINDINGS = [
        Binding("z", "zero_attitude", "Zero Attitude"),
        Binding("c", "clear_history", "Clear Graphs"),
        Binding("t", "start_trajectory", "Track"),
        Binding("x", "stop_trajectory", "Stop Track"),
        Binding("r", "reset_trajectory", "Reset Track"),
        Binding("m", "cycle_map", "Map"),
        Binding("q", "quit", "Quit"),
    ]

    def __init__(
        self,
        config: TUIConfig = None,
        zero_attitude_callback: Callable[[], None] = None,
        clear_history_callback: Callable[[], None] = None,
        trajectory: TrajectoryTracker = None,
        **kwargs
    ):
        super().__init__(**kwargs)
        self.config = config or DEFAULT_CONFIG.tui
        self._zero_attitude_callback = zero_attitude_callback
        self._clear_history_callback = clear_history_callback
        self._trajectory = trajectory
        self._loop_thread: Optional[int] = None
        self._pending_log: deque = deque(maxlen=self.config.log_buffer_size)

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)

        with Horizontal():
            with Vertical(id="left-column"):
                yield SourceStatusPanel(id="status-panel")
                yield FlightDataPanel(id="data-panel")

            with Vertical(id="center-column"):
                with Horizontal(id="top-row"):
                    yield AttitudePanel(id="pfd-panel")
                    yield TrajectoryPanel(
                        self.config.map_width, self.config.map_height, id="map-panel"
                    )
                yield ChartsPanel(self.config.chart_width, id="charts-panel")
                yield RichLog(id="log-panel", highlight=True, markup=True,
                              max_lines=self.config.log_buffer_size)

        yield Footer()

    def on_mount(self) -> None:
        self._loop_thread = threading.get_ident()
        log_widget = self.query_one("#log-panel", RichLog)
        while self._pending_log:
            log_widget.write(self._pending_log.popleft())
        self.log_message("[green]Dashboard started[/green]")
        self.log_message("Press [bold]T[/bold] to record the trajectory, [bold]Q[/bold] to quit")
        if self._trajectory:
            self.update_trajectory(self._trajectory)

    def action_zero_attitude(self) -> None:
        if self._zero_attitude_callback:
            self._zero_attitude_callback()
            self.log_message("[yellow]Attitude re-zeroed[/yellow]")

    def action_clear_history(self) -> None:
        if self._clear_history_callback:
            self._clear_history_callback()
            self.log_message("[yellow]History cleared[/yellow]")

    def action_start_trajectory(self) -> None:
        if self._trajectory:
            self._trajectory.start()
            self.update_trajectory(self._trajectory)
            self.log_message("[red]Trajectory recording[/red]")

    def action_stop_trajectory(self) -> None:
        if self._trajectory:
            self._trajectory.stop()
            self.update_trajectory(self._trajectory)
            self.log_message("Trajectory stopped")

    def action_reset_trajectory(self) -> None:
        if self._trajectory:
            self._trajectory.reset()
            self.update_trajectory(self._trajectory)
            self.log_message("Trajectory reset")

    def action_cycle_map(self) -> None:
        if self._trajectory:
            key = self._trajectory.cycle_area()
            self.update_trajectory(self._trajectory)
            self.log_message(f"Map area: [bold]{key}[/bold]")

    def log_message(self, message: str) -> None:
        timestamp = datetime.now().strftime("%H:%M:%S")
        line = f"[dim]{timestamp}[/dim] {message}"

        # Not mounted yet: keep the line for on_mount
        if self._loop_thread is None:
            self._pending_log.append(line)
            return

        def _write():
            try:
                log_widget = self.query_one("#log-panel", RichLog)
            except NoMatches:
                return
            log_widget.write(line)

        # If on the main thread, run directly. If on a background thread, schedule it.
        if self._loop_thread == threading.get_ident():
            _write()
        else:
            self.call_from_thread(_write)

    def _panel(self, selector: str, kind):
        if self._loop_thread is None:
            return None
        try:
            return self.query_one(selector, kind)
        except NoMatches:
            return None

    def update_sample(self, sample: Sample) -> None:
        for selector, kind in (("#data-panel", FlightDataPanel), ("#pfd-panel", AttitudePanel)):
            panel = self._panel(selector, kind)
            if panel is not None:
                panel.update_sample(sample)

    def update_history(self, snapshot: HistorySnapshot) -> None:
        panel = self._panel("#charts-panel", ChartsPanel)
        if panel is not None:
            panel.update_history(snapshot)

    def update_status(self, status: ConnectionStatus, stats: Dict[str, Any] = None) -> None:
        panel = self._panel("#status-panel", SourceStatusPanel)
        if panel is not None:
            panel.update_status(status, stats)

    def update_trajectory(self, tracker: TrajectoryTracker) -> None:
        panel = self._panel("#map-panel", TrajectoryPanel)
        if panel is not None:
            panel.update_trajectory(tracker)

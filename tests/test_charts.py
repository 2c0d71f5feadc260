import pytest

from flight_telemetry.acquisition.history import TelemetryHistory, CHANNELS
from flight_telemetry.acquisition.sample import Sample
from flight_telemetry.renderers.charts import (
    CHART_CONFIGS,
    SPARK_BLOCKS,
    chart_lines,
    sparkline,
    window_span,
)


def test_sparkline_scales_and_pads():
    assert sparkline([0.0, 10.0], 0.0, 10.0, 4) == "  " + SPARK_BLOCKS[0] + SPARK_BLOCKS[-1]


def test_sparkline_clamps_out_of_range_values():
    assert sparkline([-5.0, 20.0], 0.0, 10.0, 2) == SPARK_BLOCKS[0] + SPARK_BLOCKS[-1]


def test_sparkline_keeps_newest_values():
    line = sparkline(list(range(10)), 0, 9, 3)
    assert len(line) == 3
    assert line[-1] == SPARK_BLOCKS[-1]


def test_sparkline_edge_cases():
    assert sparkline([1.0], 0.0, 10.0, 0) == ""
    assert sparkline([], 0.0, 10.0, 5) == " " * 5
    with pytest.raises(ValueError):
        sparkline([1.0], 5.0, 5.0, 5)


def test_chart_configs_cover_every_channel():
    assert [cfg.channel for cfg in CHART_CONFIGS] == list(CHANNELS)


def test_chart_lines_report_latest_value():
    history = TelemetryHistory(capacity=5, samples_per_second=1)
    history.push(Sample(altitude=2.0, rpm=120))
    history.push(Sample(altitude=3.0, rpm=150))

    rows = {cfg.channel: (latest, line) for cfg, latest, line in chart_lines(history.snapshot(), 8)}
    assert rows["altitude"][0] == 3.0
    assert rows["rpm"][0] == 150
    assert all(len(line) == 8 for _, line in rows.values())


def test_empty_history_has_no_latest_value():
    rows = chart_lines(TelemetryHistory(capacity=5, samples_per_second=1).snapshot(), 8)
    assert all(latest is None for _, latest, _ in rows)


def test_window_span_covers_configured_window():
    history = TelemetryHistory(capacity=61, samples_per_second=3)
    assert window_span(history.snapshot(), 20) == (-20, 0.0)

    history.push(Sample())
    assert window_span(history.snapshot(), 20) == (-20, 0.0)

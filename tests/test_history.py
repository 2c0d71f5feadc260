import numpy as np
import pytest

from flight_telemetry.config import HistoryConfig
from flight_telemetry.acquisition.history import TelemetryHistory, CHANNELS
from flight_telemetry.acquisition.sample import Sample


def _sample(i):
    return Sample(altitude=float(i), rpm=i, airspeed=i * 0.5,
                  ground_speed=i * 0.25, roll=-float(i), pitch=float(i) / 10)


def test_capacity_from_window_and_rate():
    assert HistoryConfig(window_seconds=20).capacity(3) == 61
    assert HistoryConfig(window_seconds=5).capacity(10) == 51


@pytest.mark.parametrize("pushes", [0, 1, 4, 5, 6, 23])
def test_length_is_min_of_pushes_and_capacity(pushes):
    history = TelemetryHistory(capacity=5, samples_per_second=3)
    for i in range(pushes):
        history.push(_sample(i))

    lengths = history.lengths()
    assert set(lengths) == set(CHANNELS)
    assert set(lengths.values()) == {min(pushes, 5)}


def test_oldest_entries_are_evicted_first():
    history = TelemetryHistory(capacity=3, samples_per_second=1)
    for i in range(6):
        history.push(_sample(i))

    snap = history.snapshot()
    assert snap.altitude == [3.0, 4.0, 5.0]
    assert snap.rpm == [3, 4, 5]
    assert snap.roll == [-3.0, -4.0, -5.0]


def test_time_axis_counts_back_from_zero():
    history = TelemetryHistory(capacity=10, samples_per_second=3)
    for i in range(4):
        history.push(_sample(i))

    snap = history.snapshot()
    assert len(snap.x) == 4
    assert np.allclose(snap.x, [-1.0, -2 / 3, -1 / 3, 0.0])
    assert snap.x[-1] == 0.0


def test_snapshot_is_a_copy():
    history = TelemetryHistory(capacity=3, samples_per_second=1)
    history.push(_sample(1))
    snap = history.snapshot()
    snap.altitude.append(99.0)
    assert history.snapshot().altitude == [1.0]


def test_clear_empties_every_channel():
    history = TelemetryHistory(capacity=3, samples_per_second=1)
    for i in range(3):
        history.push(_sample(i))
    history.clear()

    assert len(history) == 0
    assert set(history.lengths().values()) == {0}
    assert history.snapshot().x == []


def test_unknown_channel_raises():
    history = TelemetryHistory(capacity=3, samples_per_second=1)
    with pytest.raises(KeyError):
        history.snapshot().channel("yaw")


def test_invalid_capacity_rejected():
    with pytest.raises(ValueError):
        TelemetryHistory(capacity=0, samples_per_second=1)

import numpy as np
import pytest

from flight_telemetry.config import TrajectoryConfig
from flight_telemetry.acquisition.sample import Sample
from flight_telemetry.renderers.trajectory import TrajectoryTracker, haversine


def test_haversine_one_degree_of_latitude():
    assert np.isclose(haversine(35.0, 136.0, 36.0, 136.0), 111194.93, atol=0.1)


def test_haversine_zero_for_same_point():
    assert haversine(35.3, 136.2, 35.3, 136.2) == 0.0


def test_distance_accumulates_over_legs():
    tracker = TrajectoryTracker()
    tracker.start()
    for lat in (35.0, 35.001, 35.002):
        tracker.on_sample(Sample(latitude=lat, longitude=136.0))

    expected = haversine(35.0, 136.0, 35.001, 136.0) + haversine(35.001, 136.0, 35.002, 136.0)
    assert np.isclose(tracker.distance_m(), expected)
    assert np.isclose(tracker.distance_m(), 222.39, atol=0.01)


def test_points_recorded_only_while_enabled():
    tracker = TrajectoryTracker()
    tracker.on_sample(Sample(latitude=35.1, longitude=136.1))
    assert tracker.points() == []
    assert tracker.position == (35.1, 136.1)

    tracker.start()
    tracker.on_sample(Sample(latitude=35.2, longitude=136.2, gps_course=90.0))
    tracker.stop()
    tracker.on_sample(Sample(latitude=35.3, longitude=136.3))

    assert tracker.points() == [(35.2, 136.2)]
    assert tracker.heading == 0.0
    assert tracker.distance_m() == 0.0


def test_positions_without_fix_are_ignored():
    tracker = TrajectoryTracker()
    tracker.start()
    tracker.on_sample(Sample())
    assert tracker.points() == []
    assert tracker.position is None


def test_track_is_bounded():
    tracker = TrajectoryTracker(TrajectoryConfig(max_points=3))
    tracker.start()
    for i in range(5):
        tracker.on_sample(Sample(latitude=35.0 + i, longitude=136.0))

    assert [lat for lat, _ in tracker.points()] == [37.0, 38.0, 39.0]


def test_change_area_resets_track():
    tracker = TrajectoryTracker()
    tracker.start()
    tracker.on_sample(Sample(latitude=35.2, longitude=136.2))
    tracker.change_area("okegawa")

    assert tracker.area_key == "okegawa"
    assert tracker.points() == []
    assert tracker.markers == []
    with pytest.raises(KeyError):
        tracker.change_area("atlantis")


def test_cycle_area_wraps_around():
    tracker = TrajectoryTracker()
    seen = {tracker.cycle_area() for _ in range(len(tracker.areas))}
    assert seen == set(tracker.areas)
    assert tracker.area_key == "biwako"


def test_grid_projection_clamps_to_bounds():
    tracker = TrajectoryTracker()
    box = tracker.area

    assert tracker.to_grid(box.lat_max, box.lon_min, 40, 12) == (0, 0)
    assert tracker.to_grid(box.lat_min, box.lon_max, 40, 12) == (39, 11)
    assert tracker.to_grid(0.0, 0.0, 40, 12) == (0, 11)
    assert tracker.to_grid(90.0, 180.0, 40, 12) == (39, 0)

import pytest

from flight_telemetry.config import (
    AcquisitionConfig,
    BoundingBox,
    HistoryConfig,
    SystemConfig,
)


def test_defaults():
    config = SystemConfig()
    assert config.acquisition.samples_per_second == 3
    assert config.acquisition.poll_interval == pytest.approx(1 / 3)
    assert config.history_capacity == 61
    assert config.trajectory.default_area in config.map_areas
    assert not config.use_socket


def test_inverted_bounding_box_rejected():
    with pytest.raises(ValueError):
        BoundingBox(lat_min=36.0, lat_max=35.0, lon_min=136.0, lon_max=137.0)


def test_bounding_box_contains_edges():
    box = BoundingBox(35.0, 35.5, 136.0, 136.5)
    assert box.contains(35.0, 136.5)
    assert not box.contains(35.6, 136.2)


@pytest.mark.parametrize("rate", [0, -3])
def test_non_positive_rate_rejected(rate):
    with pytest.raises(ValueError):
        AcquisitionConfig(samples_per_second=rate)


def test_non_positive_window_rejected():
    with pytest.raises(ValueError):
        HistoryConfig(window_seconds=0)

from datetime import datetime

from flight_telemetry.config import BoundingBox
from flight_telemetry.acquisition.sample import FIELD_MAP
from flight_telemetry.acquisition.simulator import FallbackGenerator


def test_records_use_endpoint_field_names():
    record = FallbackGenerator(seed=1).generate()
    assert set(record) == set(FIELD_MAP)


def test_positions_stay_inside_configured_area():
    area = BoundingBox(lat_min=35.0, lat_max=35.01, lon_min=135.0, lon_max=135.02)
    generator = FallbackGenerator(area=area, seed=3)

    for _ in range(1000):
        record = generator.generate()
        assert area.contains(record["Latitude"], record["Longitude"])
        assert 0 <= record["PropellerRotationSpeed"] < 200
        assert isinstance(record["PropellerRotationSpeed"], int)

    assert generator.generated_count == 1000


def test_seeded_generators_repeat():
    now = datetime(2025, 7, 27, 10, 15, 0)
    a = FallbackGenerator(seed=42).generate(now)
    b = FallbackGenerator(seed=42).generate(now)
    assert a == b
    assert a["Date"] == "2025/07/27"
    assert a["Time"] == "10:15:00"

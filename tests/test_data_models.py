"""Tests for record parsing and the defaulting policy."""
import logging
import random

from orrery.constants import (
    DEFAULT_DISTANCE_KM,
    DEFAULT_RADIUS_KM,
    DEFAULT_SATELLITE_DISTANCE_KM,
    DEFAULT_SATELLITE_RADIUS_KM,
    DEFAULT_SATELLITE_ROTATION_HOURS,
)
from orrery.data_models import (
    parse_body_record,
    resolve_body_record,
)

LOGGER = "orrery.data_models"


class TestParse:

    def test_numeric_strings_are_accepted(self):
        rec = parse_body_record({"name": "X", "radius_km": "6371"})
        assert rec.radius_km == 6371.0
        assert rec.invalid == ()

    def test_non_numeric_and_nan_become_none(self):
        rec = parse_body_record({"name": "X", "radius_km": "big", "eccentricity": float("nan"),
                                 "axial_tilt_deg": True})
        assert rec.radius_km is None
        assert rec.eccentricity is None
        assert rec.axial_tilt_deg is None
        assert set(rec.invalid) == {"radius_km", "eccentricity", "axial_tilt_deg"}

    def test_missing_fields_are_not_invalid(self):
        rec = parse_body_record({"name": "X"})
        assert rec.invalid == ()
        assert rec.satellites == []

    def test_satellites_and_color(self):
        rec = parse_body_record({
            "name": "Earth",
            "color": [300, -4, 10],
            "satellites": [{"name": "Moon", "radius_km": 1737.4}, "junk", {}],
        })
        assert rec.color == (255, 0, 10)
        assert [s.name for s in rec.satellites] == ["Moon", "Earth moon 3"]

    def test_default_name(self):
        assert parse_body_record({}).name == "Body"


class TestResolveBody:

    def test_missing_required_fields_warn_and_default(self, caplog):
        rec = parse_body_record({"name": "Ghost"})
        with caplog.at_level(logging.WARNING, logger=LOGGER):
            out = resolve_body_record(rec, random.Random(1))
        assert out.radius_km == DEFAULT_RADIUS_KM
        assert out.distance_from_sun_km == DEFAULT_DISTANCE_KM
        assert out.orbital_period_days is None
        messages = " ".join(r.getMessage() for r in caplog.records)
        assert "radius" in messages
        assert "distance" in messages
        assert "period" in messages

    def test_optional_fields_default_silently(self, caplog):
        rec = parse_body_record({"name": "Earth", "radius_km": 6371,
                                 "distance_from_sun_km": 1.496e8, "orbital_period_days": 365.25})
        with caplog.at_level(logging.WARNING, logger=LOGGER):
            out = resolve_body_record(rec, random.Random(1))
        assert out.eccentricity == 0.0
        assert out.axial_tilt_deg == 0.0
        assert 0.0 <= out.mean_anomaly_deg < 360.0
        assert caplog.records == []

    def test_invalid_optional_field_warns(self, caplog):
        rec = parse_body_record({"name": "Earth", "radius_km": 6371, "distance_from_sun_km": 1.496e8,
                                 "orbital_period_days": 365.25, "eccentricity": "round"})
        with caplog.at_level(logging.WARNING, logger=LOGGER):
            out = resolve_body_record(rec, random.Random(1))
        assert out.eccentricity == 0.0
        assert any("eccentricity" in r.getMessage() for r in caplog.records)

    def test_central_body_without_period_is_quiet(self, caplog):
        rec = parse_body_record({"name": "Sun", "radius_km": 696340, "distance_from_sun_km": 0})
        with caplog.at_level(logging.WARNING, logger=LOGGER):
            out = resolve_body_record(rec, random.Random(1))
        assert out.is_central
        assert caplog.records == []

    def test_explicit_zero_anomaly_is_kept(self):
        rec = parse_body_record({"name": "X", "radius_km": 1, "distance_from_sun_km": 1,
                                 "orbital_period_days": 1, "mean_anomaly_deg": 0})
        assert resolve_body_record(rec, random.Random(1)).mean_anomaly_deg == 0.0

    def test_random_phase_is_reproducible(self):
        rec = parse_body_record({"name": "X", "satellites": [{"name": "m"}]})
        a = resolve_body_record(rec, random.Random(42))
        b = resolve_body_record(rec, random.Random(42))
        assert a.mean_anomaly_deg == b.mean_anomaly_deg
        assert a.satellites[0].mean_anomaly_deg == b.satellites[0].mean_anomaly_deg

    def test_negative_distance_is_invalid(self):
        rec = parse_body_record({"name": "X", "distance_from_sun_km": -1})
        assert resolve_body_record(rec, random.Random(1)).distance_from_sun_km == DEFAULT_DISTANCE_KM


class TestResolveSatellite:

    def test_defaults(self, caplog):
        rec = parse_body_record({"name": "Mars", "satellites": [{"name": "Blob", "radius_km": "?"}]})
        with caplog.at_level(logging.WARNING, logger=LOGGER):
            sat = resolve_body_record(rec, random.Random(1)).satellites[0]
        assert sat.radius_km == DEFAULT_SATELLITE_RADIUS_KM
        assert sat.distance_from_parent_km == DEFAULT_SATELLITE_DISTANCE_KM
        assert sat.rotation_period_hours == DEFAULT_SATELLITE_ROTATION_HOURS
        assert any("Mars/Blob" in r.getMessage() for r in caplog.records)

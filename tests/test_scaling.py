"""Tests for the real-to-visual unit conversions."""
import logging
import math

import pytest

from orrery.constants import AU_KM, MIN_VISUAL_RADIUS
from orrery.scaling import ScalingSystem


@pytest.fixture
def scaling():
    return ScalingSystem()


class TestRadius:

    def test_large_body_is_linear(self, scaling):
        assert scaling.radius(6371) == pytest.approx(6371 / 1200 * 1.5)

    def test_small_body_gets_boost(self, scaling):
        assert scaling.radius(2000) == pytest.approx(2000 / 1200 * 1.5 * 1.5)

    def test_boost_applies_only_below_threshold(self, scaling):
        assert scaling.radius(4000) == pytest.approx(4000 / 1200 * 1.5)

    def test_zero_radius_is_finite_and_positive(self, scaling):
        r = scaling.radius(0)
        assert math.isfinite(r)
        assert r == MIN_VISUAL_RADIUS

    def test_nan_radius_falls_back(self, scaling, caplog):
        with caplog.at_level(logging.WARNING, logger="orrery.scaling"):
            assert scaling.radius(float("nan")) == MIN_VISUAL_RADIUS
        assert caplog.records

    def test_degenerate_planet_scale_is_clamped(self):
        assert ScalingSystem(planet_scale=0.0).radius(6371) == MIN_VISUAL_RADIUS
        assert ScalingSystem(planet_scale=float("nan")).radius(6371) == MIN_VISUAL_RADIUS


class TestDistance:

    def test_zero_is_origin(self, scaling):
        assert scaling.distance(0) == 0.0

    def test_one_au(self, scaling):
        expected = 300 * 1.5 + math.log(11) * 3 * 800
        assert scaling.distance(AU_KM) == pytest.approx(expected)

    def test_every_orbit_clears_the_sun(self, scaling):
        assert scaling.distance(1.0) > scaling.sun_radius

    def test_monotonic(self, scaling):
        kms = [0, 1, 1e3, 5.79e7, 1.496e8, 7.78e8, 4.5e9, 5.9e9, 1e12]
        out = [scaling.distance(km) for km in kms]
        assert out == sorted(out)

    def test_negative_and_missing_map_to_origin(self, scaling):
        assert scaling.distance(-5) == 0.0
        assert scaling.distance(None) == 0.0


class TestSatelliteDistance:

    def test_offset_at_zero(self, scaling):
        assert scaling.satellite_distance(0) == 5.0

    def test_linear(self, scaling):
        assert scaling.satellite_distance(384400) == pytest.approx(384400 / 3000 + 5)


class TestOrbitalSpeed:

    def test_inverse_sqrt_of_period(self, scaling):
        assert scaling.orbital_speed(100) == pytest.approx(0.005 * 1.5 / 10)
        ratio = scaling.orbital_speed(88) / scaling.orbital_speed(60000)
        assert ratio == pytest.approx(math.sqrt(60000 / 88))

    @pytest.mark.parametrize("period", [0, -10, None, float("nan"), "abc"])
    def test_degenerate_period_does_not_orbit(self, scaling, period):
        assert scaling.orbital_speed(period) == 0.0


class TestRotationSpeed:

    def test_one_day(self, scaling):
        assert scaling.rotation_speed(24) == pytest.approx(0.005)

    def test_sign_is_ignored(self, scaling):
        assert scaling.rotation_speed(-5832.5) == scaling.rotation_speed(5832.5)

    def test_zero_is_non_rotating(self, scaling):
        r = scaling.rotation_speed(0)
        assert math.isfinite(r)
        assert r == 0.0

    def test_missing_is_non_rotating(self, scaling):
        assert scaling.rotation_speed(None) == 0.0


class TestFromSettings:

    def test_overrides(self):
        s = ScalingSystem.from_settings({"planet_scale": 3, "sun_radius": "100"})
        assert s.planet_scale == 3.0
        assert s.sun_radius == 100.0
        assert s.distance_spread == ScalingSystem().distance_spread

    def test_invalid_value_keeps_default(self, caplog):
        with caplog.at_level(logging.WARNING, logger="orrery.scaling"):
            s = ScalingSystem.from_settings({"global_speed": "fast", "unknown": 1})
        assert s.global_speed == ScalingSystem().global_speed
        assert any("global_speed" in r.getMessage() for r in caplog.records)

    def test_none(self):
        assert ScalingSystem.from_settings(None).planet_scale == ScalingSystem().planet_scale

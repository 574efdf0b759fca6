"""Tests for the simulation context and its control surface."""
import random
from datetime import datetime, timezone

import pytest

from orrery.bodies import CelestialBody, build_bodies
from orrery.dataset_loader import Dataset
from orrery.errors import UnknownBodyError
from orrery.scaling import ScalingSystem
from orrery.simulation import Simulation

J2000 = datetime(2000, 1, 1, 12, 0, tzinfo=timezone.utc)

RECORDS = [
    {"name": "Sun", "radius_km": 696340, "distance_from_sun_km": 0, "rotation_period_hours": 609.12},
    {"name": "Mercury", "radius_km": 2439.7, "distance_from_sun_km": 57909050, "orbital_period_days": 87.969,
     "rotation_period_hours": 1407.6, "mean_anomaly_deg": 174.796, "eccentricity": 0.2056},
    {"name": "Earth", "radius_km": 6371, "distance_from_sun_km": 149598023, "orbital_period_days": 365.256,
     "rotation_period_hours": 23.934, "mean_anomaly_deg": 358.617, "eccentricity": 0.0167,
     "satellites": [{"name": "Moon", "radius_km": 1737.4, "distance_from_parent_km": 384400,
                     "orbital_period_days": 27.322, "rotation_period_hours": 655.7}]},
]


@pytest.fixture
def sim():
    bodies = build_bodies(RECORDS, ScalingSystem(), epoch=J2000, rng=random.Random(7))
    return Simulation(bodies)


def _state(sim):
    out = []
    for b in sim.bodies:
        out.append((b.current_angle, b.rotation_angle, b.position, b.trail.count,
                    tuple((s.current_angle, s.rotation_angle, s.local_position) for s in b.satellites)))
    return out


class TestTick:

    def test_tick_advances_every_body(self, sim):
        before = _state(sim)
        sim.tick()
        after = _state(sim)
        assert all(a != b for a, b in zip(before, after))
        assert sim.tick_count == 1

    def test_paused_ticks_are_bit_identical(self, sim):
        sim.set_all_trails(True)
        sim.tick()
        sim.toggle_pause()
        frozen = _state(sim)
        for _ in range(25):
            assert sim.tick() == (0.0, 0.0)
            assert _state(sim) == frozen
        assert sim.tick_count == 1

    def test_resume_is_lossless(self, sim):
        reference = Simulation(build_bodies(RECORDS, ScalingSystem(), epoch=J2000, rng=random.Random(7)))
        for _ in range(10):
            sim.tick()
        sim.toggle_pause()
        for _ in range(10):
            sim.tick()
        sim.toggle_pause()
        for _ in range(10):
            sim.tick()
        for _ in range(20):
            reference.tick()
        assert _state(sim) == _state(reference)

    def test_time_scale_zero_is_not_pause(self, sim):
        sim.set_time_scale(0.0)
        frozen = _state(sim)
        sim.tick()
        assert sim.tick_count == 1
        assert [s[0] for s in _state(sim)] == [s[0] for s in frozen]

    def test_same_time_scale_for_every_body(self, sim):
        sim.set_time_scale(3.0)
        earth = sim.body("Earth")
        moon = earth.satellites[0]
        start_moon = moon.current_angle
        start_rot = earth.rotation_angle
        sim.tick()
        assert moon.current_angle - start_moon == pytest.approx(moon.angular_rate_base * 3.0)
        assert earth.rotation_angle - start_rot == pytest.approx(earth.rotation_angular_rate_base * 3.0)


class TestFocus:

    def test_tick_returns_focused_delta(self, sim):
        sim.set_focus("Earth")
        earth = sim.body("Earth")
        before = earth.position
        delta = sim.tick()
        assert delta == (earth.position[0] - before[0], earth.position[1] - before[1])

    def test_focus_switch_applies_new_body_delta(self, sim):
        mercury = sim.body("Mercury")
        earth = sim.body("Earth")
        sim.set_focus("Mercury")
        sim.tick()
        sim.set_focus("Earth")
        earth_before = earth.position
        mercury_before = mercury.position
        delta = sim.tick()
        assert delta == (earth.position[0] - earth_before[0], earth.position[1] - earth_before[1])
        assert delta != (mercury.position[0] - mercury_before[0], mercury.position[1] - mercury_before[1])

    def test_unfocus_gives_zero_delta(self, sim):
        sim.set_focus("Earth")
        sim.tick()
        assert sim.set_focus(None) is None
        assert sim.tick() == (0.0, 0.0)

    def test_central_body_delta_is_zero(self, sim):
        sim.set_focus("sun")
        assert sim.tick() == (0.0, 0.0)

    def test_unknown_body(self, sim):
        with pytest.raises(UnknownBodyError):
            sim.set_focus("Vulcan")
        with pytest.raises(KeyError):
            sim.toggle_trail("Vulcan", True)


class TestTrails:

    def test_toggle_trail(self, sim):
        sim.toggle_trail("Earth", True)
        for _ in range(3):
            sim.tick()
        assert sim.body("Earth").trail.count == 3
        assert sim.body("Mercury").trail.count == 0
        sim.toggle_trail("Earth", False)
        assert sim.body("Earth").trail.count == 0

    def test_set_all_trails(self, sim):
        sim.set_all_trails(True)
        sim.tick()
        counts = {b.name: b.trail.count for b in sim.bodies}
        assert counts == {"Sun": 0, "Mercury": 1, "Earth": 1}


class TestFromDataset:

    def test_builds_with_settings_and_time_scale(self):
        dataset = Dataset(name="Mini", records=RECORDS, time_scale=2.5, settings={"planet_scale": 3.0})
        sim = Simulation.from_dataset(dataset, epoch=J2000, seed=1)
        assert sim.body_names() == ["Sun", "Mercury", "Earth"]
        assert sim.time.time_scale == 2.5
        assert sim.scaling.planet_scale == 3.0
        assert isinstance(sim.body("earth"), CelestialBody)

    def test_seed_makes_runs_reproducible(self):
        records = [{"name": "X", "radius_km": 1000, "distance_from_sun_km": 1e8, "orbital_period_days": 100}]
        a = Simulation.from_dataset(Dataset(name="d", records=records), epoch=J2000, seed=3)
        b = Simulation.from_dataset(Dataset(name="d", records=records), epoch=J2000, seed=3)
        assert a.bodies[0].current_angle == b.bodies[0].current_angle

    def test_default_time_scale(self):
        sim = Simulation.from_dataset(Dataset(name="d", records=RECORDS[:1]), epoch=J2000, seed=1)
        assert sim.time.time_scale == 1.0

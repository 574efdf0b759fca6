#!/usr/bin/env python3
"""
Orbital state of the bodies in the orrery

Responsibilities
- Build each body once from its dataset record: scale radius, distance and
  rates through a ScalingSystem and place the body at its current phase.
- Advance orbital phase, axial rotation and moon sub-orbits by one tick.
- Feed sampled positions to the body's orbit trail.

Units and conventions
- Everything stored on a body after construction is in visual units; real
  units survive only as the *_km fields kept for display.
- The system is planar: positions are (x, z) with y fixed at 0. Angles are in
  radians, measured from +x towards +z, and accumulate without wrapping.
- Satellite positions are relative to the parent's center. Consumers add the
  parent position when they need a scene position.

Numerical notes
- Orbits follow the polar ellipse r = a(1 - e^2) / (1 + e cos(theta)) with
  the sun at a focus and theta = 0 at periapsis.
- The angular step uses the equal-areas rule: d(theta)/dt is proportional to
  (a / r)^2. The extra sqrt(1 - e^2) factor makes one revolution take exactly
  2 pi / base_rate ticks whatever the eccentricity, so the period in the
  dataset is honoured. For e = 0 the correction is exactly 1.
- The step is a single explicit evaluation at the pre-tick angle. Over a full
  revolution the error of that scheme cancels to second order, so a body
  returns to its start phase after one period to well within 1e-3 rad.
"""

import logging
import math
import random
from datetime import datetime, timezone
from typing import Iterable, List, Mapping, Optional, Tuple, Union

from .constants import (
    DEFAULT_COLOR,
    DEFAULT_TRAIL_CAPACITY,
    J2000_UNIX_SECONDS,
    MIN_VISUAL_RADIUS,
    SATELLITE_SPEED_BOOST,
    SECONDS_PER_DAY,
)
from .data_models import (
    BodyRecord,
    SatelliteRecord,
    parse_body_record,
    resolve_body_record,
)
from .errors import InvalidEccentricityError, OrbitConfigurationError
from .scaling import ScalingSystem
from .trail import OrbitTrailRecorder
from .vector_utils import ORIGIN, Vec2, from_polar, vec_add, vec_len

logger = logging.getLogger(__name__)


def days_since_j2000(epoch: Optional[datetime] = None) -> float:
    """Days elapsed between the J2000 epoch and `epoch` (naive datetimes are UTC)."""
    if epoch is None:
        epoch = datetime.now(timezone.utc)
    elif epoch.tzinfo is None:
        epoch = epoch.replace(tzinfo=timezone.utc)
    return (epoch.timestamp() - J2000_UNIX_SECONDS) / SECONDS_PER_DAY


def initial_phase(mean_anomaly_deg: float, period_days: Optional[float],
                  epoch: Optional[datetime] = None) -> float:
    """
    Orbital angle of a body at `epoch`, in radians within [0, 2 pi).

    The phase at J2000 is advanced by the number of whole and partial
    revolutions completed since then. Bodies without a period keep their
    J2000 phase.
    """
    degrees = mean_anomaly_deg
    if period_days is not None and period_days > 0.0:
        degrees += days_since_j2000(epoch) / period_days * 360.0
    return math.radians(degrees % 360.0)


class SatelliteState:
    """
    One moon, orbiting in its parent's local frame.

    Satellites always move on circles; only the parent's orbit is eccentric.
    """

    def __init__(self, name: str, real_radius_km: float, visual_radius: float,
                 distance_from_parent_visual: float, angular_rate_base: float,
                 rotation_rate_base: float, current_angle: float = 0.0):
        self.name = name
        self.real_radius_km = real_radius_km
        self.visual_radius = visual_radius if visual_radius > 0.0 else MIN_VISUAL_RADIUS * 0.5
        self.distance_from_parent_visual = distance_from_parent_visual
        self.angular_rate_base = angular_rate_base
        self.rotation_rate_base = rotation_rate_base
        self.current_angle = current_angle
        self.rotation_angle = 0.0
        self.local_position: Vec2 = from_polar(current_angle, distance_from_parent_visual)

    @classmethod
    def from_record(cls, record: SatelliteRecord, scaling: ScalingSystem) -> "SatelliteState":
        """Build from a resolved record (see data_models.resolve_satellite_record)."""
        return cls(
            name=record.name,
            real_radius_km=record.radius_km,
            visual_radius=scaling.radius(record.radius_km),
            distance_from_parent_visual=scaling.satellite_distance(record.distance_from_parent_km),
            angular_rate_base=scaling.orbital_speed(record.orbital_period_days) * SATELLITE_SPEED_BOOST,
            rotation_rate_base=scaling.rotation_speed(record.rotation_period_hours),
            current_angle=math.radians(record.mean_anomaly_deg % 360.0),
        )

    def advance(self, time_scale: float) -> None:
        self.current_angle += self.angular_rate_base * time_scale
        self.rotation_angle += self.rotation_rate_base * time_scale
        self.local_position = from_polar(self.current_angle, self.distance_from_parent_visual)

    def __repr__(self) -> str:
        return f"SatelliteState({self.name!r}, angle={self.current_angle:.4f})"


class CelestialBody:
    """
    One body of the system and its per-tick state.

    Fields:
    - name: Identifier for the body
    - real_radius_km / visual_radius: Real and scaled radius (visual > 0)
    - semi_major_axis_km / orbit_distance_visual: Real and scaled semi-major axis
    - eccentricity: Orbit shape in [0, 1)
    - orbit_angular_rate_base / rotation_angular_rate_base: Rates per tick at scale 1
    - axial_tilt_radians: Obliquity, applied by renderers to the spin axis
    - current_angle: Orbital angle (true anomaly), unbounded
    - rotation_angle: Spin angle, unbounded
    - position: Current (x, z) in visual units
    - satellites: Moons in dataset order
    - trail: Sampled past positions
    """

    def __init__(self, name: str, real_radius_km: float, visual_radius: float,
                 semi_major_axis_km: float, orbit_distance_visual: float,
                 eccentricity: float = 0.0, orbit_angular_rate_base: float = 0.0,
                 rotation_angular_rate_base: float = 0.0, axial_tilt_radians: float = 0.0,
                 current_angle: float = 0.0,
                 satellites: Optional[List[SatelliteState]] = None,
                 trail: Optional[OrbitTrailRecorder] = None,
                 color: Tuple[int, int, int] = DEFAULT_COLOR,
                 kind: Optional[str] = None):
        if not (0.0 <= eccentricity < 1.0):
            raise InvalidEccentricityError(name, eccentricity)
        if semi_major_axis_km < 0.0:
            raise OrbitConfigurationError(f"{name}: semi-major axis must be >= 0, got {semi_major_axis_km!r}")
        if not (visual_radius > 0.0 and math.isfinite(visual_radius)):
            logger.warning("%s: visual radius %r is unusable; using %.1f",
                           name, visual_radius, MIN_VISUAL_RADIUS)
            visual_radius = MIN_VISUAL_RADIUS

        self.name = name
        self.real_radius_km = real_radius_km
        self.visual_radius = visual_radius
        self.semi_major_axis_km = semi_major_axis_km
        self.orbit_distance_visual = orbit_distance_visual
        self.eccentricity = eccentricity
        self.orbit_angular_rate_base = orbit_angular_rate_base
        self.rotation_angular_rate_base = rotation_angular_rate_base
        self.axial_tilt_radians = axial_tilt_radians
        self.current_angle = current_angle
        self.rotation_angle = 0.0
        self.satellites: List[SatelliteState] = list(satellites or [])
        self.trail = trail if trail is not None else OrbitTrailRecorder()
        self.color = color
        self.kind = kind
        self.position: Vec2 = ORIGIN if self.is_central else self._ellipse_point(current_angle)

    @classmethod
    def from_record(cls, record: Union[BodyRecord, Mapping], scaling: ScalingSystem,
                    epoch: Optional[datetime] = None, rng: Optional[random.Random] = None,
                    trail_capacity: int = DEFAULT_TRAIL_CAPACITY) -> "CelestialBody":
        """
        Build a body from a raw dataset mapping or a parsed BodyRecord.

        Missing or malformed numeric fields are defaulted (with warnings) and
        never stop construction. An eccentricity outside [0, 1) raises
        InvalidEccentricityError.

        Args:
            record: Raw mapping or BodyRecord
            scaling: Conversion boundary used for every derived value
            epoch: Instant the starting phase is computed for (default: now)
            rng: Source of random phases for records without a mean anomaly
            trail_capacity: Capacity of the body's orbit trail
        """
        rng = rng or random.Random()
        if not isinstance(record, BodyRecord):
            record = parse_body_record(record)
        resolved = resolve_body_record(record, rng)

        satellites = [SatelliteState.from_record(s, scaling) for s in resolved.satellites]
        return cls(
            name=resolved.name,
            real_radius_km=resolved.radius_km,
            visual_radius=scaling.radius(resolved.radius_km),
            semi_major_axis_km=resolved.distance_from_sun_km,
            orbit_distance_visual=scaling.distance(resolved.distance_from_sun_km),
            eccentricity=resolved.eccentricity,
            orbit_angular_rate_base=scaling.orbital_speed(resolved.orbital_period_days),
            rotation_angular_rate_base=scaling.rotation_speed(resolved.rotation_period_hours),
            axial_tilt_radians=math.radians(resolved.axial_tilt_deg),
            current_angle=initial_phase(resolved.mean_anomaly_deg, resolved.orbital_period_days, epoch),
            satellites=satellites,
            trail=OrbitTrailRecorder(trail_capacity),
            color=resolved.color,
            kind=resolved.kind,
        )

    @property
    def is_central(self) -> bool:
        """The system's center never moves."""
        return self.semi_major_axis_km == 0.0

    @property
    def periapsis_visual(self) -> float:
        return self.orbit_distance_visual * (1.0 - self.eccentricity)

    @property
    def apoapsis_visual(self) -> float:
        return self.orbit_distance_visual * (1.0 + self.eccentricity)

    @property
    def orbital_radius(self) -> float:
        """Current distance from the origin."""
        return vec_len(self.position)

    @property
    def position3d(self) -> Tuple[float, float, float]:
        return (self.position[0], 0.0, self.position[1])

    def radius_at(self, angle: float) -> float:
        """Distance from the focus at the given true anomaly."""
        a = self.orbit_distance_visual
        e = self.eccentricity
        if a == 0.0:
            return 0.0
        return a * (1.0 - e * e) / (1.0 + e * math.cos(angle))

    def areal_correction(self, angle: float) -> float:
        """Equal-areas multiplier on the base angular rate at the given angle."""
        r = self.radius_at(angle)
        if r <= 0.0:
            return 1.0
        e = self.eccentricity
        ratio = self.orbit_distance_visual / r
        return math.sqrt(1.0 - e * e) * ratio * ratio

    def _ellipse_point(self, angle: float) -> Vec2:
        return from_polar(angle, self.radius_at(angle))

    def advance(self, time_scale: float = 1.0) -> None:
        """
        Advance orbit, spin and moons by one tick.

        Workflow:
        1) Skip the orbit entirely for the central body
        2) Step the angle by base rate x equal-areas correction x time_scale
        3) Place the body on its ellipse at the new angle
        4) Record a trail sample (when the trail is enabled)
        5) Step the spin angle and every satellite with the same time_scale
        """
        if not self.is_central:
            self.current_angle += (self.orbit_angular_rate_base
                                   * self.areal_correction(self.current_angle)
                                   * time_scale)
            self.position = self._ellipse_point(self.current_angle)
            self.trail.record(self.position)

        self.rotation_angle += self.rotation_angular_rate_base * time_scale

        for sat in self.satellites:
            sat.advance(time_scale)

    def satellite_world_position(self, sat: SatelliteState) -> Vec2:
        """Scene position of one of this body's satellites."""
        return vec_add(self.position, sat.local_position)

    def __repr__(self) -> str:
        return (f"CelestialBody({self.name!r}, a={self.orbit_distance_visual:.1f}, "
                f"e={self.eccentricity}, angle={self.current_angle:.4f})")


def build_bodies(raw_records: Iterable[Union[BodyRecord, Mapping]], scaling: ScalingSystem,
                 epoch: Optional[datetime] = None, rng: Optional[random.Random] = None,
                 trail_capacity: int = DEFAULT_TRAIL_CAPACITY) -> List[CelestialBody]:
    """
    Build every body of a dataset, in order.

    A record whose orbit cannot be animated (eccentricity outside [0, 1)) is
    logged and skipped; the rest of the system still loads.
    """
    rng = rng or random.Random()
    bodies: List[CelestialBody] = []
    for raw in raw_records:
        try:
            bodies.append(CelestialBody.from_record(raw, scaling, epoch=epoch, rng=rng,
                                                    trail_capacity=trail_capacity))
        except OrbitConfigurationError as exc:
            logger.error("Skipping body: %s", exc)
    return bodies

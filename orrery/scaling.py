#!/usr/bin/env python3
"""
Scaling system for the orrery

Responsibilities
- Map real-world quantities (kilometers, days, hours) to visual units and
  per-tick angular rates.
- Keep every mapping finite so a single odd value never produces a NaN mesh
  or a body that vanishes from the scene.

Units and conventions
- Inputs are kilometers [km], orbital periods in days [d] and rotation periods
  in hours [h].
- Outputs are visual lengths (scene units) and angular rates in radians per
  tick at a time scale of 1.

Numerical notes
- Sizes are linear so relative body sizes stay readable; small bodies get a
  boost so Mercury or Pluto remain visible next to Jupiter.
- Distances are logarithmic in astronomical units. Linear distances would put
  Neptune roughly 80 times further out than Mercury; the log compresses the
  outer system while keeping the ordering (the mapping is monotonic).
- Orbital speed goes as 1/sqrt(period) instead of 1/period, which softens the
  ~700:1 ratio between Mercury and Neptune down to ~26:1.

This module is pure compute; a ScalingSystem only holds its tunable constants.
"""

import logging
import math
from typing import Mapping, Optional

from .constants import (
    AU_KM,
    DEFAULT_DISTANCE_SPREAD,
    DEFAULT_GLOBAL_SPEED,
    DEFAULT_PLANET_SCALE,
    DEFAULT_SUN_RADIUS,
    HOURS_PER_DAY,
    LOG_DISTANCE_GAIN,
    MIN_VISUAL_RADIUS,
    ORBIT_SPEED_GAIN,
    RADIUS_DIVISOR_KM,
    ROTATION_SPEED_GAIN,
    SATELLITE_DISTANCE_DIVISOR_KM,
    SATELLITE_DISTANCE_OFFSET,
    SMALL_BODY_BOOST,
    SMALL_BODY_THRESHOLD_KM,
    SUN_SAFETY_MARGIN,
)
from .utils import finite_or_none

logger = logging.getLogger(__name__)


class ScalingSystem:
    """
    Conversion boundary between real units and visual units.

    All orbital math downstream of construction operates on the values
    returned here and never goes back to kilometers or days.
    """

    SETTING_NAMES = ("planet_scale", "distance_spread", "sun_radius", "global_speed")

    def __init__(self,
                 planet_scale: float = DEFAULT_PLANET_SCALE,
                 distance_spread: float = DEFAULT_DISTANCE_SPREAD,
                 sun_radius: float = DEFAULT_SUN_RADIUS,
                 global_speed: float = DEFAULT_GLOBAL_SPEED):
        """
        Args:
            planet_scale: Multiplier applied to every visual radius
            distance_spread: Spread factor of the logarithmic distance scale
            sun_radius: Visual radius of the central body; orbits start outside it
            global_speed: Multiplier applied to every orbital angular rate
        """
        self.planet_scale = float(planet_scale)
        self.distance_spread = float(distance_spread)
        self.sun_radius = float(sun_radius)
        self.global_speed = float(global_speed)

    @classmethod
    def from_settings(cls, settings: Optional[Mapping]) -> "ScalingSystem":
        """
        Build a scaling system from a dataset's optional "settings" block.

        Unknown keys are ignored; values that are not finite numbers keep the
        default and log a warning.
        """
        kwargs = {}
        for key in cls.SETTING_NAMES:
            if not settings or key not in settings:
                continue
            value = finite_or_none(settings[key])
            if value is None:
                logger.warning("Ignoring invalid scaling setting %s=%r", key, settings[key])
                continue
            kwargs[key] = value
        return cls(**kwargs)

    @property
    def orbit_offset(self) -> float:
        """Smallest non-zero orbit distance: the sun's visible surface plus margin."""
        return self.sun_radius * SUN_SAFETY_MARGIN

    def radius(self, real_radius_km: float) -> float:
        """
        Visual radius for a body of the given real radius.

        Linear in km, with an extra boost below SMALL_BODY_THRESHOLD_KM. The
        result is always finite and > 0: degenerate results (zero radius, zero
        or NaN planet_scale) fall back to MIN_VISUAL_RADIUS.

        Args:
            real_radius_km: Real radius in kilometers

        Returns:
            Visual radius in scene units
        """
        km = finite_or_none(real_radius_km)
        if km is None:
            logger.warning("Non-numeric radius %r; using minimum visual size", real_radius_km)
            return MIN_VISUAL_RADIUS
        raw = (km / RADIUS_DIVISOR_KM) * self.planet_scale
        if km < SMALL_BODY_THRESHOLD_KM:
            raw *= SMALL_BODY_BOOST
        if not math.isfinite(raw):
            logger.warning("Scaled radius for %r km is not finite; using minimum visual size", km)
            return MIN_VISUAL_RADIUS
        if raw <= 0.0:
            return MIN_VISUAL_RADIUS
        return raw

    def distance(self, real_distance_km: float) -> float:
        """
        Visual orbit distance for a heliocentric distance.

        0 km maps to 0 (the system origin). Any other distance is converted to
        AU and mapped through log(au * 10 + 1), then pushed out past the
        central body's surface so no orbit intersects it.

        Args:
            real_distance_km: Distance from the central body in kilometers

        Returns:
            Visual distance in scene units (monotonic non-decreasing in km)
        """
        km = finite_or_none(real_distance_km)
        if km is None or km <= 0.0:
            return 0.0
        au = km / AU_KM
        log_distance = math.log(au * 10.0 + 1.0) * LOG_DISTANCE_GAIN
        visual = self.orbit_offset + log_distance * self.distance_spread
        if not math.isfinite(visual):
            logger.warning("Scaled distance for %r km is not finite; using orbit offset", km)
            return self.orbit_offset if math.isfinite(self.orbit_offset) else 0.0
        return visual

    def satellite_distance(self, real_distance_km: float) -> float:
        """
        Visual distance of a moon from its parent's center.

        Linear, with a fixed offset that keeps the moon off the parent's
        surface even when the real distance is tiny.
        """
        km = finite_or_none(real_distance_km)
        if km is None or km < 0.0:
            return SATELLITE_DISTANCE_OFFSET
        return km / SATELLITE_DISTANCE_DIVISOR_KM + SATELLITE_DISTANCE_OFFSET

    def orbital_speed(self, period_days: Optional[float]) -> float:
        """
        Orbital angular rate in radians per tick.

        A missing, zero or negative period means the body does not orbit and
        yields 0.0 rather than a division error.

        Args:
            period_days: Sidereal orbital period in days

        Returns:
            Angular rate in radians per tick at time scale 1
        """
        days = finite_or_none(period_days)
        if days is None or days <= 0.0:
            return 0.0
        return ORBIT_SPEED_GAIN * self.global_speed / math.sqrt(days)

    def rotation_speed(self, period_hours: Optional[float]) -> float:
        """
        Axial rotation rate in radians per tick.

        Retrograde rotators carry a negative period in the data; only the
        magnitude matters here. A period of exactly 0 (or no period at all)
        defines a non-rotating body.
        """
        hours = finite_or_none(period_hours)
        if hours is None:
            return 0.0
        h = abs(hours)
        if h == 0.0:
            return 0.0
        return (HOURS_PER_DAY / h) * ROTATION_SPEED_GAIN

#!/usr/bin/env python3
"""
Data models for the orrery dataset.

This module defines the record types read from a dataset and the single
defaulting policy that turns a raw, possibly incomplete record into one the
engine can always animate.

Units and usage
- Distances and radii are in kilometers [km], orbital periods in days [d],
  rotation periods in hours [h] (negative means retrograde), angles in degrees.
- parse_* never raises on bad values: each numeric field becomes a finite
  float or None, and the names of fields that were present but unusable are
  kept in `invalid`.
- resolve_* fills every None with the documented fallback from constants.py
  and logs one warning per substituted field.
"""
import logging
import random
from dataclasses import dataclass, field, replace
from typing import List, Mapping, Optional, Tuple

from .constants import (
    DEFAULT_COLOR,
    DEFAULT_DISTANCE_KM,
    DEFAULT_RADIUS_KM,
    DEFAULT_SATELLITE_DISTANCE_KM,
    DEFAULT_SATELLITE_RADIUS_KM,
    DEFAULT_SATELLITE_ROTATION_HOURS,
)
from .utils import finite_or_none

logger = logging.getLogger(__name__)


@dataclass
class SatelliteRecord:
    """
    One moon, as described in its parent's "satellites" list.

    Fields:
    - name: Identifier for the moon
    - radius_km: Real radius
    - distance_from_parent_km: Real distance from the parent's center
    - orbital_period_days: Orbital period around the parent
    - rotation_period_hours: Axial rotation period
    - mean_anomaly_deg: Starting phase; random when absent
    - invalid: Names of fields that were present but not finite numbers
    """
    name: str
    radius_km: Optional[float] = None
    distance_from_parent_km: Optional[float] = None
    orbital_period_days: Optional[float] = None
    rotation_period_hours: Optional[float] = None
    mean_anomaly_deg: Optional[float] = None
    invalid: Tuple[str, ...] = ()


@dataclass
class BodyRecord:
    """
    One body orbiting the system's origin (or the origin itself).

    Fields:
    - name: Identifier for the body
    - radius_km: Real radius
    - distance_from_sun_km: Semi-major axis; 0 for the central body
    - orbital_period_days: Sidereal period; None means the body does not orbit
    - rotation_period_hours: Axial rotation period; negative for retrograde
    - mean_anomaly_deg: Phase at the J2000 epoch; random when absent
    - eccentricity: Orbit eccentricity, 0 for a circle
    - axial_tilt_deg: Obliquity of the spin axis
    - kind: Free-form body type ("star", "gas_giant", ...), rendering hint only
    - color: RGB tuple used by renderers
    - satellites: Moons in dataset order
    - invalid: Names of fields that were present but not finite numbers
    """
    name: str
    radius_km: Optional[float] = None
    distance_from_sun_km: Optional[float] = None
    orbital_period_days: Optional[float] = None
    rotation_period_hours: Optional[float] = None
    mean_anomaly_deg: Optional[float] = None
    eccentricity: Optional[float] = None
    axial_tilt_deg: Optional[float] = None
    kind: Optional[str] = None
    color: Tuple[int, int, int] = DEFAULT_COLOR
    satellites: List[SatelliteRecord] = field(default_factory=list)
    invalid: Tuple[str, ...] = ()

    @property
    def is_central(self) -> bool:
        return self.distance_from_sun_km == 0.0


def _coerce_color(c) -> Tuple[int, int, int]:
    try:
        r, g, b = int(c[0]), int(c[1]), int(c[2])
        r = max(0, min(255, r)); g = max(0, min(255, g)); b = max(0, min(255, b))
        return (r, g, b)
    except Exception:
        return DEFAULT_COLOR


def _numeric_fields(raw: Mapping, names) -> Tuple[dict, Tuple[str, ...]]:
    values = {}
    invalid = []
    for key in names:
        value = finite_or_none(raw.get(key))
        if value is None and raw.get(key) is not None:
            invalid.append(key)
        values[key] = value
    return values, tuple(invalid)


_SATELLITE_NUMERIC = ("radius_km", "distance_from_parent_km", "orbital_period_days",
                      "rotation_period_hours", "mean_anomaly_deg")
_BODY_NUMERIC = ("radius_km", "distance_from_sun_km", "orbital_period_days",
                 "rotation_period_hours", "mean_anomaly_deg", "eccentricity", "axial_tilt_deg")


def parse_satellite_record(raw: Mapping, default_name: str = "Moon") -> SatelliteRecord:
    values, invalid = _numeric_fields(raw, _SATELLITE_NUMERIC)
    return SatelliteRecord(name=str(raw.get("name") or default_name), invalid=invalid, **values)


def parse_body_record(raw: Mapping) -> BodyRecord:
    """Read a raw mapping (one entry of a dataset's body list) into a BodyRecord."""
    values, invalid = _numeric_fields(raw, _BODY_NUMERIC)
    name = str(raw.get("name") or "Body")
    satellites: List[SatelliteRecord] = []
    raw_sats = raw.get("satellites") or []
    if not isinstance(raw_sats, list):
        logger.warning("%s: 'satellites' is not a list; ignoring it", name)
        raw_sats = []
    for i, sat in enumerate(raw_sats):
        if not isinstance(sat, Mapping):
            logger.warning("%s: skipping satellite entry %d (not an object)", name, i)
            continue
        satellites.append(parse_satellite_record(sat, default_name=f"{name} moon {i + 1}"))
    kind = raw.get("type")
    return BodyRecord(
        name=name,
        kind=str(kind) if kind is not None else None,
        color=_coerce_color(raw.get("color", DEFAULT_COLOR)),
        satellites=satellites,
        invalid=invalid,
        **values,
    )


def _random_phase(rng: random.Random) -> float:
    return rng.random() * 360.0


def resolve_satellite_record(record: SatelliteRecord, parent_name: str,
                             rng: Optional[random.Random] = None) -> SatelliteRecord:
    """Return a copy of record with every missing field defaulted."""
    rng = rng or random.Random()
    changes = {}
    label = f"{parent_name}/{record.name}"

    if record.radius_km is None or record.radius_km <= 0.0:
        logger.warning("%s: satellite radius missing or invalid; defaulting to %.0f km",
                       label, DEFAULT_SATELLITE_RADIUS_KM)
        changes["radius_km"] = DEFAULT_SATELLITE_RADIUS_KM
    if record.distance_from_parent_km is None or record.distance_from_parent_km < 0.0:
        logger.warning("%s: distance from parent missing or invalid; defaulting to %.0f km",
                       label, DEFAULT_SATELLITE_DISTANCE_KM)
        changes["distance_from_parent_km"] = DEFAULT_SATELLITE_DISTANCE_KM
    if record.orbital_period_days is None or record.orbital_period_days <= 0.0:
        logger.warning("%s: orbital period missing or invalid; satellite will not orbit", label)
        changes["orbital_period_days"] = None
    if record.rotation_period_hours is None:
        if "rotation_period_hours" in record.invalid:
            logger.warning("%s: rotation period invalid; defaulting to %.0f h",
                           label, DEFAULT_SATELLITE_ROTATION_HOURS)
        changes["rotation_period_hours"] = DEFAULT_SATELLITE_ROTATION_HOURS
    if record.mean_anomaly_deg is None:
        changes["mean_anomaly_deg"] = _random_phase(rng)
    return replace(record, **changes)


def resolve_body_record(record: BodyRecord, rng: Optional[random.Random] = None) -> BodyRecord:
    """
    Apply the defaulting policy to a parsed body record.

    Required fields (radius, distance, period of an orbiting body) log a
    warning when substituted. Optional fields (mean anomaly, eccentricity,
    axial tilt, rotation period) default silently when absent and log a
    warning only when a value was present but unusable. Eccentricity is not
    range-checked here; an out-of-range value has no sane fallback and is
    rejected when the body is built.
    """
    rng = rng or random.Random()
    changes = {}
    name = record.name

    if record.radius_km is None or record.radius_km <= 0.0:
        logger.warning("%s: radius missing or invalid; defaulting to %.0f km", name, DEFAULT_RADIUS_KM)
        changes["radius_km"] = DEFAULT_RADIUS_KM
    if record.distance_from_sun_km is None or record.distance_from_sun_km < 0.0:
        logger.warning("%s: distance from sun missing or invalid; defaulting to %.3g km",
                       name, DEFAULT_DISTANCE_KM)
        changes["distance_from_sun_km"] = DEFAULT_DISTANCE_KM
    distance = changes.get("distance_from_sun_km", record.distance_from_sun_km)
    if distance > 0.0 and (record.orbital_period_days is None or record.orbital_period_days <= 0.0):
        logger.warning("%s: orbital period missing or invalid; body will not orbit", name)
        changes["orbital_period_days"] = None
    if record.rotation_period_hours is None and "rotation_period_hours" in record.invalid:
        logger.warning("%s: rotation period invalid; body will not rotate", name)
    if record.mean_anomaly_deg is None:
        if "mean_anomaly_deg" in record.invalid:
            logger.warning("%s: mean anomaly invalid; using a random phase", name)
        changes["mean_anomaly_deg"] = _random_phase(rng)
    if record.eccentricity is None:
        if "eccentricity" in record.invalid:
            logger.warning("%s: eccentricity invalid; defaulting to a circular orbit", name)
        changes["eccentricity"] = 0.0
    if record.axial_tilt_deg is None:
        if "axial_tilt_deg" in record.invalid:
            logger.warning("%s: axial tilt invalid; defaulting to 0 deg", name)
        changes["axial_tilt_deg"] = 0.0

    changes["satellites"] = [resolve_satellite_record(s, name, rng) for s in record.satellites]
    return replace(record, **changes)

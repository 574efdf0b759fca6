#!/usr/bin/env python3
"""
Shared constants for the orrery (real units are km, days and hours; everything
the engine produces is in visual units).

Keeping constants in one place helps ensure values are consistent across the
codebase and makes tuning easier.
"""

# Reference quantities
AU_KM = 149_600_000.0  # km per astronomical unit
J2000_UNIX_SECONDS = 946_728_000.0  # 2000-01-01T12:00:00Z
SECONDS_PER_DAY = 86_400.0

# Scaling controls
DEFAULT_PLANET_SCALE = 1.5  # size multiplier for every body
DEFAULT_DISTANCE_SPREAD = 800.0  # spread of the logarithmic distance scale
DEFAULT_SUN_RADIUS = 300.0  # visual radius of the central body
DEFAULT_GLOBAL_SPEED = 1.5  # animation speed multiplier

RADIUS_DIVISOR_KM = 1200.0
SMALL_BODY_THRESHOLD_KM = 4000.0
SMALL_BODY_BOOST = 1.5
MIN_VISUAL_RADIUS = 1.0

SUN_SAFETY_MARGIN = 1.5  # orbits start beyond sun_radius * margin
LOG_DISTANCE_GAIN = 3.0

SATELLITE_DISTANCE_DIVISOR_KM = 3000.0
SATELLITE_DISTANCE_OFFSET = 5.0
SATELLITE_SPEED_BOOST = 10.0

ORBIT_SPEED_GAIN = 0.005
ROTATION_SPEED_GAIN = 0.005
HOURS_PER_DAY = 24.0

# Fallbacks for missing or invalid record fields
DEFAULT_RADIUS_KM = 1188.0  # Pluto-sized
DEFAULT_DISTANCE_KM = 5_900_000_000.0
DEFAULT_SATELLITE_RADIUS_KM = 200.0
DEFAULT_SATELLITE_DISTANCE_KM = 384_400.0
DEFAULT_SATELLITE_ROTATION_HOURS = 100.0
DEFAULT_COLOR = (200, 200, 255)

# Orbit trails
DEFAULT_TRAIL_CAPACITY = 10_000

# Focus framing
DEFAULT_FOCUS_ZOOM = 20.0

# Rendering (viewport)
VIEW_WIDTH = 1100
VIEW_HEIGHT = 800
BACKGROUND_COLOR = (4, 6, 12)
ORBIT_GUIDE_COLOR = (30, 34, 50)
TRAIL_COLOR = (150, 150, 160)
SELECTION_COLOR = (255, 255, 0)
HUD_COLOR = (200, 200, 200)

# Camera zoom bounds (visual units per pixel)
DEFAULT_UNITS_PER_PIXEL = 14.0
MIN_UNITS_PER_PIXEL = 0.01
MAX_UNITS_PER_PIXEL = 500.0

# Safety: avoid drawing outside reasonable integer pixel ranges
SAFE_COORD_LIMIT = 30000

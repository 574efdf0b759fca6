#!/usr/bin/env python3
"""
Vector helper functions for planar (x, z) operations.

These are small, fast functions for vector math used throughout the app.
"""
import math
from typing import Tuple

Vec2 = Tuple[float, float]
ORIGIN: Vec2 = (0.0, 0.0)


def clamp(x: float, a: float, b: float) -> float:
    """Clamp x to the inclusive range [a, b]."""
    return max(a, min(b, x))


def vec_add(a: Vec2, b: Vec2) -> Vec2:
    return (a[0] + b[0], a[1] + b[1])


def vec_sub(a: Vec2, b: Vec2) -> Vec2:
    return (a[0] - b[0], a[1] - b[1])


def vec_len(a: Vec2) -> float:
    return math.hypot(a[0], a[1])


def from_polar(angle: float, radius: float) -> Vec2:
    """Point at `radius` along `angle`, measured from +x towards +z."""
    return (math.cos(angle) * radius, math.sin(angle) * radius)

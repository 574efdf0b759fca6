#!/usr/bin/env python3
"""
Orbit trail recording.

A trail is a fixed-capacity, append-only list of sampled positions. It never
wraps around: once full it simply stops growing until it is disabled (which
clears it) and enabled again.
"""
from typing import List, Tuple

from .constants import DEFAULT_TRAIL_CAPACITY

Point = Tuple[float, float]


class OrbitTrailRecorder:
    """Sampled (x, z) positions of one body, gated by an enable flag."""

    def __init__(self, capacity: int = DEFAULT_TRAIL_CAPACITY):
        capacity = int(capacity)
        if capacity <= 0:
            raise ValueError(f"trail capacity must be positive, got {capacity}")
        self.capacity = capacity
        self.enabled = False
        self._points: List[Point] = []

    @property
    def count(self) -> int:
        """Number of valid leading samples."""
        return len(self._points)

    @property
    def is_full(self) -> bool:
        return len(self._points) >= self.capacity

    @property
    def points(self) -> List[Point]:
        return list(self._points)

    def record(self, position: Point) -> bool:
        """Append a sample. Returns False when disabled or at capacity."""
        if not self.enabled or self.is_full:
            return False
        self._points.append((float(position[0]), float(position[1])))
        return True

    def enable(self) -> None:
        # A previous disable() already cleared the buffer, so this resumes
        # into a fresh trace.
        self.enabled = True

    def disable(self) -> None:
        self.enabled = False
        self._points.clear()

    def set_enabled(self, enabled: bool) -> None:
        if enabled:
            self.enable()
        else:
            self.disable()

#!/usr/bin/env python3
"""
Camera towing for a focused body.

The tracker never moves a camera itself. Each tick it reports how far the
focused body moved so the owner of the camera can translate it by exactly
that amount; the camera keeps its offset and viewing angle to the body.
"""
from typing import Optional

from .bodies import CelestialBody
from .constants import DEFAULT_FOCUS_ZOOM
from .vector_utils import ORIGIN, Vec2, vec_sub


class FocusTracker:
    """Tracks at most one focused body and the delta it moved in the last tick."""

    def __init__(self):
        self.focused: Optional[CelestialBody] = None
        self._snapshot_body: Optional[CelestialBody] = None
        self._snapshot: Vec2 = ORIGIN

    def set_focus(self, body: Optional[CelestialBody]) -> None:
        """Focus on body (or on nothing). Any snapshot of the previous focus is dropped."""
        self.focused = body
        self._snapshot_body = None
        self._snapshot = ORIGIN

    def clear(self) -> None:
        self.set_focus(None)

    def begin_tick(self) -> None:
        """Remember where the focused body is before the bodies advance."""
        if self.focused is None:
            self._snapshot_body = None
            return
        self._snapshot_body = self.focused
        self._snapshot = self.focused.position

    def end_tick(self) -> Vec2:
        """
        Movement of the focused body since begin_tick().

        Returns (0, 0) when nothing is focused or when focus changed between
        the two calls, so a delta is never applied for the wrong body.
        """
        body = self.focused
        if body is None or body is not self._snapshot_body:
            self._snapshot_body = None
            return ORIGIN
        delta = vec_sub(body.position, self._snapshot)
        self._snapshot_body = None
        return delta

    @staticmethod
    def frame_extent(body: CelestialBody, zoom_factor: float = DEFAULT_FOCUS_ZOOM) -> float:
        """Viewing distance that frames body nicely: its visual radius times zoom_factor."""
        return body.visual_radius * zoom_factor

#!/usr/bin/env python3
"""
Camera utilities for the top-down (x, z) world-to-screen transform.
"""
from typing import Optional, Tuple
from .constants import (
    DEFAULT_UNITS_PER_PIXEL,
    MIN_UNITS_PER_PIXEL,
    MAX_UNITS_PER_PIXEL,
    VIEW_WIDTH,
    VIEW_HEIGHT,
)
from .vector_utils import Vec2, clamp


class Camera2D:
    """
    Simple 2D camera that maps world coordinates (visual units) to screen pixels.

    The center is the point the camera looks at. When a body is focused, the
    owner translates the camera by the body's per-tick delta so the body stays
    put on screen without resetting any user pan offset.
    """

    def __init__(self, center=(0.0, 0.0), units_per_pixel=DEFAULT_UNITS_PER_PIXEL):
        self.center = [center[0], center[1]]
        self.upp = units_per_pixel
        self.viewport_size = (VIEW_WIDTH, VIEW_HEIGHT)

    def set_viewport_size(self, w: int, h: int) -> None:
        self.viewport_size = (w, h)

    def world_to_screen(self, pos: Tuple[float, float]) -> Tuple[int, int]:
        cx, cz = self.center
        px = (pos[0] - cx) / self.upp + self.viewport_size[0] / 2
        py = (pos[1] - cz) / self.upp + self.viewport_size[1] / 2
        return (int(px), int(py))

    def screen_to_world(self, screen: Tuple[int, int]) -> Tuple[float, float]:
        cx, cz = self.center
        wx = (screen[0] - self.viewport_size[0] / 2) * self.upp + cx
        wz = (screen[1] - self.viewport_size[1] / 2) * self.upp + cz
        return (wx, wz)

    def zoom(self, factor, pivot_screen: Optional[Tuple[int, int]] = None):
        factor = clamp(factor, 0.05, 20.0)
        before = None
        if pivot_screen is not None:
            before = self.screen_to_world(pivot_screen)
        self.upp = clamp(self.upp * (1.0 / factor), MIN_UNITS_PER_PIXEL, MAX_UNITS_PER_PIXEL)
        if pivot_screen is not None and before is not None:
            after = self.screen_to_world(pivot_screen)
            self.center[0] += (before[0] - after[0])
            self.center[1] += (before[1] - after[1])

    def pan_pixels(self, dx_pixels, dy_pixels):
        self.center[0] -= dx_pixels * self.upp
        self.center[1] -= dy_pixels * self.upp

    def translate(self, delta: Vec2) -> None:
        """Move the camera by a world-space delta (focus towing)."""
        self.center[0] += delta[0]
        self.center[1] += delta[1]

    def frame(self, target: Vec2, half_extent: float) -> None:
        """Center on target and zoom so half_extent fills half the shorter viewport side."""
        self.center = [target[0], target[1]]
        half_px = max(min(self.viewport_size) / 2, 1)
        self.upp = clamp(half_extent / half_px, MIN_UNITS_PER_PIXEL, MAX_UNITS_PER_PIXEL)

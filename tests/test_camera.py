"""Tests for the top-down camera."""
import pytest

from orrery.camera import Camera2D
from orrery.constants import MAX_UNITS_PER_PIXEL


class TestCamera2D:

    def test_round_trip_of_center(self):
        cam = Camera2D(center=(100.0, -50.0), units_per_pixel=2.0)
        cam.set_viewport_size(800, 600)
        assert cam.world_to_screen((100.0, -50.0)) == (400, 300)
        assert cam.screen_to_world((400, 300)) == (100.0, -50.0)

    def test_translate_keeps_target_on_screen(self):
        cam = Camera2D(units_per_pixel=1.0)
        target = (10.0, 20.0)
        before = cam.world_to_screen(target)
        moved = (13.0, 16.0)
        cam.translate((3.0, -4.0))
        assert cam.world_to_screen(moved) == before

    def test_frame(self):
        cam = Camera2D()
        cam.set_viewport_size(800, 600)
        cam.frame((5.0, 5.0), 300.0)
        assert cam.center == [5.0, 5.0]
        assert cam.upp == pytest.approx(1.0)

    def test_zoom_is_clamped(self):
        cam = Camera2D(units_per_pixel=MAX_UNITS_PER_PIXEL)
        cam.zoom(0.5)
        assert cam.upp == MAX_UNITS_PER_PIXEL

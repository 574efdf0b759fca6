"""Tests for the pause flag and time multiplier."""
import logging

from orrery.time_control import TimeController


class TestTimeController:

    def test_defaults(self):
        tc = TimeController()
        assert tc.time_scale == 1.0
        assert not tc.paused
        assert tc.should_advance

    def test_toggle_pause(self):
        tc = TimeController()
        assert tc.toggle_pause() is True
        assert not tc.should_advance
        assert tc.toggle_pause() is False

    def test_pause_resume(self):
        tc = TimeController()
        tc.pause()
        assert tc.paused
        tc.resume()
        assert not tc.paused

    def test_any_finite_scale_is_accepted(self):
        tc = TimeController()
        for value in (0.0, -3.5, 1e6, "2.5"):
            assert tc.set_time_scale(value)
        assert tc.time_scale == 2.5

    def test_non_finite_scale_is_rejected(self, caplog):
        tc = TimeController(time_scale=4.0)
        with caplog.at_level(logging.WARNING, logger="orrery.time_control"):
            assert not tc.set_time_scale(float("inf"))
            assert not tc.set_time_scale(float("nan"))
            assert not tc.set_time_scale("fast")
        assert tc.time_scale == 4.0
        assert len(caplog.records) == 3

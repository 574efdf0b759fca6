#!/usr/bin/env python3
"""
Pause flag and time multiplier shared by every body in a tick.
"""
import logging
import math

logger = logging.getLogger(__name__)


class TimeController:
    """
    Paused is a full freeze: the frame driver issues no advance at all, so
    bodies keep their exact angle and position and resuming is lossless. A
    time scale of 0 is different: bodies are advanced by zero.

    time_scale may be negative, which runs every orbit and spin backwards.
    """

    def __init__(self, time_scale: float = 1.0, paused: bool = False):
        self.time_scale = float(time_scale)
        self.paused = bool(paused)

    @property
    def should_advance(self) -> bool:
        return not self.paused

    def set_time_scale(self, value: float) -> bool:
        """Set the multiplier. Non-finite values are rejected and leave it unchanged."""
        try:
            value = float(value)
        except (TypeError, ValueError):
            logger.warning("Ignoring non-numeric time scale %r", value)
            return False
        if not math.isfinite(value):
            logger.warning("Ignoring non-finite time scale %r", value)
            return False
        self.time_scale = value
        return True

    def toggle_pause(self) -> bool:
        """Flip the pause flag and return the new state."""
        self.paused = not self.paused
        return self.paused

    def pause(self) -> None:
        self.paused = True

    def resume(self) -> None:
        self.paused = False

#!/usr/bin/env python3
"""
Simulation context: the bodies of one system plus its time and focus state.

One Simulation is owned by whoever drives the frames; nothing here is global.
The context is single-threaded and holds no locks. A frame driver calls
tick() once per rendered frame and UI code uses the control surface
(set_time_scale, toggle_pause, set_focus, toggle_trail) between ticks.
"""
import logging
import random
from datetime import datetime
from typing import List, Optional

from .bodies import CelestialBody, build_bodies
from .dataset_loader import Dataset
from .errors import UnknownBodyError
from .focus import FocusTracker
from .scaling import ScalingSystem
from .time_control import TimeController
from .vector_utils import ORIGIN, Vec2

logger = logging.getLogger(__name__)


class Simulation:
    """
    Explicit simulation state.

    Attributes:
        bodies: Bodies in dataset order.
        scaling: Conversion boundary the bodies were built with.
        time: Pause flag and time multiplier.
        focus: Focused body and its per-tick delta.
        tick_count: Number of ticks that actually advanced the bodies.
    """

    def __init__(self, bodies: List[CelestialBody], scaling: Optional[ScalingSystem] = None,
                 time_scale: float = 1.0):
        self.bodies = list(bodies)
        self.scaling = scaling or ScalingSystem()
        self.time = TimeController(time_scale)
        self.focus = FocusTracker()
        self.tick_count = 0

    @classmethod
    def from_dataset(cls, dataset: Dataset, epoch: Optional[datetime] = None,
                     seed: Optional[int] = None) -> "Simulation":
        """Build every body of dataset with one scaling system and one seeded RNG."""
        scaling = ScalingSystem.from_settings(dataset.settings)
        rng = random.Random(seed)
        bodies = build_bodies(dataset.records, scaling, epoch=epoch, rng=rng)
        time_scale = dataset.time_scale if dataset.time_scale is not None else 1.0
        logger.info("Built %d of %d bodies for '%s'", len(bodies), len(dataset.records), dataset.name)
        return cls(bodies, scaling=scaling, time_scale=time_scale)

    # -----------------------
    # Tick
    # -----------------------

    def tick(self) -> Vec2:
        """
        Advance every body once and return the focus delta.

        While paused nothing is touched and the delta is (0, 0). Every body
        and satellite uses the same time scale, read once per tick.
        """
        if not self.time.should_advance:
            return ORIGIN
        time_scale = self.time.time_scale
        self.focus.begin_tick()
        for body in self.bodies:
            body.advance(time_scale)
        self.tick_count += 1
        return self.focus.end_tick()

    # -----------------------
    # Lookups
    # -----------------------

    def body(self, name: str) -> CelestialBody:
        """Find a body by name (case-insensitive)."""
        wanted = name.lower()
        for b in self.bodies:
            if b.name.lower() == wanted:
                return b
        raise UnknownBodyError(name)

    def body_names(self) -> List[str]:
        return [b.name for b in self.bodies]

    # -----------------------
    # Control surface
    # -----------------------

    def set_time_scale(self, value: float) -> bool:
        return self.time.set_time_scale(value)

    def toggle_pause(self) -> bool:
        return self.time.toggle_pause()

    def set_focus(self, name: Optional[str]) -> Optional[CelestialBody]:
        """Focus on the named body, or on nothing when name is None."""
        body = self.body(name) if name is not None else None
        self.focus.set_focus(body)
        return body

    def toggle_trail(self, name: str, enabled: bool) -> None:
        self.body(name).trail.set_enabled(enabled)

    def set_all_trails(self, enabled: bool) -> None:
        for b in self.bodies:
            b.trail.set_enabled(enabled)

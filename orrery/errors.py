#!/usr/bin/env python3
"""
Exceptions raised by the orrery core.

Malformed numeric fields are not errors: they are defaulted where records are
resolved. Only conditions with no sane fallback are raised.
"""


class OrreryError(Exception):
    """Base class for orrery errors."""


class OrbitConfigurationError(OrreryError, ValueError):
    """A body record describes an orbit that cannot be animated."""


class InvalidEccentricityError(OrbitConfigurationError):
    """Eccentricity outside [0, 1); the polar ellipse equation would diverge."""

    def __init__(self, name: str, eccentricity: float):
        super().__init__(f"{name}: eccentricity {eccentricity!r} is outside [0, 1)")
        self.name = name
        self.eccentricity = eccentricity


class UnknownBodyError(OrreryError, KeyError):
    """A control call named a body that is not part of the simulation."""

    def __str__(self) -> str:
        return f"unknown body: {self.args[0]!r}"


class DatasetError(OrreryError):
    """A dataset file could not be read or parsed."""

#!/usr/bin/env python3
"""
General utilities for the orrery.
"""
import math
from typing import Optional


def try_float(val) -> Optional[float]:
    try:
        return float(val)
    except Exception:
        return None


def finite_or_none(val) -> Optional[float]:
    """Coerce val to a finite float; missing, non-numeric, NaN and inf give None."""
    if val is None or isinstance(val, bool):
        return None
    f = try_float(val)
    if f is None or not math.isfinite(f):
        return None
    return f

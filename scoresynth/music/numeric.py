"""Small numeric helpers shared by the oscillators, envelope and renderer."""

from typing import Union

import numpy as np

ArrayOrFloat = Union[float, np.ndarray]


def clamp(value: ArrayOrFloat, low: float, high: float) -> ArrayOrFloat:
    if isinstance(value, np.ndarray):
        return np.clip(value, low, high)
    return max(low, min(high, value))


def lerp(start: ArrayOrFloat, stop: ArrayOrFloat, fraction: ArrayOrFloat) -> ArrayOrFloat:
    return start + (stop - start) * fraction


def ramp(position: ArrayOrFloat, length: float) -> ArrayOrFloat:
    """Fraction of a linear ramp of ``length`` covered at ``position``.

    A zero-length ramp is already complete, so it reports 1.0 everywhere.
    """
    if length <= 0:
        if isinstance(position, np.ndarray):
            return np.ones_like(position, dtype=np.float64)
        return 1.0
    return clamp(position / length, 0.0, 1.0)


def wrap_phase(virtual_time: ArrayOrFloat) -> ArrayOrFloat:
    # np.mod keeps the sign of the divisor, so negative times land in [0, 1)
    phase = np.mod(virtual_time, 1.0)
    # tiny negative inputs round up to exactly 1.0
    phase = np.where(phase >= 1.0, 0.0, phase)
    if isinstance(virtual_time, np.ndarray):
        return phase
    return float(phase)

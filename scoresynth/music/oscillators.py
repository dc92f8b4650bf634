import math
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Iterable, Optional, Tuple

import numpy as np

from .numeric import ArrayOrFloat, wrap_phase

NOISE_TERMS = 100
NOISE_SPREAD = 7  # integer multipliers keep the noise periodic in virtual time
NOISE_THRESHOLD = 0.5
NOISE_PHASE_STEP = 0.6180339887498949  # irrational, so the average never ties at the threshold


class WaveKind(Enum):
    SQUARE = "square"
    TRIANGLE = "triangle"
    SINE = "sine"
    SAWTOOTH = "sawtooth"
    PULSE = "pulse"
    NOISE = "noise"
    HARMONICS = "harmonics"


@dataclass(frozen=True)
class WaveForm:
    kind: WaveKind
    ratio: Optional[float] = None  # pulse only, fraction of the period spent high
    weights: Tuple[float, ...] = ()  # harmonics only, weights[k-1] for harmonic k

    @classmethod
    def pulse(cls, ratio: float) -> "WaveForm":
        return cls(WaveKind.PULSE, ratio=ratio)

    @classmethod
    def harmonics(cls, weights: Iterable[float]) -> "WaveForm":
        return cls(WaveKind.HARMONICS, weights=tuple(float(w) for w in weights))

    def describe(self) -> str:
        if self.kind is WaveKind.PULSE:
            return f"pulse:{self.ratio:g}"
        if self.kind is WaveKind.HARMONICS:
            return "harmonics:" + ",".join(f"{w:g}" for w in self.weights)
        return self.kind.value


def _as_float(virtual_time: ArrayOrFloat, result: np.ndarray) -> ArrayOrFloat:
    if isinstance(virtual_time, np.ndarray):
        return result
    return float(result)


def sine_wave(virtual_time: ArrayOrFloat) -> ArrayOrFloat:
    phase = wrap_phase(virtual_time)
    return _as_float(virtual_time, (1.0 + np.sin(np.multiply(phase, math.tau))) / 2.0)


def square_wave(virtual_time: ArrayOrFloat) -> ArrayOrFloat:
    phase = wrap_phase(virtual_time)
    return _as_float(virtual_time, np.where(phase < 0.5, 0.0, 1.0))


def triangle_wave(virtual_time: ArrayOrFloat) -> ArrayOrFloat:
    phase = wrap_phase(virtual_time)
    return _as_float(virtual_time, np.where(phase < 0.5, phase * 2.0, (1.0 - phase) * 2.0))


def saw_tooth_wave(virtual_time: ArrayOrFloat) -> ArrayOrFloat:
    return wrap_phase(virtual_time)


def pulse_wave(virtual_time: ArrayOrFloat, ratio: float) -> ArrayOrFloat:
    phase = wrap_phase(virtual_time)
    return _as_float(virtual_time, np.where(phase < 1.0 - ratio, 0.0, 1.0))


def noise_wave(virtual_time: ArrayOrFloat) -> ArrayOrFloat:
    """Deterministic pseudo-noise.

    Averages NOISE_TERMS sines at spread integer multiples of the base
    frequency, each with its own fixed phase offset, then thresholds the
    average into a two-level signal. The same virtual time always yields
    the same value.
    """
    t = np.asarray(wrap_phase(virtual_time), dtype=np.float64)
    total = np.zeros_like(t)
    for k in range(NOISE_TERMS):
        total = total + sine_wave(t * ((k + 1) * NOISE_SPREAD) + k * k * NOISE_PHASE_STEP)
    average = total / NOISE_TERMS
    return _as_float(virtual_time, np.where(average < NOISE_THRESHOLD, 0.0, 1.0))


def harmonics_wave(virtual_time: ArrayOrFloat, weights: Tuple[float, ...]) -> ArrayOrFloat:
    t = np.asarray(wrap_phase(virtual_time), dtype=np.float64)
    weight_sum = float(sum(weights))
    if weight_sum <= 0:
        return _as_float(virtual_time, np.full_like(t, 0.5))
    total = np.zeros_like(t)
    for harmonic, weight in enumerate(weights, start=1):
        if weight:
            total = total + weight * sine_wave(t * harmonic)
    return _as_float(virtual_time, total / weight_sum)


_SIMPLE_WAVES: Dict[WaveKind, Callable[[ArrayOrFloat], ArrayOrFloat]] = {
    WaveKind.SQUARE: square_wave,
    WaveKind.TRIANGLE: triangle_wave,
    WaveKind.SINE: sine_wave,
    WaveKind.SAWTOOTH: saw_tooth_wave,
    WaveKind.NOISE: noise_wave,
}


def evaluate(waveform: WaveForm, virtual_time: ArrayOrFloat) -> ArrayOrFloat:
    """Unipolar amplitude in [0, 1] of ``waveform`` at ``virtual_time`` (period 1)."""
    if waveform.kind is WaveKind.PULSE:
        return pulse_wave(virtual_time, waveform.ratio if waveform.ratio is not None else 0.5)
    if waveform.kind is WaveKind.HARMONICS:
        return harmonics_wave(virtual_time, waveform.weights)
    return _SIMPLE_WAVES[waveform.kind](virtual_time)

import math
from typing import Optional

import numpy as np

from .numeric import ArrayOrFloat


def _glide_phase(elapsed: np.ndarray, freq_start: float, freq_end: float, duration_s: float) -> np.ndarray:
    # integral of freq_start * (freq_end / freq_start) ** (t / duration_s), zero at t=0
    ln_ratio = math.log(freq_end / freq_start)
    scale = freq_start * duration_s / ln_ratio
    inside = np.minimum(elapsed, duration_s)
    phase = scale * np.expm1(ln_ratio * inside / duration_s)
    # release tail keeps sounding at the target frequency
    overshoot = np.maximum(elapsed - duration_s, 0.0)
    return phase + overshoot * freq_end


def vibrato_phase(elapsed: ArrayOrFloat, lfo_freq: float, depth: float = 1.0) -> ArrayOrFloat:
    angular = math.tau * lfo_freq
    return depth * np.sin(np.multiply(elapsed, angular)) / angular


def scale_time(
    elapsed_s: ArrayOrFloat,
    freq_start: float,
    freq_end: Optional[float] = None,
    lfo_freq: Optional[float] = None,
    duration_s: float = 0.0,
    vibrato_depth: float = 1.0,
) -> ArrayOrFloat:
    """Turn seconds since note start into oscillator virtual time.

    Without glide or vibrato this is ``elapsed_s * freq_start``. A glide
    sweeps exponentially from ``freq_start`` to ``freq_end`` over
    ``duration_s``; vibrato adds the phase integral of a sinusoidal
    frequency modulation at ``lfo_freq``.
    """
    elapsed = np.asarray(elapsed_s, dtype=np.float64)
    gliding = (
        freq_end is not None
        and freq_end != freq_start
        and freq_start > 0
        and freq_end > 0
        and duration_s > 0
    )
    if gliding:
        phase = _glide_phase(elapsed, freq_start, freq_end, duration_s)
    else:
        phase = elapsed * freq_start

    if lfo_freq:
        phase = phase + vibrato_phase(elapsed, lfo_freq, vibrato_depth)

    if isinstance(elapsed_s, np.ndarray):
        return phase
    return float(phase)

import numpy as np

from .numeric import ArrayOrFloat, clamp, lerp, ramp


def volume_multiplier(
    elapsed_ms: ArrayOrFloat,
    until_end_ms: ArrayOrFloat,
    attack_ms: float,
    decay_ms: float,
    sustain: float,
    release_ms: float,
) -> ArrayOrFloat:
    """ADSR multiplier in [0, 1].

    ``until_end_ms`` counts down to the end of the release tail, so the
    release stage covers the last ``release_ms`` of the audible span and
    fades whatever level attack/decay/sustain produced at that point.
    Zero-length stages count as already finished.
    """
    elapsed = np.asarray(elapsed_ms, dtype=np.float64)
    until_end = np.asarray(until_end_ms, dtype=np.float64)

    attack_level = ramp(elapsed, attack_ms)
    decay_level = lerp(1.0, sustain, ramp(elapsed - attack_ms, decay_ms))
    level = np.where(elapsed < attack_ms, attack_level, decay_level)

    if release_ms > 0:
        level = level * np.where(until_end < release_ms, ramp(until_end, release_ms), 1.0)
    level = np.where(until_end < 0, 0.0, level)
    level = clamp(level, 0.0, 1.0)

    if isinstance(elapsed_ms, np.ndarray) or isinstance(until_end_ms, np.ndarray):
        return level
    return float(level)


def note_multiplier(
    elapsed_ms: ArrayOrFloat,
    duration_ms: float,
    attack_ms: float,
    decay_ms: float,
    sustain: float,
    release_ms: float,
) -> ArrayOrFloat:
    """Envelope for a note of nominal ``duration_ms`` followed by its release."""
    span = duration_ms + release_ms
    capped = clamp(np.asarray(elapsed_ms, dtype=np.float64), 0.0, span)
    level = volume_multiplier(capped, span - capped, attack_ms, decay_ms, sustain, release_ms)
    beyond = np.asarray(elapsed_ms, dtype=np.float64) > span
    level = np.where(beyond, 0.0, level)
    if isinstance(elapsed_ms, np.ndarray):
        return level
    return float(level)

import io
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np
from pydub import AudioSegment

from ..config import RenderSettings
from .types import Note, Score

_LOG = logging.getLogger("scoresynth.synthesis")

# bit depth -> (numpy dtype, full scale, minimum, maximum)
PCM_FORMATS: Dict[int, Tuple[str, int, int, int]] = {
    16: ("<i2", 32767, -32768, 32767),
    8: ("i1", 127, -128, 127),
}


def sample_count(score: Score, sample_rate: int) -> int:
    seconds = score.length_seconds()
    return int(round(seconds * sample_rate))


def _render_block(
    notes: Sequence[Note],
    tempo: float,
    sample_rate: int,
    first: int,
    stop: int,
) -> np.ndarray:
    indices = np.arange(first, stop, dtype=np.float64)
    seconds = indices / sample_rate
    beats = seconds * tempo / 60.0
    mix = np.zeros(stop - first, dtype=np.float64)
    if not len(mix):
        return mix

    first_beat, last_beat = beats[0], beats[-1]
    for note in notes:
        # notes are sorted by start, nothing later can reach this block
        if note.start > last_beat:
            break
        end = note.audible_end(tempo)
        if end < first_beat:
            continue
        active = (beats >= note.start) & (beats <= end)
        if not active.any():
            continue
        mix[active] += note.amplitude_at(seconds[active], tempo)
    return mix


def _block_ranges(total: int, block_size: int) -> List[Tuple[int, int]]:
    return [(first, min(first + block_size, total)) for first in range(0, total, block_size)]


def mix_score(score: Score, settings: Optional[RenderSettings] = None) -> np.ndarray:
    """Sum every note into a float buffer, one value per output sample.

    Values are bipolar; 1.0 is full scale. Nothing is clipped yet.
    """
    settings = settings or RenderSettings()
    tempo = score.meta.tempo
    total = sample_count(score, settings.sample_rate)
    notes = score.sorted_notes()
    mix = np.zeros(total, dtype=np.float64)
    ranges = _block_ranges(total, settings.samples_per_block)

    _LOG.debug(
        "mixing %d notes into %d samples (%d blocks, %d workers)",
        len(notes),
        total,
        len(ranges),
        settings.workers,
    )

    def render_into(bounds: Tuple[int, int]) -> None:
        first, stop = bounds
        # each block owns mix[first:stop] exclusively
        mix[first:stop] = _render_block(notes, tempo, settings.sample_rate, first, stop)

    if settings.workers > 1 and len(ranges) > 1:
        with ThreadPoolExecutor(max_workers=settings.workers) as pool:
            list(pool.map(render_into, ranges))
    else:
        for bounds in ranges:
            render_into(bounds)
    return mix


def encode_pcm(mix: np.ndarray, bit_depth: int = 16) -> bytes:
    """Scale to the signed integer range and hard clip, never wrap."""
    dtype, full_scale, minimum, maximum = PCM_FORMATS[bit_depth]
    scaled = np.round(np.asarray(mix, dtype=np.float64) * full_scale)
    clipped = np.clip(scaled, minimum, maximum)
    clipped_count = int(np.count_nonzero(clipped != scaled))
    if clipped_count:
        _LOG.info("clipped %d of %d samples", clipped_count, len(scaled))
    return clipped.astype(dtype).tobytes()


def render_score(score: Score, settings: Optional[RenderSettings] = None) -> bytes:
    """Raw mono PCM payload for ``score``."""
    settings = settings or RenderSettings()
    return encode_pcm(mix_score(score, settings), settings.bit_depth)


def render_score_to_wav(
    score: Score,
    settings: Optional[RenderSettings] = None,
) -> Tuple[io.BytesIO, float]:
    settings = settings or RenderSettings()
    payload = render_score(score, settings)
    segment = AudioSegment(
        payload,
        frame_rate=settings.sample_rate,
        sample_width=settings.sample_width,
        channels=1,
    )

    buffer = io.BytesIO()
    segment.export(buffer, format="wav")
    buffer.seek(0)
    duration = segment.frame_count() / settings.sample_rate
    return buffer, duration

from dataclasses import dataclass, field, replace
from typing import List, Optional

import numpy as np

from .envelope import note_multiplier
from .numeric import ArrayOrFloat
from .oscillators import WaveForm, WaveKind, evaluate
from .timewarp import scale_time

DEFAULT_TEMPO = 120.0


def beats_to_seconds(beats: float, tempo: float) -> float:
    return beats * 60.0 / tempo


def seconds_to_beats(seconds: float, tempo: float) -> float:
    return seconds * tempo / 60.0


@dataclass(frozen=True)
class Note:
    waveform: WaveForm = WaveForm(WaveKind.SQUARE)
    volume: float = 0.5  # 0..1
    frequency: float = 440.0  # Hz
    glide: Optional[float] = None  # Hz, target of the pitch slide
    vibrato: Optional[float] = None  # Hz, LFO rate
    vibrato_depth: float = 1.0  # Hz of frequency deviation
    duration: float = 1.0  # beats
    start: float = 0.0  # beats
    attack: float = 0.0  # ms
    decay: float = 0.0  # ms
    sustain: float = 1.0  # 0..1
    release: float = 0.0  # ms

    def delayed_by(self, beats: float) -> "Note":
        return replace(self, start=self.start + beats)

    def release_beats(self, tempo: float) -> float:
        return seconds_to_beats(self.release / 1000.0, tempo)

    def audible_end(self, tempo: float) -> float:
        """Beat at which the release tail has fully faded."""
        return self.start + self.duration + self.release_beats(tempo)

    def is_active(self, beat: float, tempo: float) -> bool:
        return self.start <= beat <= self.audible_end(tempo)

    def amplitude_at(self, seconds: ArrayOrFloat, tempo: float) -> ArrayOrFloat:
        """Bipolar contribution of this note at absolute time ``seconds``.

        Includes the note volume and envelope. Only meaningful while the
        note is active; outside that window the envelope reports silence.
        """
        elapsed = np.asarray(seconds, dtype=np.float64) - beats_to_seconds(self.start, tempo)
        duration_s = beats_to_seconds(self.duration, tempo)
        envelope = note_multiplier(
            elapsed * 1000.0,
            duration_s * 1000.0,
            self.attack,
            self.decay,
            self.sustain,
            self.release,
        )
        virtual_time = scale_time(
            elapsed,
            self.frequency,
            self.glide,
            self.vibrato,
            duration_s,
            self.vibrato_depth,
        )
        unipolar = evaluate(self.waveform, virtual_time)
        contribution = self.volume * envelope * (2.0 * np.asarray(unipolar) - 1.0)
        if isinstance(seconds, np.ndarray):
            return contribution
        return float(contribution)


@dataclass
class MetaData:
    tempo: float = DEFAULT_TEMPO  # beats per minute
    length: Optional[float] = None  # beats, None means "until the last note fades"


@dataclass
class Score:
    notes: List[Note] = field(default_factory=list)
    meta: MetaData = field(default_factory=MetaData)

    def sorted_notes(self) -> List[Note]:
        return sorted(self.notes, key=lambda n: n.start)

    def end_beat(self) -> float:
        if not self.notes:
            return 0.0
        return max(note.audible_end(self.meta.tempo) for note in self.notes)

    def length_beats(self) -> float:
        if self.meta.length is not None:
            return self.meta.length
        return self.end_beat()

    def length_seconds(self) -> float:
        return beats_to_seconds(self.length_beats(), self.meta.tempo)

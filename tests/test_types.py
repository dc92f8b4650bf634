import numpy as np
import pytest

from scoresynth.music.oscillators import WaveForm, WaveKind, sine_wave
from scoresynth.music.types import MetaData, Note, Score


def test_delayed_by_copies_with_shifted_start() -> None:
    note = Note(frequency=330.0, start=1.0, duration=0.5, release=20.0)
    later = note.delayed_by(2.0)
    assert later.start == 3.0
    assert later.frequency == note.frequency
    assert later.release == note.release
    assert note.start == 1.0


def test_audible_end_includes_release() -> None:
    note = Note(start=1.0, duration=2.0, release=500.0)
    # 500 ms at 120 bpm is one beat
    assert note.release_beats(120.0) == pytest.approx(1.0)
    assert note.audible_end(120.0) == pytest.approx(4.0)
    assert note.is_active(4.0, 120.0)
    assert not note.is_active(4.01, 120.0)
    assert not note.is_active(0.99, 120.0)


def test_amplitude_is_bipolar_volume_scaled() -> None:
    note = Note(waveform=WaveForm(WaveKind.SQUARE), volume=0.5, frequency=1.0, duration=1.0)
    assert note.amplitude_at(0.25, 60.0) == pytest.approx(-0.5)
    assert note.amplitude_at(0.75, 60.0) == pytest.approx(0.5)


def test_amplitude_without_glide_uses_constant_frequency() -> None:
    note = Note(waveform=WaveForm(WaveKind.SINE), volume=0.8, frequency=3.0, start=0.5, duration=4.0)
    seconds = np.linspace(0.5, 2.0, 50)
    expected = 0.8 * (2.0 * sine_wave((seconds - 0.5) * 3.0) - 1.0)
    assert np.allclose(note.amplitude_at(seconds, 60.0), expected)


def test_score_length_defaults_to_last_release() -> None:
    score = Score(
        notes=[Note(start=0.0, duration=1.0), Note(start=2.0, duration=1.0, release=1000.0)],
        meta=MetaData(tempo=60.0),
    )
    assert score.length_beats() == pytest.approx(4.0)
    assert score.length_seconds() == pytest.approx(4.0)


def test_explicit_length_wins() -> None:
    score = Score(notes=[Note(start=0.0, duration=10.0)], meta=MetaData(tempo=120.0, length=2.0))
    assert score.length_beats() == 2.0
    assert score.length_seconds() == pytest.approx(1.0)


def test_empty_score_has_no_length() -> None:
    assert Score().length_beats() == 0.0


def test_sorted_notes_orders_by_start() -> None:
    score = Score(notes=[Note(start=2.0), Note(start=0.0), Note(start=1.0)])
    assert [note.start for note in score.sorted_notes()] == [0.0, 1.0, 2.0]
    assert [note.start for note in score.notes] == [2.0, 0.0, 1.0]

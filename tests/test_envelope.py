import numpy as np
import pytest

from scoresynth.music.envelope import note_multiplier, volume_multiplier


def test_attack_ramps_up() -> None:
    assert volume_multiplier(0.0, 1000.0, 10.0, 0.0, 1.0, 0.0) == pytest.approx(0.0)
    assert volume_multiplier(5.0, 1000.0, 10.0, 0.0, 1.0, 0.0) == pytest.approx(0.5)


def test_decay_ramps_to_sustain() -> None:
    assert volume_multiplier(10.0, 1000.0, 10.0, 10.0, 0.5, 0.0) == pytest.approx(1.0)
    assert volume_multiplier(15.0, 1000.0, 10.0, 10.0, 0.5, 0.0) == pytest.approx(0.75)
    assert volume_multiplier(100.0, 1000.0, 10.0, 10.0, 0.5, 0.0) == pytest.approx(0.5)


def test_release_fades_sustain_level() -> None:
    assert volume_multiplier(500.0, 25.0, 10.0, 10.0, 0.5, 50.0) == pytest.approx(0.25)
    assert volume_multiplier(500.0, 0.0, 10.0, 10.0, 0.5, 50.0) == pytest.approx(0.0)


def test_release_during_decay_fades_current_level() -> None:
    assert volume_multiplier(15.0, 10.0, 10.0, 10.0, 0.5, 20.0) == pytest.approx(0.375)


def test_zero_length_stages_are_complete() -> None:
    assert volume_multiplier(0.0, 0.0, 0.0, 0.0, 1.0, 0.0) == pytest.approx(1.0)
    assert volume_multiplier(0.0, 100.0, 0.0, 0.0, 0.3, 0.0) == pytest.approx(0.3)


def test_plain_note_is_full_then_silent() -> None:
    for elapsed in [0.0, 250.0, 999.0, 1000.0]:
        assert note_multiplier(elapsed, 1000.0, 0.0, 0.0, 1.0, 0.0) == pytest.approx(1.0)
    assert note_multiplier(1000.5, 1000.0, 0.0, 0.0, 1.0, 0.0) == 0.0


def test_release_extends_past_duration() -> None:
    assert note_multiplier(1000.0, 1000.0, 0.0, 0.0, 1.0, 100.0) == pytest.approx(1.0)
    assert note_multiplier(1050.0, 1000.0, 0.0, 0.0, 1.0, 100.0) == pytest.approx(0.5)
    assert note_multiplier(1100.0, 1000.0, 0.0, 0.0, 1.0, 100.0) == pytest.approx(0.0)
    assert note_multiplier(1200.0, 1000.0, 0.0, 0.0, 1.0, 100.0) == 0.0


def test_array_values_stay_in_unit_range() -> None:
    elapsed = np.linspace(-10.0, 1500.0, 3001)
    levels = note_multiplier(elapsed, 1000.0, 40.0, 120.0, 0.6, 300.0)
    assert isinstance(levels, np.ndarray)
    assert np.all(levels >= 0.0)
    assert np.all(levels <= 1.0)

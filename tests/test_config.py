import pytest

from scoresynth.config import DEFAULT_SAMPLE_RATE, RenderSettings
from scoresynth.errors import RenderError


def test_defaults() -> None:
    settings = RenderSettings()
    assert settings.sample_rate == DEFAULT_SAMPLE_RATE == 16000
    assert settings.bit_depth == 16
    assert settings.sample_width == 2
    assert settings.samples_per_block == 16000


def test_from_env_reads_overrides(monkeypatch) -> None:
    monkeypatch.setenv("SCORESYNTH_SAMPLE_RATE", "22050")
    monkeypatch.setenv("SCORESYNTH_BIT_DEPTH", "8")
    monkeypatch.setenv("SCORESYNTH_WORKERS", "")
    settings = RenderSettings.from_env()
    assert settings.sample_rate == 22050
    assert settings.bit_depth == 8
    assert settings.sample_width == 1
    assert settings.workers == 1


def test_from_env_rejects_garbage(monkeypatch) -> None:
    monkeypatch.setenv("SCORESYNTH_WORKERS", "many")
    with pytest.raises(RenderError):
        RenderSettings.from_env()


def test_with_overrides_skips_none() -> None:
    settings = RenderSettings(sample_rate=8000).with_overrides(sample_rate=None, workers=4)
    assert settings.sample_rate == 8000
    assert settings.workers == 4


@pytest.mark.parametrize(
    "kwargs",
    [{"sample_rate": 0}, {"bit_depth": 24}, {"workers": 0}, {"block_size": -5}],
)
def test_invalid_settings(kwargs) -> None:
    with pytest.raises(RenderError):
        RenderSettings(**kwargs)

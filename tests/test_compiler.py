import io
import wave
from pathlib import Path

import pytest

from scoresynth import RenderSettings, ScoreCompiler, ScoreSyntaxError

SCORE = [
    "META tempo=120 length=2",
    "DEFAULT wave=square volume=0.3 release=50",
    "NOTE note=A4 duration=1",
    "NOTE note=E5 duration=1",
]


def test_compile_to_path(tmp_path: Path) -> None:
    target = tmp_path / "out.wav"
    compiler = ScoreCompiler(RenderSettings(sample_rate=8000))
    duration = compiler.compile_to_path(SCORE, target)
    assert duration == pytest.approx(1.0)
    with wave.open(str(target), "rb") as handle:
        assert handle.getframerate() == 8000
        assert handle.getnframes() == 8000


def test_compile_stream_writes_wav_bytes() -> None:
    out = io.BytesIO()
    ScoreCompiler(RenderSettings(sample_rate=8000, bit_depth=8)).compile_stream(SCORE, out)
    assert out.getvalue()[:4] == b"RIFF"
    assert out.getvalue()[8:12] == b"WAVE"


def test_strict_compiler_raises() -> None:
    compiler = ScoreCompiler(RenderSettings(sample_rate=8000), strict=True)
    with pytest.raises(ScoreSyntaxError):
        compiler.compile_lines(["NOTE duration=soon"])


def test_compiler_reads_settings_from_env(monkeypatch) -> None:
    monkeypatch.setenv("SCORESYNTH_SAMPLE_RATE", "11025")
    assert ScoreCompiler().settings.sample_rate == 11025

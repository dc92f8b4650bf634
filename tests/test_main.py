import wave
from pathlib import Path

import main

EXAMPLE = Path(__file__).resolve().parent.parent / "examples" / "arpeggio.score"


def test_main_renders_score_file(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.delenv("SCORESYNTH_SAMPLE_RATE", raising=False)
    target = tmp_path / "arpeggio.wav"
    code = main.main([str(EXAMPLE), "-o", str(target), "--sample-rate", "8000", "--workers", "2"])
    assert code == 0
    with wave.open(str(target), "rb") as handle:
        assert handle.getframerate() == 8000
        # 8 beats at 120 bpm
        assert handle.getnframes() == 32000


def test_main_reports_missing_score(tmp_path: Path) -> None:
    assert main.main([str(tmp_path / "missing.score"), "-o", str(tmp_path / "x.wav")]) == 1


def test_main_strict_fails_on_bad_command(tmp_path: Path) -> None:
    score = tmp_path / "bad.score"
    score.write_text("NOTE freq=high\n", encoding="utf-8")
    target = tmp_path / "bad.wav"
    assert main.main([str(score), "-o", str(target), "--strict"]) == 1
    assert main.main([str(score), "-o", str(target)]) == 0
    assert target.exists()

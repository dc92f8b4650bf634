import io
import logging
from pathlib import Path
from typing import BinaryIO, Iterable, Optional, Tuple

from .config import RenderSettings
from .music.score_parser import parse_score
from .music.synthesis import render_score_to_wav
from .music.types import Score


class ScoreCompiler:
    """Turns score text into a mono WAV file."""

    def __init__(self, settings: Optional[RenderSettings] = None, strict: bool = False) -> None:
        self.settings = settings or RenderSettings.from_env()
        self.strict = strict
        self._log = logging.getLogger("scoresynth.compiler")

    def parse(self, lines: Iterable[str]) -> Score:
        return parse_score(lines, strict=self.strict)

    def compile_lines(self, lines: Iterable[str]) -> Tuple[io.BytesIO, float]:
        score = self.parse(lines)
        self._log.info(
            "rendering %.2f beats at %g bpm, %d Hz, %d-bit",
            score.length_beats(),
            score.meta.tempo,
            self.settings.sample_rate,
            self.settings.bit_depth,
        )
        return render_score_to_wav(score, self.settings)

    def compile_to_path(self, lines: Iterable[str], target: Path) -> float:
        buffer, duration = self.compile_lines(lines)
        target.write_bytes(buffer.getvalue())
        self._log.info("wrote %.2f seconds of audio to %s", duration, target)
        return duration

    def compile_stream(self, lines: Iterable[str], out: BinaryIO) -> float:
        buffer, duration = self.compile_lines(lines)
        out.write(buffer.getvalue())
        out.flush()
        return duration

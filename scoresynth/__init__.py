"""Compile text scores into PCM audio."""

from .compiler import ScoreCompiler
from .config import RenderSettings
from .errors import RenderError, ScoreSynthError, ScoreSyntaxError

__all__ = ["RenderError", "RenderSettings", "ScoreCompiler", "ScoreSynthError", "ScoreSyntaxError"]

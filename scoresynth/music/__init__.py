"""Synthesis engine and score parsing for scoresynth."""

from .oscillators import WaveForm, WaveKind, evaluate
from .score_parser import parse_score, parse_score_text
from .synthesis import mix_score, render_score, render_score_to_wav
from .types import MetaData, Note, Score

__all__ = [
    "MetaData",
    "Note",
    "Score",
    "WaveForm",
    "WaveKind",
    "evaluate",
    "mix_score",
    "parse_score",
    "parse_score_text",
    "render_score",
    "render_score_to_wav",
]

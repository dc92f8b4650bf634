from typing import Optional


class ScoreSynthError(Exception):
    """Base error for scoresynth."""


class ScoreSyntaxError(ScoreSynthError):
    """Raised when a single score command cannot be parsed or validated."""

    def __init__(self, message: str, line_number: Optional[int] = None) -> None:
        self.line_number = line_number
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)


class RenderError(ScoreSynthError):
    """Raised when render settings are unusable."""

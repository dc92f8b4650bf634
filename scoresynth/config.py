import logging
import os
from dataclasses import dataclass, replace
from typing import Optional

from .errors import RenderError

_LOG = logging.getLogger("scoresynth.config")

DEFAULT_SAMPLE_RATE = 16000
SUPPORTED_BIT_DEPTHS = (8, 16)


@dataclass(frozen=True)
class RenderSettings:
    sample_rate: int = DEFAULT_SAMPLE_RATE  # Hz
    bit_depth: int = 16  # 16-bit signed little-endian, or 8-bit
    workers: int = 1
    block_size: Optional[int] = None  # samples per render block, defaults to one second

    def __post_init__(self) -> None:
        if self.sample_rate <= 0:
            raise RenderError(f"sample rate must be positive, got {self.sample_rate}")
        if self.bit_depth not in SUPPORTED_BIT_DEPTHS:
            raise RenderError(f"bit depth must be one of {SUPPORTED_BIT_DEPTHS}, got {self.bit_depth}")
        if self.workers < 1:
            raise RenderError(f"workers must be at least 1, got {self.workers}")
        if self.block_size is not None and self.block_size <= 0:
            raise RenderError(f"block size must be positive, got {self.block_size}")

    @property
    def sample_width(self) -> int:
        return self.bit_depth // 8

    @property
    def samples_per_block(self) -> int:
        return self.block_size or self.sample_rate

    @staticmethod
    def _load_int(name: str) -> Optional[int]:
        raw = os.getenv(name)
        if not raw:
            return None
        try:
            return int(raw)
        except ValueError:
            raise RenderError(f"{name} must be an integer, got {raw!r}") from None

    @classmethod
    def from_env(cls) -> "RenderSettings":
        settings = cls()
        overrides = {
            "sample_rate": cls._load_int("SCORESYNTH_SAMPLE_RATE"),
            "bit_depth": cls._load_int("SCORESYNTH_BIT_DEPTH"),
            "workers": cls._load_int("SCORESYNTH_WORKERS"),
        }
        return settings.with_overrides(**overrides)

    def with_overrides(self, **overrides: Optional[int]) -> "RenderSettings":
        """Copy with every non-None override applied."""
        present = {key: value for key, value in overrides.items() if value is not None}
        if present:
            _LOG.debug("render settings overrides: %s", present)
        return replace(self, **present)

"""Application configuration defaults."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class AppConfig:
    target_words: int = 400
    overlap_words: int = 50
    max_overshoot: float = 1.2
    section_aware: bool = True
    min_section_confidence: float = 0.5

    def __post_init__(self) -> None:
        if self.target_words <= 0:
            raise ValueError("target_words must be positive")
        if self.overlap_words < 0:
            raise ValueError("overlap_words cannot be negative")
        if self.max_overshoot < 1:
            raise ValueError("max_overshoot must be at least 1")
        if not 0 <= self.min_section_confidence <= 1:
            raise ValueError("min_section_confidence must be within [0, 1]")

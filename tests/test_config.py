"""Tests for application configuration."""

from __future__ import annotations

import pytest

from procchunker.config import AppConfig


class TestAppConfig:
    """Test AppConfig dataclass."""

    def test_default_config(self) -> None:
        """Should create config with default values."""
        config = AppConfig()

        assert config.target_words == 400
        assert config.overlap_words == 50
        assert config.max_overshoot == 1.2
        assert config.section_aware is True
        assert config.min_section_confidence == 0.5

    def test_custom_config(self) -> None:
        config = AppConfig(target_words=200, overlap_words=20, section_aware=False)

        assert config.target_words == 200
        assert config.overlap_words == 20
        assert config.section_aware is False

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"target_words": 0},
            {"overlap_words": -1},
            {"max_overshoot": 0.9},
            {"min_section_confidence": 1.5},
        ],
    )
    def test_invalid_values(self, kwargs: dict) -> None:
        """Should reject values the chunker cannot work with."""
        with pytest.raises(ValueError):
            AppConfig(**kwargs)

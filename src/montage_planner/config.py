"""
Centralized Configuration for Montage Planner

Single Source of Truth for timing constants, output format, audio mix levels
and path conventions. Values are read from environment variables when the
dataclasses are instantiated.

Usage:
    from montage_planner.config import get_settings

    settings = get_settings()
    intro = settings.timing.intro_duration
    fps = settings.format.fps
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional


def _env_float(name: str, default: str) -> float:
    return float(os.environ.get(name, default) or default)


def _env_int(name: str, default: str) -> int:
    return int(os.environ.get(name, default) or default)


def _env_path(name: str) -> Optional[Path]:
    value = os.environ.get(name, "").strip()
    return Path(value) if value else None


# =============================================================================
# Timing Configuration
# =============================================================================
@dataclass
class TimingConfig:
    """
    Timing constants used by plan synthesis.

    Passed explicitly into the plan assembler so presets and tests can vary
    them without touching the algorithms.
    """

    intro_duration: float = field(default_factory=lambda: _env_float("INTRO_DURATION", "3.0"))
    outro_duration: float = field(default_factory=lambda: _env_float("OUTRO_DURATION", "4.0"))
    min_clip_duration: float = field(default_factory=lambda: _env_float("MIN_CLIP_DURATION", "2.0"))

    # Transition durations (seconds)
    intro_fade_duration: float = 0.5
    aerial_fade_duration: float = 0.5
    area_switch_duration: float = 0.8
    default_crossfade_duration: float = 0.5

    # Lower-third captions
    lower_third_appear_at: float = 0.5
    lower_third_duration: float = 3.0
    lower_third_words: int = 4

    # Float comparisons on the time budget
    budget_tolerance: float = 1e-6


# =============================================================================
# Output Format
# =============================================================================
@dataclass
class FormatConfig:
    """Output resolution and frame rate written into every plan."""

    width: int = field(default_factory=lambda: _env_int("OUTPUT_WIDTH", "3840"))
    height: int = field(default_factory=lambda: _env_int("OUTPUT_HEIGHT", "2160"))
    fps: int = field(default_factory=lambda: _env_int("OUTPUT_FPS", "30"))


# =============================================================================
# Audio Mix
# =============================================================================
@dataclass
class AudioMixConfig:
    """Voiceover and background music levels."""

    voiceover_gain_db: float = 0.0
    music_gain_db: float = -18.0
    # Relative to music_gain_db: music sits at -28 dB under narration
    music_ducking_db: float = -10.0
    duck_fade_ms: int = 500


# =============================================================================
# Path Conventions
# =============================================================================
@dataclass
class PathConfig:
    """Project-relative path conventions and tool locations."""

    normalized_dir: str = field(default_factory=lambda: os.environ.get("NORMALIZED_DIR", "montage/normalized"))
    clip_extension: str = field(default_factory=lambda: os.environ.get("CLIP_EXTENSION", "mp4").lstrip("."))
    style_preset_dir: Optional[Path] = field(default_factory=lambda: _env_path("STYLE_PRESET_DIR"))
    style_preset_path: Optional[Path] = field(default_factory=lambda: _env_path("STYLE_PRESET_PATH"))
    ffprobe_bin: str = field(default_factory=lambda: os.environ.get("FFPROBE_PATH", "ffprobe"))

    def clip_file(self, shot_id: str) -> str:
        """Project-relative path of a shot's normalized clip."""
        return f"{self.normalized_dir.rstrip('/')}/{shot_id}.{self.clip_extension}"


# =============================================================================
# Narration
# =============================================================================
@dataclass
class NarrationConfig:
    """How the narration length is obtained when planning."""

    words_per_minute: float = field(default_factory=lambda: _env_float("NARRATION_WPM", "150"))
    ffprobe_timeout: int = field(default_factory=lambda: _env_int("FFPROBE_TIMEOUT", "30"))


# =============================================================================
# Main Settings Class
# =============================================================================
@dataclass
class Settings:
    """
    Main configuration container.

    Usage:
        from montage_planner.config import get_settings

        settings = get_settings()
        if settings.timing.min_clip_duration > 2:
            ...
    """

    timing: TimingConfig = field(default_factory=TimingConfig)
    format: FormatConfig = field(default_factory=FormatConfig)
    audio: AudioMixConfig = field(default_factory=AudioMixConfig)
    paths: PathConfig = field(default_factory=PathConfig)
    narration: NarrationConfig = field(default_factory=NarrationConfig)

    style_preset: str = field(default_factory=lambda: os.environ.get("STYLE_PRESET", "premium").lower())

    def reload(self) -> "Settings":
        """Reload settings from environment (useful after env changes)."""
        return Settings()


# =============================================================================
# Global Settings Instance (Singleton)
# =============================================================================
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance (lazy initialization)."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reload_settings() -> Settings:
    """Force reload of settings from environment."""
    global _settings
    _settings = Settings()
    return _settings

import os
from unittest.mock import patch

import pytest

from montage_planner.config import reload_settings
from montage_planner.core.models import Shot
from montage_planner.style_presets import reload_style_presets

PLANNER_ENV_VARS = (
    "INTRO_DURATION", "OUTRO_DURATION", "MIN_CLIP_DURATION",
    "OUTPUT_WIDTH", "OUTPUT_HEIGHT", "OUTPUT_FPS",
    "NORMALIZED_DIR", "CLIP_EXTENSION", "STYLE_PRESET", "STYLE_PRESET_DIR",
    "STYLE_PRESET_PATH", "FFPROBE_PATH", "NARRATION_WPM", "FFPROBE_TIMEOUT",
)


@pytest.fixture(autouse=True)
def clean_settings():
    """Each test starts from default settings and a fresh preset cache."""
    env = {k: v for k, v in os.environ.items() if k not in PLANNER_ENV_VARS}
    with patch.dict(os.environ, env, clear=True):
        reload_settings()
        reload_style_presets()
        yield
    reload_settings()
    reload_style_presets()


@pytest.fixture
def make_shot():
    """Factory for approved shots with sensible defaults."""
    def _make(shot_id, order, scene="Общий вид фасада здания", duration=5.0, status="approved"):
        return Shot(id=shot_id, order=order, scene=scene, duration=duration, status=status)
    return _make

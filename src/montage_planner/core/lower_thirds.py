"""
Lower-Third Detector

Walks the shots in timeline order and drops a caption on the first shot of
every run of same-area shots. The first shot always gets one.
"""

import re
from typing import List, Optional, Sequence

from ..config import TimingConfig, get_settings
from .models import LowerThird, Shot
from .scene_classifier import SceneClassifier, default_classifier

_WHITESPACE = re.compile(r"\s+")


def area_label(scene: str, max_words: int = 4) -> str:
    """First few words of the scene description."""
    words = [word for word in _WHITESPACE.split(scene or "") if word]
    return " ".join(words[:max_words]) or scene


def detect_lower_thirds(
    shots: Sequence[Shot],
    timing: Optional[TimingConfig] = None,
    classifier: SceneClassifier = default_classifier,
) -> List[LowerThird]:
    timing = timing or get_settings().timing
    lower_thirds: List[LowerThird] = []
    last_area = None

    for shot in shots:
        current = classifier.area(shot.scene)
        if current == last_area:
            continue
        lower_thirds.append(LowerThird(
            shot_id=shot.id,
            text=area_label(shot.scene, timing.lower_third_words),
            position="bottom_left",
            appear_at_sec=timing.lower_third_appear_at,
            duration_sec=timing.lower_third_duration,
        ))
        last_area = current

    return lower_thirds

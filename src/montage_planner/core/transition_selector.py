"""
Transition Selector

Picks the transition that leads into each shot. Rules, first match wins:

1. first shot after the intro card   -> fade
2. aerial / drone / panorama shot    -> fade
3. detail / close-up shot            -> hard cut
4. interior <-> exterior switch      -> longer crossfade
5. anything else                     -> crossfade
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence

from ..config import TimingConfig, get_settings
from .models import INTRO_SENTINEL, Shot, TransitionEntry, TransitionType
from .scene_classifier import SceneClassifier, default_classifier


@dataclass(frozen=True)
class TransitionChoice:
    type: TransitionType
    duration_sec: float


def _is_area_switch(prev_scene: str, scene: str, classifier: SceneClassifier) -> bool:
    prev = classifier.classify(prev_scene)
    curr = classifier.classify(scene)
    return (prev.is_interior and curr.is_exterior) or (prev.is_exterior and curr.is_interior)


def select_transition(
    prev_shot: Optional[Shot],
    current_shot: Shot,
    is_first_after_intro: bool,
    timing: Optional[TimingConfig] = None,
    classifier: SceneClassifier = default_classifier,
) -> TransitionChoice:
    """Choose type and duration of the transition into ``current_shot``."""
    timing = timing or get_settings().timing
    tags = classifier.classify(current_shot.scene)

    if is_first_after_intro:
        return TransitionChoice(TransitionType.FADE, timing.intro_fade_duration)

    if tags.is_aerial:
        return TransitionChoice(TransitionType.FADE, timing.aerial_fade_duration)

    if tags.is_detail:
        return TransitionChoice(TransitionType.CUT, 0.0)

    if prev_shot is not None and _is_area_switch(prev_shot.scene, current_shot.scene, classifier):
        return TransitionChoice(TransitionType.CROSSFADE, timing.area_switch_duration)

    return TransitionChoice(TransitionType.CROSSFADE, timing.default_crossfade_duration)


def build_transitions(
    shots: Sequence[Shot],
    timing: Optional[TimingConfig] = None,
    classifier: SceneClassifier = default_classifier,
) -> List[TransitionEntry]:
    """One transition per shot; the first one comes from the intro card."""
    transitions: List[TransitionEntry] = []
    prev: Optional[Shot] = None

    for index, shot in enumerate(shots):
        choice = select_transition(prev, shot, index == 0, timing, classifier)
        transitions.append(TransitionEntry(
            from_shot_id=INTRO_SENTINEL if prev is None else prev.id,
            to_shot_id=shot.id,
            type=choice.type,
            duration_sec=choice.duration_sec,
        ))
        prev = shot

    return transitions

"""
Plan Assembler

Top-level plan synthesis: turns the approved shots of a project and the
narration length into a complete, seconds-based MontagePlan.

Layout:
    [intro card][clip 1][clip 2] ... [clip n][outro card]

The clips share the narration budget (see duration_allocator); intro and
outro cards are fixed blocks outside it. Clips are contiguous, the first one
starting right after the intro.

Identical inputs always produce an identical plan.
"""

from typing import Any, Dict, Iterable, List, Optional, Union

from ..config import Settings, TimingConfig, get_settings
from ..exceptions import NoApprovedShotsError
from ..logger import log_step, log_success, logger
from ..style_presets import style_block
from .duration_allocator import allocate_durations
from .lower_thirds import detect_lower_thirds
from .models import (
    AudioMix,
    MontagePlan,
    MotionGraphics,
    MusicTrack,
    PlanFormat,
    Project,
    Shot,
    TimelineEntry,
    TitleCard,
    VoiceoverTrack,
)
from .scene_classifier import SceneClassifier, default_classifier
from .transition_selector import build_transitions

MOTION_EFFECT_EXTEND = "ken_burns"
TITLE_ANIMATION = "fade_in"

ShotLike = Union[Shot, Dict[str, Any]]


def approved_shots(shots: Iterable[ShotLike]) -> List[Shot]:
    """Approved shots ordered by their ``order`` field (stable for ties)."""
    parsed = [shot if isinstance(shot, Shot) else Shot.model_validate(shot) for shot in shots]
    return sorted((shot for shot in parsed if shot.is_approved), key=lambda shot: shot.order)


def layout_timeline(
    shots: List[Shot],
    durations: List[float],
    timing: TimingConfig,
    settings: Settings,
) -> List[TimelineEntry]:
    """Place clips back to back after the intro card."""
    timeline: List[TimelineEntry] = []
    current_sec = timing.intro_duration

    for shot, duration in zip(shots, durations):
        entry = TimelineEntry(
            shot_id=shot.id,
            clip_file=settings.paths.clip_file(shot.id),
            start_sec=current_sec,
            duration_sec=duration,
        )

        # Source too short: fill the slot with a slow pan/zoom
        if duration - shot.duration > timing.budget_tolerance:
            entry.motion_effect = MOTION_EFFECT_EXTEND
        # Source too long: renderer trims the tail
        elif shot.duration - duration > timing.budget_tolerance:
            entry.trim_end_sec = shot.duration - duration

        timeline.append(entry)
        current_sec += duration

    return timeline


def generate_montage_plan(
    shots: Iterable[ShotLike],
    voiceover_duration_sec: float,
    project_name: str = "",
    voiceover_file: Optional[str] = None,
    music_file: Optional[str] = None,
    timing: Optional[TimingConfig] = None,
    style: Optional[str] = None,
    settings: Optional[Settings] = None,
    classifier: SceneClassifier = default_classifier,
) -> MontagePlan:
    """
    Build a montage plan from the project's shots.

    Args:
        shots: All project shots; only approved ones are used, sorted by order
        voiceover_duration_sec: Narration length the clips must fill
        project_name: Title for the intro and outro cards
        voiceover_file: Project-relative narration file
        music_file: Project-relative background music file
        timing: Timing constants (default: settings.timing)
        style: Style preset id (default: settings.style_preset)
        settings: Settings instance (default: global settings)
        classifier: Scene keyword classifier

    Returns:
        MontagePlan with one timeline entry and one transition per approved shot

    Raises:
        NoApprovedShotsError: if no shot is approved
        InvalidDurationError: if the narration or a shot duration is not a
            finite positive number
    """
    settings = settings or get_settings()
    timing = timing or settings.timing

    ordered = approved_shots(shots)
    if not ordered:
        raise NoApprovedShotsError()

    durations = allocate_durations(
        [shot.duration for shot in ordered],
        voiceover_duration_sec,
        min_clip_duration=timing.min_clip_duration,
        tolerance=timing.budget_tolerance,
    )
    log_step(f"Planning montage: {len(ordered)} approved shots, {voiceover_duration_sec:.1f}s narration")
    logger.debug("Allocated durations: " + ", ".join(f"{d:.2f}s" for d in durations))

    timeline = layout_timeline(ordered, durations, timing, settings)
    transitions = build_transitions(ordered, timing, classifier)
    lower_thirds = detect_lower_thirds(ordered, timing, classifier)

    audio_cfg = settings.audio
    plan = MontagePlan(
        version=1,
        format=PlanFormat(
            width=settings.format.width,
            height=settings.format.height,
            fps=settings.format.fps,
        ),
        timeline=timeline,
        transitions=transitions,
        motion_graphics=MotionGraphics(
            intro=TitleCard(title=project_name, duration_sec=timing.intro_duration, animation=TITLE_ANIMATION),
            lower_thirds=lower_thirds,
            outro=TitleCard(title=project_name, duration_sec=timing.outro_duration, animation=TITLE_ANIMATION),
        ),
        audio=AudioMix(
            voiceover=VoiceoverTrack(file=voiceover_file or "", gain_db=audio_cfg.voiceover_gain_db),
            music=MusicTrack(
                file=music_file or "",
                gain_db=audio_cfg.music_gain_db,
                ducking_db=audio_cfg.music_ducking_db,
                duck_fade_ms=audio_cfg.duck_fade_ms,
            ),
        ),
        style=style_block(style or settings.style_preset),
    )

    log_success(
        f"Plan ready: {len(timeline)} clips, {len(lower_thirds)} lower thirds, "
        f"{plan.total_duration_sec:.1f}s total"
    )
    return plan


def plan_for_project(
    project: Union[Project, Dict[str, Any]],
    voiceover_duration_sec: float,
    **kwargs: Any,
) -> MontagePlan:
    """generate_montage_plan() fed from a project document."""
    if not isinstance(project, Project):
        project = Project.model_validate(project)
    return generate_montage_plan(
        project.shots,
        voiceover_duration_sec,
        project_name=project.name,
        voiceover_file=project.voiceover_file,
        music_file=project.music_file,
        **kwargs,
    )

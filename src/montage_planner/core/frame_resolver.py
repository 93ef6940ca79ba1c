"""
Frame Resolver

Converts a seconds-based MontagePlan into the frame-exact schedule the
renderer consumes. Recomputed on every render request and never persisted.

Clip paths are joined onto the project root following the
``montage/normalized/<shotId>.<ext>`` convention. Whether those files exist is
the normalization step's responsibility; nothing is checked here, so a missing
clip surfaces at render time.
"""

import math
from pathlib import Path
from typing import Any, Dict, Optional, Union

from ..config import TimingConfig, get_settings
from ..exceptions import ResolutionError
from ..logger import logger
from .models import (
    MontagePlan,
    ResolvedClip,
    ResolvedLowerThird,
    ResolvedPlan,
    ResolvedTransition,
)

PathLike = Union[str, Path]


def seconds_to_frames(seconds: float, fps: float) -> int:
    """Nearest frame, halves rounded up."""
    return int(math.floor(seconds * fps + 0.5))


def _project_path(project_root: Path, relative: str) -> str:
    return str(project_root / relative) if relative else ""


def resolve_plan(
    plan: Union[MontagePlan, Dict[str, Any]],
    project_root: PathLike,
    fps: Optional[float] = None,
    timing: Optional[TimingConfig] = None,
) -> ResolvedPlan:
    """
    Resolve a plan into frames.

    Args:
        plan: MontagePlan or its JSON document
        project_root: Directory the plan's relative paths are joined onto
        fps: Frame rate (default: the plan's format.fps)
        timing: Fallback intro/outro durations for plans without title cards

    Returns:
        ResolvedPlan

    Raises:
        PlanValidationError: if a plan document does not match the schema
        ResolutionError: if the frame rate is not a finite positive number
    """
    if not isinstance(plan, MontagePlan):
        plan = MontagePlan.from_document(plan)

    fps = plan.format.fps if fps is None else fps
    if isinstance(fps, bool) or not isinstance(fps, (int, float)) or not math.isfinite(fps) or fps <= 0:
        raise ResolutionError(f"fps must be a finite number > 0, got {fps!r}")

    settings = get_settings()
    timing = timing or settings.timing
    root = Path(project_root).absolute()

    def to_frames(seconds: float) -> int:
        return seconds_to_frames(seconds, fps)

    graphics = plan.motion_graphics
    intro_frames = to_frames(graphics.intro.duration_sec if graphics.intro else timing.intro_duration)
    outro_frames = to_frames(graphics.outro.duration_sec if graphics.outro else timing.outro_duration)

    clips = [
        ResolvedClip(
            shot_id=entry.shot_id,
            file=_project_path(root, entry.clip_file),
            start_frame=to_frames(entry.start_sec),
            duration_frames=to_frames(entry.duration_sec),
            trim_end_sec=entry.trim_end_sec,
            motion_effect=entry.motion_effect,
        )
        for entry in plan.timeline
    ]
    start_by_shot: Dict[str, int] = {}
    for clip in clips:
        start_by_shot.setdefault(clip.shot_id, clip.start_frame)

    # Clips are contiguous, so the last one ends the clip section
    if clips:
        clips_end_frame = clips[-1].start_frame + clips[-1].duration_frames
    else:
        clips_end_frame = intro_frames
    total_duration_frames = clips_end_frame + outro_frames

    transitions = []
    for transition in plan.transitions:
        start_frame = start_by_shot.get(transition.to_shot_id)
        if start_frame is None:
            logger.debug(f"Transition targets unknown shot {transition.to_shot_id}; anchoring after intro")
            start_frame = intro_frames
        transitions.append(ResolvedTransition(
            from_shot_id=transition.from_shot_id,
            to_shot_id=transition.to_shot_id,
            type=transition.type,
            duration_frames=to_frames(transition.duration_sec),
            start_frame=start_frame,
        ))

    lower_thirds = []
    for lower_third in graphics.lower_thirds:
        base_frame = start_by_shot.get(lower_third.shot_id)
        if base_frame is None:
            logger.debug(f"Lower third anchored to unknown shot {lower_third.shot_id}; using frame 0")
            base_frame = 0
        lower_thirds.append(ResolvedLowerThird(
            shot_id=lower_third.shot_id,
            text=lower_third.text,
            position=lower_third.position,
            appear_at_frame=base_frame + to_frames(lower_third.appear_at_sec),
            duration_frames=to_frames(lower_third.duration_sec),
        ))

    music = plan.audio.music
    resolved = ResolvedPlan(
        fps=fps,
        width=plan.format.width,
        height=plan.format.height,
        total_duration_frames=total_duration_frames,
        intro_frames=intro_frames,
        outro_frames=outro_frames,
        intro_title=graphics.intro.title if graphics.intro else "",
        outro_title=graphics.outro.title if graphics.outro else "",
        clips=clips,
        transitions=transitions,
        lower_thirds=lower_thirds,
        voiceover_file=_project_path(root, plan.audio.voiceover.file),
        voiceover_gain_db=plan.audio.voiceover.gain_db,
        music_file=_project_path(root, music.file),
        music_gain_db=music.gain_db,
        music_ducking_db=music.ducking_db if music.ducking_db is not None else settings.audio.music_ducking_db,
        music_duck_fade_ms=music.duck_fade_ms if music.duck_fade_ms is not None else settings.audio.duck_fade_ms,
        style=plan.style,
    )

    logger.debug(
        f"Resolved {len(clips)} clips at {fps} fps: {total_duration_frames} frames "
        f"({total_duration_frames / fps:.2f}s)"
    )
    return resolved

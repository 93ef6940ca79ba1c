"""
Plan document models.

Attributes are snake_case in Python; the JSON documents use the camelCase keys
the project store persists (``shotId``, ``startSec``, ``motionGraphics``...).
Always serialize through ``to_document()`` so aliases are applied.
"""

from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from ..exceptions import PlanValidationError

INTRO_SENTINEL = "intro"
APPROVED_STATUS = "approved"


class CamelModel(BaseModel):
    """Base model with camelCase JSON aliases."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_document(self) -> Dict[str, Any]:
        """JSON-ready dict with camelCase keys; unset optionals are omitted."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class TransitionType(str, Enum):
    CUT = "cut"
    FADE = "fade"
    CROSSFADE = "crossfade"
    WIPE = "wipe"


class Area(str, Enum):
    INTERIOR = "interior"
    EXTERIOR = "exterior"
    OTHER = "other"


# =============================================================================
# Input
# =============================================================================

class Shot(CamelModel):
    """One shot as stored by the project store. Extra store fields are ignored."""
    model_config = ConfigDict(extra="ignore")

    id: str
    order: int
    scene: str = ""
    duration: float
    status: str = "draft"

    @property
    def is_approved(self) -> bool:
        return self.status == APPROVED_STATUS


class Project(CamelModel):
    """The slice of a project document the planner reads."""
    model_config = ConfigDict(extra="ignore")

    id: str = ""
    name: str = ""
    shots: List[Shot] = Field(default_factory=list)
    voiceover_file: Optional[str] = None
    music_file: Optional[str] = None
    voiceover_script: Optional[str] = None
    script: Optional[str] = None


# =============================================================================
# Time-domain plan
# =============================================================================

class PlanFormat(CamelModel):
    width: int = 3840
    height: int = 2160
    fps: int = 30


class TimelineEntry(CamelModel):
    shot_id: str
    clip_file: str
    start_sec: float
    duration_sec: float
    trim_end_sec: Optional[float] = None
    motion_effect: Optional[str] = None


class TransitionEntry(CamelModel):
    from_shot_id: str
    to_shot_id: str
    type: TransitionType
    duration_sec: float


class TitleCard(CamelModel):
    title: str
    duration_sec: float
    animation: str = "fade_in"


class LowerThird(CamelModel):
    shot_id: str
    text: str
    position: str = "bottom_left"
    appear_at_sec: float
    duration_sec: float


class MotionGraphics(CamelModel):
    intro: Optional[TitleCard] = None
    lower_thirds: List[LowerThird] = Field(default_factory=list)
    outro: Optional[TitleCard] = None


class VoiceoverTrack(CamelModel):
    file: str = ""
    gain_db: float = 0.0


class MusicTrack(CamelModel):
    file: str = ""
    gain_db: float = -18.0
    ducking_db: Optional[float] = None
    duck_fade_ms: Optional[int] = None

    @property
    def ducked_gain_db(self) -> float:
        """Music level while narration is playing."""
        return self.gain_db + (self.ducking_db or 0.0)


class AudioMix(CamelModel):
    voiceover: VoiceoverTrack = Field(default_factory=VoiceoverTrack)
    music: MusicTrack = Field(default_factory=MusicTrack)


class MontagePlan(CamelModel):
    """Seconds-based edit plan; the persisted source of truth for a montage."""

    version: int = 1
    format: PlanFormat = Field(default_factory=PlanFormat)
    timeline: List[TimelineEntry]
    transitions: List[TransitionEntry]
    motion_graphics: MotionGraphics = Field(default_factory=MotionGraphics)
    audio: AudioMix = Field(default_factory=AudioMix)
    style: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_document(cls, data: Any) -> "MontagePlan":
        """
        Validate a persisted or hand-edited plan document.

        Raises:
            PlanValidationError: listing every missing or invalid field.
        """
        if not isinstance(data, dict):
            raise PlanValidationError("Invalid montage plan: expected a JSON object")
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            errors = [
                f"{'.'.join(str(part) for part in err['loc']) or '<root>'}: {err['msg']}"
                for err in exc.errors()
            ]
            raise PlanValidationError(
                f"Invalid montage plan ({len(errors)} problem(s)): " + "; ".join(errors),
                errors=errors,
            ) from exc

    @property
    def total_duration_sec(self) -> float:
        """Intro + clips + outro, assuming contiguous clips."""
        outro = self.motion_graphics.outro.duration_sec if self.motion_graphics.outro else 0.0
        if self.timeline:
            last = self.timeline[-1]
            return last.start_sec + last.duration_sec + outro
        intro = self.motion_graphics.intro.duration_sec if self.motion_graphics.intro else 0.0
        return intro + outro


def check_plan_consistency(plan: MontagePlan, tolerance: float = 1e-3) -> List[str]:
    """
    List structural problems in a plan without raising.

    Edited plans are accepted as long as they match the schema; this reports
    the layout guarantees the resolver relies on so callers can warn.
    """
    problems: List[str] = []

    if len(plan.timeline) != len(plan.transitions):
        problems.append(
            f"timeline has {len(plan.timeline)} entries but transitions has {len(plan.transitions)}"
        )

    if plan.transitions and plan.transitions[0].from_shot_id != INTRO_SENTINEL:
        problems.append(
            f"first transition starts from '{plan.transitions[0].from_shot_id}', expected '{INTRO_SENTINEL}'"
        )

    for prev, entry in zip(plan.timeline, plan.timeline[1:]):
        expected = prev.start_sec + prev.duration_sec
        if abs(entry.start_sec - expected) > tolerance:
            problems.append(
                f"clip {entry.shot_id} starts at {entry.start_sec:.3f}s, expected {expected:.3f}s"
            )

    clip_ids = {entry.shot_id for entry in plan.timeline}
    for transition in plan.transitions:
        if transition.to_shot_id not in clip_ids:
            problems.append(f"transition targets unknown shot {transition.to_shot_id}")
    for lower_third in plan.motion_graphics.lower_thirds:
        if lower_third.shot_id not in clip_ids:
            problems.append(f"lower third anchored to unknown shot {lower_third.shot_id}")

    return problems


# =============================================================================
# Frame-domain schedule
# =============================================================================

class ResolvedClip(CamelModel):
    shot_id: str
    file: str
    start_frame: int
    duration_frames: int
    trim_end_sec: Optional[float] = None
    motion_effect: Optional[str] = None


class ResolvedTransition(CamelModel):
    from_shot_id: str
    to_shot_id: str
    type: TransitionType
    duration_frames: int
    start_frame: int


class ResolvedLowerThird(CamelModel):
    shot_id: str
    text: str
    position: str
    appear_at_frame: int
    duration_frames: int


class ResolvedPlan(CamelModel):
    """Frame-exact render schedule. Derived on every render, never persisted."""

    fps: Union[int, float]
    width: int
    height: int
    total_duration_frames: int
    intro_frames: int
    outro_frames: int
    intro_title: str = ""
    outro_title: str = ""
    clips: List[ResolvedClip] = Field(default_factory=list)
    transitions: List[ResolvedTransition] = Field(default_factory=list)
    lower_thirds: List[ResolvedLowerThird] = Field(default_factory=list)
    voiceover_file: str = ""
    voiceover_gain_db: float = 0.0
    music_file: str = ""
    music_gain_db: float = -18.0
    music_ducking_db: float = -10.0
    music_duck_fade_ms: int = 500
    style: Dict[str, Any] = Field(default_factory=dict)

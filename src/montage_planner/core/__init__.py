"""
Montage Planner Core Module

Contains the two engine passes:
- generate_montage_plan: approved shots + narration length -> MontagePlan (seconds)
- resolve_plan: MontagePlan -> ResolvedPlan (frames) for the renderer
"""

from .frame_resolver import resolve_plan, seconds_to_frames
from .models import (
    MontagePlan,
    Project,
    ResolvedPlan,
    Shot,
    check_plan_consistency,
)
from .plan_assembler import approved_shots, generate_montage_plan, plan_for_project

__all__ = [
    "generate_montage_plan",
    "plan_for_project",
    "approved_shots",
    "resolve_plan",
    "seconds_to_frames",
    "check_plan_consistency",
    "MontagePlan",
    "ResolvedPlan",
    "Project",
    "Shot",
]

"""
Montage Planner - timeline planning for real-estate montage videos

Plan synthesis:
    from montage_planner import generate_montage_plan

    plan = generate_montage_plan(shots, voiceover_duration_sec=42.0, project_name="Riverside")
    document = plan.to_document()   # camelCase JSON for the project store

Plan resolution (per render request):
    from montage_planner import resolve_plan

    schedule = resolve_plan(document, "/data/projects/riverside")
    schedule.total_duration_frames

Styles:
    from montage_planner.style_presets import list_available_styles, style_block
"""

from ._version import __version__
from .core import (
    MontagePlan,
    Project,
    ResolvedPlan,
    Shot,
    check_plan_consistency,
    generate_montage_plan,
    plan_for_project,
    resolve_plan,
)
from .exceptions import MontagePlannerError, NoApprovedShotsError

__all__ = [
    "__version__",
    "generate_montage_plan",
    "plan_for_project",
    "resolve_plan",
    "check_plan_consistency",
    "MontagePlan",
    "ResolvedPlan",
    "Project",
    "Shot",
    "MontagePlannerError",
    "NoApprovedShotsError",
]

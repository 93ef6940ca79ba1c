"""
Montage Planner Exception Hierarchy

Structured exception types for plan synthesis and resolution.
All exceptions inherit from MontagePlannerError for easy catching.

Usage:
    from montage_planner.exceptions import NoApprovedShotsError

    try:
        plan = generate_montage_plan(project, 42.0)
    except NoApprovedShotsError as e:
        logger.error(f"Nothing to render: {e}")
"""

from typing import List, Optional


class MontagePlannerError(Exception):
    """Base exception for all Montage Planner errors."""
    pass


# =============================================================================
# Planning Errors
# =============================================================================

class PlanningError(MontagePlannerError):
    """Error while synthesizing a montage plan."""
    pass


class NoApprovedShotsError(PlanningError):
    """The project has no approved shots to place on the timeline."""

    def __init__(self, message: str = "No approved shots to generate montage plan"):
        super().__init__(message)


class InvalidDurationError(PlanningError, ValueError):
    """A shot or narration duration is zero, negative, or not finite."""

    def __init__(self, message: str, field: Optional[str] = None, value: Optional[float] = None):
        super().__init__(message)
        self.field = field
        self.value = value


# =============================================================================
# Plan Document Errors
# =============================================================================

class PlanValidationError(MontagePlannerError):
    """A persisted or edited plan document does not match the plan schema."""

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        super().__init__(message)
        self.errors = errors or []


# =============================================================================
# Resolution Errors
# =============================================================================

class ResolutionError(MontagePlannerError):
    """Error converting a plan into a frame-domain schedule."""
    pass


# =============================================================================
# Configuration Errors
# =============================================================================

class ConfigurationError(MontagePlannerError):
    """Invalid configuration or missing required settings."""
    pass


class InvalidStyleError(ConfigurationError, KeyError):
    """Unknown or invalid style preset."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message
        return str(self.args[0]) if self.args else ""


# =============================================================================
# Media Probe Errors
# =============================================================================

class ProbeError(MontagePlannerError):
    """ffprobe failed or did not report a usable duration."""

    def __init__(self, message: str, path: Optional[str] = None, stderr: Optional[str] = None):
        super().__init__(message)
        self.path = path
        self.stderr = stderr

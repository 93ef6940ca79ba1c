"""
Duration Allocator

Distributes the narration time budget across the ordered shots:

1. Each shot gets its proportional share of the budget (by source duration),
   floored at the minimum watchable clip length.
2. If the floors pushed the total off budget, everything is rescaled and
   floored again.
3. Any residual left after that is added to the first clip, so the total
   matches the budget exactly. The first clip may then dip under the floor;
   this is an accepted approximation.

Step 3 is skipped, and the edit runs longer than the narration, when the
floors alone exceed the budget (many shots, short narration) or when the
first clip would be left with no time at all (one long shot among many short
ones). Every returned duration is positive.
"""

import math
from typing import List, Sequence

import numpy as np

from ..exceptions import InvalidDurationError
from ..logger import logger

MIN_CLIP_DURATION = 2.0


def _check_positive(value: float, field: str) -> None:
    if not isinstance(value, (int, float)) or isinstance(value, bool) or not math.isfinite(value) or value <= 0:
        raise InvalidDurationError(
            f"{field} must be a finite number of seconds > 0, got {value!r}",
            field=field,
            value=value,
        )


def allocate_durations(
    source_durations: Sequence[float],
    available_time: float,
    min_clip_duration: float = MIN_CLIP_DURATION,
    tolerance: float = 1e-6,
) -> List[float]:
    """
    Allocate clip durations that sum to ``available_time``.

    Args:
        source_durations: Native duration of each shot, in timeline order
        available_time: Total seconds to fill (the narration length)
        min_clip_duration: Floor applied to every clip
        tolerance: Slack for comparing float sums against the budget

    Returns:
        Allocated seconds per shot, parallel to ``source_durations``

    Raises:
        InvalidDurationError: if the budget or any source duration is not a
            finite positive number
    """
    _check_positive(available_time, "voiceoverDurationSec")
    for index, duration in enumerate(source_durations):
        _check_positive(duration, f"shots[{index}].duration")

    if not source_durations:
        return []

    sources = np.asarray(source_durations, dtype=float)
    total_source = sources.sum()

    allocated = np.maximum(sources / total_source * available_time, min_clip_duration)

    total_allocated = allocated.sum()
    if not math.isclose(total_allocated, available_time, rel_tol=0.0, abs_tol=tolerance):
        scale = available_time / total_allocated
        allocated = np.maximum(allocated * scale, min_clip_duration)

        residual = available_time - allocated.sum()
        floors_fit = len(allocated) * min_clip_duration <= available_time + tolerance
        if not floors_fit:
            logger.debug(
                f"{len(allocated)} clips at {min_clip_duration:.1f}s minimum exceed the "
                f"{available_time:.2f}s budget; keeping the floor ({allocated.sum():.2f}s total)"
            )
        elif allocated[0] + residual <= tolerance:
            # First clip cannot absorb the overshoot without vanishing
            logger.debug(
                f"Residual {residual:.2f}s would leave the first clip at "
                f"{allocated[0] + residual:.2f}s; keeping {allocated.sum():.2f}s total"
            )
        elif abs(residual) > tolerance:
            allocated[0] += residual

    if allocated[0] < min_clip_duration - tolerance:
        logger.debug(
            f"First clip fell to {allocated[0]:.2f}s after residual correction "
            f"(minimum {min_clip_duration:.1f}s)"
        )

    return [float(value) for value in allocated]

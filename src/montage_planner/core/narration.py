"""
Narration length for plan synthesis.

The clip budget is the narration length: probed from the voiceover file when
the project has one, otherwise estimated from the narration script.
"""

import re
from pathlib import Path
from typing import Callable, Optional, Union

from ..config import get_settings
from ..exceptions import InvalidDurationError
from ..logger import log_warning, logger
from ..probe import probe_duration
from .models import Project

_WORD = re.compile(r"\S+")


def estimate_script_duration(script: str, words_per_minute: Optional[float] = None) -> float:
    """Speaking time of ``script`` at a steady narration pace."""
    wpm = words_per_minute or get_settings().narration.words_per_minute
    words = len(_WORD.findall(script or ""))
    return words / wpm * 60.0


def narration_duration(
    project: Project,
    project_root: Union[str, Path],
    probe: Callable[[Union[str, Path]], float] = probe_duration,
) -> float:
    """
    Seconds of narration the edit must fit.

    Raises:
        ProbeError: if the voiceover file exists but cannot be probed
        InvalidDurationError: if there is neither a voiceover file nor a script
    """
    if project.voiceover_file:
        voiceover = Path(project_root) / project.voiceover_file
        if voiceover.exists():
            seconds = probe(voiceover)
            logger.info(f"   ⏱️ Voiceover: {seconds:.1f}s ({voiceover.name})")
            return seconds
        log_warning(f"Voiceover file {voiceover} not found; estimating from script")

    script = project.voiceover_script or project.script or ""
    seconds = estimate_script_duration(script)
    if seconds <= 0:
        raise InvalidDurationError(
            "Cannot determine narration length: no voiceover file and no script",
            field="voiceoverDurationSec",
            value=seconds,
        )
    logger.info(f"   ⏱️ Narration estimated from script: {seconds:.1f}s")
    return seconds

"""
Media probing via ffprobe.

Usage:
    from montage_planner.probe import probe_duration

    seconds = probe_duration("/projects/p1/montage/voiceover.mp3")
"""

import json
import subprocess
from pathlib import Path
from typing import Optional, Union

from .config import get_settings
from .exceptions import ProbeError

PathLike = Union[str, Path]


def probe_duration(path: PathLike, timeout: Optional[int] = None) -> float:
    """
    Container duration of a media file in seconds.

    Raises:
        ProbeError: if ffprobe is missing, fails, or reports no positive duration
    """
    settings = get_settings()
    cmd = [
        settings.paths.ffprobe_bin,
        "-v", "quiet",
        "-print_format", "json",
        "-show_format",
        str(path),
    ]
    try:
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            timeout=timeout or settings.narration.ffprobe_timeout,
        )
    except FileNotFoundError as exc:
        raise ProbeError(f"ffprobe not found ({settings.paths.ffprobe_bin})", path=str(path)) from exc
    except subprocess.TimeoutExpired as exc:
        raise ProbeError(f"ffprobe timed out on {path}", path=str(path)) from exc

    if result.returncode != 0:
        raise ProbeError(
            f"ffprobe failed on {path} (exit {result.returncode})",
            path=str(path),
            stderr=result.stderr,
        )

    try:
        data = json.loads(result.stdout or "{}")
        duration = float((data.get("format") or {}).get("duration") or 0.0)
    except (json.JSONDecodeError, TypeError, ValueError) as exc:
        raise ProbeError(f"Unreadable ffprobe output for {path}", path=str(path)) from exc

    if duration <= 0:
        raise ProbeError(f"No duration reported for {path}", path=str(path))
    return duration

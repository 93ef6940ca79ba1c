"""
Planner logging.

One package logger, ``montage_planner``, writes to stderr so stdout stays free
for the JSON documents the CLI emits. Progress lines (INFO) are printed bare,
everything else carries a timestamp and level. ``LOG_LEVEL`` picks the level.

Per-project log files can be attached with ``configure_file_logging``; every
line in them is tagged with the project id.

Usage:
    from montage_planner.logger import logger, log_step

    log_step("Planning montage: 12 approved shots")
    logger.debug("Allocated durations: ...")
"""

import logging
import os
import sys
from pathlib import Path
from typing import Dict, Optional

LOGGER_NAME = "montage_planner"
CONSOLE_TIME_FORMAT = "%H:%M:%S"


def get_log_level() -> int:
    """Level from ``LOG_LEVEL`` (name or number); INFO when unset or unknown."""
    raw = os.environ.get("LOG_LEVEL", "").strip().upper()
    if raw.isdigit():
        return int(raw)
    level = logging.getLevelName(raw) if raw else logging.INFO
    return level if isinstance(level, int) else logging.INFO


class PlannerFormatter(logging.Formatter):
    """Bare INFO lines for progress output; timestamp and level for the rest."""

    LEVEL_FORMATS = {
        logging.DEBUG: "%(asctime)s [DEBUG] %(name)s: %(message)s",
        logging.INFO: "%(message)s",
        logging.WARNING: "%(asctime)s [WARN] %(message)s",
        logging.ERROR: "%(asctime)s [ERROR] %(message)s",
        logging.CRITICAL: "%(asctime)s [CRITICAL] %(message)s",
    }

    def __init__(self):
        super().__init__(datefmt=CONSOLE_TIME_FORMAT)
        self._formatters: Dict[int, logging.Formatter] = {
            level: logging.Formatter(fmt, datefmt=CONSOLE_TIME_FORMAT)
            for level, fmt in self.LEVEL_FORMATS.items()
        }

    def format(self, record: logging.LogRecord) -> str:
        formatter = self._formatters.get(record.levelno, self._formatters[logging.INFO])
        return formatter.format(record)


class FileFormatter(logging.Formatter):
    """Full detail for log files, including the project a line belongs to."""

    def __init__(self):
        super().__init__(
            fmt="%(asctime)s | %(levelname)-8s | %(project)s | %(name)s:%(lineno)d | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    def format(self, record: logging.LogRecord) -> str:
        if not hasattr(record, "project"):
            record.project = "-"
        return super().format(record)


class ProjectFilter(logging.Filter):
    """Stamps records with a project id."""

    def __init__(self, project_id: str):
        super().__init__()
        self.project_id = project_id

    def filter(self, record: logging.LogRecord) -> bool:
        record.project = self.project_id
        return True


def setup_logger(
    name: str = LOGGER_NAME,
    log_file: Optional[Path] = None,
    level: Optional[int] = None,
) -> logging.Logger:
    """
    Configure ``name`` once: a stderr handler and, optionally, a file handler.

    Calling it again for an already configured logger returns it unchanged.
    """
    configured = logging.getLogger(name)
    if configured.handlers:
        return configured

    log_level = level or get_log_level()
    configured.setLevel(log_level)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(log_level)
    console.setFormatter(PlannerFormatter())
    configured.addHandler(console)

    if log_file:
        configured.addHandler(_file_handler(log_file))

    return configured


def _file_handler(log_file: Path) -> logging.FileHandler:
    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(log_file, encoding="utf-8")
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(FileFormatter())
    return handler


def configure_file_logging(output_dir: Path, project_id: str) -> logging.FileHandler:
    """
    Also log everything for ``project_id`` to ``<output_dir>/montage_<id>.log``.

    Repeated calls for the same file reuse the existing handler.

    Returns:
        The attached handler, so callers can detach it when done
    """
    log_file = (Path(output_dir) / f"montage_{project_id}.log").absolute()
    planner_logger = logging.getLogger(LOGGER_NAME)

    for handler in planner_logger.handlers:
        if isinstance(handler, logging.FileHandler) and Path(handler.baseFilename) == log_file:
            return handler

    handler = _file_handler(log_file)
    handler.addFilter(ProjectFilter(project_id))
    planner_logger.addHandler(handler)
    return handler


logger = setup_logger()


def log_step(step: str, emoji: str = "▶") -> None:
    """Log a processing step."""
    logger.info(f"{emoji} {step}")


def log_success(message: str) -> None:
    logger.info(f"   ✅ {message}")


def log_warning(message: str) -> None:
    logger.warning(f"   ⚠️  {message}")

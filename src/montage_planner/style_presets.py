"""
Style preset loader (config-first, no hardcoded presets).

Features
- Ships with JSON presets in `montage_planner/styles/*.json`.
- Overrides via env vars: `STYLE_PRESET_PATH` (file) or `STYLE_PRESET_DIR`
  (directory of *.json).
- Later files override earlier ones (defaults < user overrides).
- Lightweight validation to catch malformed presets.

The plan engine treats the resulting style block as opaque: it is copied into
the plan and passed through to the renderer untouched.
"""

from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Iterable, List

from jsonschema import ValidationError, validate

from .config import get_settings
from .exceptions import ConfigurationError, InvalidStyleError
from .logger import logger

# ---------------------------------------------------------------------------
# Locations
# ---------------------------------------------------------------------------

DEFAULT_STYLE_DIR = Path(__file__).resolve().parent / "styles"


# ---------------------------------------------------------------------------
# Validation schema (minimal on purpose)
# ---------------------------------------------------------------------------

STYLE_SCHEMA = {
    "type": "object",
    "required": ["id", "name", "description", "tokens"],
    "properties": {
        "id": {"type": "string"},
        "name": {"type": "string"},
        "description": {"type": "string"},
        "tokens": {
            "type": "object",
            "properties": {
                "fontFamily": {"type": "string"},
                "primaryColor": {"type": "string", "pattern": "^#[0-9a-fA-F]{3,8}$"},
                "secondaryColor": {"type": "string", "pattern": "^#[0-9a-fA-F]{3,8}$"},
                "textColor": {"type": "string", "pattern": "^#[0-9a-fA-F]{3,8}$"},
            },
        },
    },
}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _style_files() -> List[Path]:
    """Gather style preset files with precedence: defaults then overrides."""
    settings = get_settings()
    candidates: List[Path] = []

    if DEFAULT_STYLE_DIR.exists():
        candidates.extend(sorted(DEFAULT_STYLE_DIR.glob("*.json")))

    env_dir = settings.paths.style_preset_dir
    if env_dir:
        if env_dir.is_dir():
            candidates.extend(sorted(env_dir.glob("*.json")))
        elif env_dir.is_file() and env_dir.suffix.lower() == ".json":
            candidates.append(env_dir)

    env_file = settings.paths.style_preset_path
    if env_file and env_file.is_file() and env_file.suffix.lower() == ".json":
        candidates.append(env_file)

    # Deduplicate while preserving order
    seen: set[Path] = set()
    unique: List[Path] = []
    for path in candidates:
        resolved = path.resolve()
        if resolved in seen:
            continue
        seen.add(resolved)
        unique.append(path)
    return unique


def _extract_presets(raw: object, source: Path) -> Iterable[dict]:
    """Normalize raw JSON content into an iterable of preset dicts."""

    if isinstance(raw, dict) and "tokens" in raw:
        yield raw
        return

    if isinstance(raw, list):
        for item in raw:
            if isinstance(item, dict):
                yield item
        return

    if isinstance(raw, dict):
        for key, value in raw.items():
            if isinstance(value, dict):
                value.setdefault("id", key)
                yield value
        return

    raise ConfigurationError(f"Style file {source} must contain an object or array of objects")


def _normalize_preset(raw: dict, source: Path) -> dict:
    """Ensure required keys exist and lowercase the identifier."""

    preset_id = raw.get("id") or raw.get("preset") or source.stem

    normalized = {
        "id": str(preset_id).lower(),
        "name": raw.get("name") or str(preset_id),
        "description": raw.get("description", ""),
        "tokens": raw.get("tokens", {}) or {},
    }

    validate(instance=normalized, schema=STYLE_SCHEMA)
    return normalized


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


@lru_cache(maxsize=1)
def load_style_presets() -> Dict[str, dict]:
    """Load and cache style presets from JSON files."""

    presets: Dict[str, dict] = {}
    files = _style_files()

    if not files:
        raise ConfigurationError(
            "No style preset files found. Set STYLE_PRESET_DIR/STYLE_PRESET_PATH or keep defaults."
        )

    for path in files:
        try:
            raw_content = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning(f"⚠️  Skipping style file {path}: {exc}")
            continue

        try:
            candidates = list(_extract_presets(raw_content, path))
        except ConfigurationError as exc:
            logger.warning(f"⚠️  Skipping style file {path}: {exc}")
            continue

        for entry in candidates:
            try:
                normalized = _normalize_preset(entry, path)
            except ValidationError as exc:
                logger.warning(f"⚠️  Invalid style in {path}: {exc.message}")
                continue

            presets[normalized["id"]] = normalized  # later files override earlier ones

    if not presets:
        raise ConfigurationError("Failed to load any style presets; check preset files")

    return presets


def reload_style_presets() -> None:
    """Clear cache so new/changed presets are picked up."""

    load_style_presets.cache_clear()


def get_style_preset(style_name: str) -> dict:
    """Get a style preset by id (case-insensitive)."""

    presets = load_style_presets()
    key = style_name.lower()
    if key not in presets:
        available = ", ".join(sorted(presets.keys()))
        raise InvalidStyleError(f"Unknown style '{style_name}'. Available: {available}")
    return presets[key]


def list_available_styles() -> List[str]:
    """List available style ids (sorted)."""

    return sorted(load_style_presets().keys())


def style_block(style_name: str) -> Dict[str, Any]:
    """The `style` section of a montage plan: preset id plus its tokens."""

    preset = get_style_preset(style_name)
    return {"preset": preset["id"], **preset["tokens"]}

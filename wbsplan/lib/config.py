"""
Editor configuration loader.

Loads timeline and drag settings from ``wbsplan.env``. Every key is optional;
a missing file yields the defaults, an invalid value falls back to its
default with a warning.
"""

import logging
from dataclasses import dataclass, fields
from pathlib import Path

from . import envparse

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "wbsplan.env"

VALID_DRAG_SNAPS = ("trunc", "round")


@dataclass(frozen=True)
class EditorConfig:
    """Timeline geometry and drag settings."""
    day_column_width: int = 40
    week_column_width: int = 20
    month_column_width: int = 10
    min_column_width: int = 10
    max_column_width: int = 200
    zoom_step: int = 5
    lead_days: int = 15  # Render window starts this many days before project start
    tail_days: int = 30  # ...and ends this many days after the latest end
    min_span_days: int = 30
    max_span_days: int = 3650
    sidebar_width: int = 260  # Host-provided; not derived from any viewport
    drag_snap: str = "trunc"


DEFAULT_CONFIG = EditorConfig()


def _env_key(field_name: str) -> str:
    return field_name.upper()


def _parse_positive_int(key: str, raw: str, default: int) -> int:
    try:
        value = int(raw)
    except ValueError:
        logger.warning(f"[CONFIG] {key}={raw!r} is not an integer, using {default}")
        return default
    if value <= 0:
        logger.warning(f"[CONFIG] {key}={raw!r} must be positive, using {default}")
        return default
    return value


def config_from_env(env: dict[str, str]) -> EditorConfig:
    """Build an EditorConfig from parsed env values."""
    values = {}
    for f in fields(EditorConfig):
        key = _env_key(f.name)
        default = getattr(DEFAULT_CONFIG, f.name)
        if key not in env:
            values[f.name] = default
        elif f.name == "drag_snap":
            snap = env[key].strip().lower()
            if snap not in VALID_DRAG_SNAPS:
                logger.warning(
                    f"[CONFIG] Unknown DRAG_SNAP '{env[key]}', using '{default}'. "
                    f"Valid values: {', '.join(VALID_DRAG_SNAPS)}"
                )
                snap = default
            values[f.name] = snap
        else:
            values[f.name] = _parse_positive_int(key, env[key], default)

    if values["min_column_width"] > values["max_column_width"]:
        logger.warning(
            f"[CONFIG] MIN_COLUMN_WIDTH {values['min_column_width']} exceeds "
            f"MAX_COLUMN_WIDTH {values['max_column_width']}, using defaults"
        )
        values["min_column_width"] = DEFAULT_CONFIG.min_column_width
        values["max_column_width"] = DEFAULT_CONFIG.max_column_width

    if values["min_span_days"] > values["max_span_days"]:
        logger.warning("[CONFIG] MIN_SPAN_DAYS exceeds MAX_SPAN_DAYS, using defaults")
        values["min_span_days"] = DEFAULT_CONFIG.min_span_days
        values["max_span_days"] = DEFAULT_CONFIG.max_span_days

    return EditorConfig(**values)


def load_editor_config(config_dir: Path) -> EditorConfig:
    """Load wbsplan.env from config_dir, or defaults if absent."""
    path = Path(config_dir) / CONFIG_FILENAME
    if not path.exists():
        return DEFAULT_CONFIG
    return config_from_env(envparse.load_env(path))

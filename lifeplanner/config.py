"""
Runtime configuration.

Settings live in ``config/lifeplanner.json``. Anything missing from the file
falls back to DEFAULT_CONFIG, so a partial file is fine.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

ROOT_DIR = Path(__file__).resolve().parent.parent
CONFIG_PATH = ROOT_DIR / "config" / "lifeplanner.json"

DEFAULT_CONFIG = {
    "db_path": str(ROOT_DIR / "lifeplanner.db"),
    "log_file": "lifeplanner.log",
    "log_level": "INFO",
    "default_steps_goal": 10000,
    "fitness_review_days": 7,
    "heatmap_weeks": 12,
}


def load_config(path: Optional[Path] = None) -> dict:
    """Read the JSON config and merge it over the defaults."""
    path = path or CONFIG_PATH
    merged = DEFAULT_CONFIG.copy()
    if not path.exists():
        return merged
    try:
        with open(path, encoding="utf-8") as f:
            cfg = json.load(f)
    except json.JSONDecodeError:
        logger.warning("Bad config at %s, using defaults.", path)
        return merged
    if not isinstance(cfg, dict):
        logger.warning("Config at %s is not an object, using defaults.", path)
        return merged
    unknown = set(cfg) - set(DEFAULT_CONFIG)
    if unknown:
        logger.warning("Ignoring unknown config keys: %s", ", ".join(sorted(unknown)))
    merged.update({k: v for k, v in cfg.items() if k in DEFAULT_CONFIG})
    return merged


def save_config(config: dict, path: Optional[Path] = None) -> None:
    path = path or CONFIG_PATH
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(config, f, indent=2)

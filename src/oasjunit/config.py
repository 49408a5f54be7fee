"""Config loading, defaults, validation, and deep merge."""

from __future__ import annotations

import logging
from pathlib import Path

from oasjunit.rules import RULE_CATEGORIES_ORDERED
from oasjunit.utils import deep_merge, load_json, save_json

logger = logging.getLogger(__name__)

CONFIG_DIR = ".oasjunit"
CONFIG_FILE = "config.json"

DEFAULT_CONFIG: dict = {
    "version": 1,
    "suite_prefix": "OAS Linting",
    "classname_prefix": "oas-linter",
    "max_name_length": 200,
    "categories": [{"id": c.id, "name": c.name} for c in RULE_CATEGORIES_ORDERED],
}


def get_config_path(start_dir: Path | None = None) -> Path:
    """Find .oasjunit/config.json by walking up from start_dir."""
    search = start_dir or Path.cwd()
    for d in [search, *search.parents]:
        candidate = d / CONFIG_DIR / CONFIG_FILE
        if candidate.exists():
            return candidate
    return (start_dir or Path.cwd()) / CONFIG_DIR / CONFIG_FILE


def load_config(start_dir: Path | None = None) -> dict:
    """Load config from .oasjunit/config.json, merged with defaults."""
    config_path = get_config_path(start_dir)
    if config_path.exists():
        user_config = load_json(config_path)
        if not user_config:
            logger.warning(
                "Config file exists but could not be loaded (corrupt?): %s "
                "Using defaults.", config_path
            )
        return deep_merge(DEFAULT_CONFIG, user_config)
    return DEFAULT_CONFIG.copy()


def save_config(config: dict, target_dir: Path | None = None) -> Path:
    """Save config to .oasjunit/config.json."""
    target = target_dir or Path.cwd()
    config_path = target / CONFIG_DIR / CONFIG_FILE
    save_json(config_path, config)
    return config_path


def validate_config(config: dict) -> list[str]:
    """Validate config, returning list of error messages (empty if valid)."""
    errors = []
    categories = config.get("categories")
    if categories is None:
        errors.append("Missing 'categories' key")
        return errors
    if not isinstance(categories, list):
        errors.append("'categories' must be an ordered list")
        return errors
    seen: set[str] = set()
    for idx, cat in enumerate(categories):
        if not isinstance(cat, dict):
            errors.append(f"Category #{idx} must be a dict")
            continue
        cat_id = cat.get("id")
        if not isinstance(cat_id, str) or not cat_id:
            errors.append(f"Category #{idx}: missing 'id'")
            continue
        if cat_id in seen:
            errors.append(f"Category '{cat_id}': duplicate id")
        seen.add(cat_id)
        if not isinstance(cat.get("name", ""), str):
            errors.append(f"Category '{cat_id}': name must be a string")
    for key in ("suite_prefix", "classname_prefix"):
        if not isinstance(config.get(key, ""), str):
            errors.append(f"'{key}' must be a string")
    max_len = config.get("max_name_length", 200)
    if isinstance(max_len, bool) or not isinstance(max_len, int) or max_len < 1:
        errors.append(f"'max_name_length' must be a positive integer, got {max_len!r}")
    return errors

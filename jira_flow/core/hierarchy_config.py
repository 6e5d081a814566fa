"""Load issue-type hierarchy levels and category colours from YAML (with fallbacks)."""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml

from .config import CATEGORY_COLORS, ISSUE_TYPE_HIERARCHY, UNKNOWN_HIERARCHY_LEVEL

logger = logging.getLogger(__name__)

# Directory holding hierarchy.yaml; defaults to the working directory
CONFIG_DIR_ENV = "JIRA_FLOW_CONFIG_DIR"

_CACHE: dict[str, dict] | None = None


def _defaults() -> dict[str, dict]:
    return {
        "levels": dict(ISSUE_TYPE_HIERARCHY),
        "colors": dict(CATEGORY_COLORS),
    }


def _config_dir(base_path: str | Path | None) -> Path:
    if base_path:
        return Path(base_path)
    env_dir = os.environ.get(CONFIG_DIR_ENV)
    if env_dir:
        return Path(env_dir)
    return Path.cwd()


def load_hierarchy_config(base_path: str | Path | None = None, *, reload: bool = False) -> dict[str, dict]:
    """Return ``{"levels": {type: level}, "colors": {category: hex}}``.

    Values found in ``hierarchy.yaml`` under ``base_path`` (else the directory
    named by ``JIRA_FLOW_CONFIG_DIR``, else the working directory) are
    layered over the built-in tables. A missing or unreadable
    file leaves the defaults in place.
    """
    global _CACHE
    if _CACHE is not None and not reload:
        return _CACHE
    yaml_path = _config_dir(base_path) / "hierarchy.yaml"
    config = _defaults()
    if not yaml_path.exists():
        _CACHE = config
        return _CACHE
    try:
        data = yaml.safe_load(yaml_path.read_text()) or {}
    except (OSError, yaml.YAMLError) as exc:
        logger.warning("Ignoring unreadable %s: %s", yaml_path, exc)
        _CACHE = config
        return _CACHE
    levels = data.get("issue_types") or {}
    for name, level in levels.items():
        try:
            config["levels"][str(name)] = int(level)
        except (TypeError, ValueError):
            logger.warning("Ignoring non-numeric hierarchy level for %s: %r", name, level)
    colors = data.get("colors") or {}
    for category, color in colors.items():
        if category in config["colors"] and color:
            config["colors"][category] = str(color)
    _CACHE = config
    return _CACHE


def hierarchy_level(issue_type: str | None) -> int:
    if not issue_type:
        return UNKNOWN_HIERARCHY_LEVEL
    return load_hierarchy_config()["levels"].get(issue_type, UNKNOWN_HIERARCHY_LEVEL)


def category_colors() -> dict[str, str]:
    return load_hierarchy_config()["colors"]

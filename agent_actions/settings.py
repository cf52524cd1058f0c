"""
Action Settings Loader

Loads tunable parser/executor settings from the packaged YAML file, an
optional override file, and AGENT_ACTIONS_* environment variables.
"""

import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Optional

import yaml

logger = logging.getLogger(__name__)

# Path to the packaged settings YAML file
SETTINGS_FILE = Path(__file__).parent / "action_settings.yaml"

# Environment variable naming an override YAML file
SETTINGS_ENV_VAR = "AGENT_ACTIONS_SETTINGS"
ENV_PREFIX = "AGENT_ACTIONS_"

# YAML section/key -> ActionSettings field
_YAML_KEYS = {
    ("corruption", "tag_threshold"): "corruption_tag_threshold",
    ("corruption", "escaped_newline_indent_threshold"): "escaped_newline_indent_threshold",
    ("corruption", "escaped_newline_statement_threshold"): "escaped_newline_statement_threshold",
    ("executor", "one_at_a_time"): "one_at_a_time",
    ("executor", "pending_notice"): "pending_notice",
    ("parser", "decode_entities"): "decode_entities",
}


@dataclass(frozen=True)
class ActionSettings:
    """Heuristic thresholds and executor defaults."""

    corruption_tag_threshold: int = 3
    escaped_newline_indent_threshold: int = 2
    escaped_newline_statement_threshold: int = 2
    one_at_a_time: bool = True
    pending_notice: bool = True
    decode_entities: bool = True

    def to_dict(self) -> dict:
        return {f.name: getattr(self, f.name) for f in fields(self)}


def _load_yaml(path: Path) -> dict[str, Any]:
    """Load a settings YAML file.

    Returns:
        The parsed mapping, or {} if the file is missing or unreadable
    """
    if not path.exists():
        logger.warning(f"Action settings file not found: {path}")
        return {}

    try:
        with open(path, "r") as f:
            config = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning(f"Could not read action settings from {path}: {e}")
        return {}

    if not isinstance(config, dict):
        logger.warning(f"Ignoring action settings in {path}: expected a mapping")
        return {}
    return config


def _coerce(name: str, value: Any, default: Any) -> Any:
    """Convert a raw YAML/env value to the type of the field default."""
    if isinstance(default, bool):
        if isinstance(value, bool):
            return value
        return str(value).strip().lower() == "true"
    try:
        coerced = int(value)
    except (TypeError, ValueError):
        logger.warning(f"Invalid value for action setting {name}: {value!r}, using {default}")
        return default
    if coerced < 1:
        logger.warning(f"Action setting {name} must be at least 1, using {default}")
        return default
    return coerced


def _apply_yaml(values: dict[str, Any], config: dict[str, Any], defaults: ActionSettings) -> None:
    for (section, key), name in _YAML_KEYS.items():
        section_config = config.get(section) or {}
        if isinstance(section_config, dict) and key in section_config:
            values[name] = _coerce(name, section_config[key], getattr(defaults, name))


def load_settings(path: Optional[Path] = None) -> ActionSettings:
    """Load action settings.

    Checks in order (later wins):
    1. Packaged action_settings.yaml (or ``path`` when given)
    2. File named in AGENT_ACTIONS_SETTINGS
    3. AGENT_ACTIONS_<FIELD> environment variables

    Args:
        path: Alternative base settings file

    Returns:
        The resolved ActionSettings
    """
    defaults = ActionSettings()
    values: dict[str, Any] = {}

    _apply_yaml(values, _load_yaml(path or SETTINGS_FILE), defaults)

    override_file = os.environ.get(SETTINGS_ENV_VAR)
    if override_file:
        _apply_yaml(values, _load_yaml(Path(override_file)), defaults)

    for f in fields(ActionSettings):
        raw = os.environ.get(f"{ENV_PREFIX}{f.name.upper()}")
        if raw is not None:
            values[f.name] = _coerce(f.name, raw, getattr(defaults, f.name))

    return ActionSettings(**values)


_settings: Optional[ActionSettings] = None


def get_settings() -> ActionSettings:
    """Return the process-wide settings, loading them on first use."""
    global _settings
    if _settings is None:
        _settings = load_settings()
        logger.debug(f"Loaded action settings: {_settings.to_dict()}")
    return _settings


def reset_settings() -> None:
    """Forget cached settings so the next get_settings() reloads them."""
    global _settings
    _settings = None

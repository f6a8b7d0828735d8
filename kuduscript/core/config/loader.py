"""
Configuration loader — reads .kuduscript.yml into a defaults model.

The file is optional.  It lives at the repository root (or wherever
``--config`` points) and supplies defaults for options the command line
leaves unset.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml

from kuduscript.core.errors import GenerationError
from kuduscript.core.models.defaults import ScriptDefaults

logger = logging.getLogger(__name__)

# Default config filename
DEFAULTS_FILE = ".kuduscript.yml"


class ConfigError(GenerationError):
    """Raised when the defaults file is invalid or unreadable."""

    kind = "config"


def find_defaults_file(repository_root: Path) -> Path | None:
    """Return the defaults file in *repository_root*, or None."""
    candidate = repository_root / DEFAULTS_FILE
    return candidate if candidate.is_file() else None


def load_defaults(path: Path | None) -> ScriptDefaults:
    """Load and validate option defaults.

    Args:
        path: Path to the defaults file. None yields empty defaults.

    Returns:
        Validated ScriptDefaults model.

    Raises:
        ConfigError: If the file is missing or invalid.
    """
    if path is None:
        return ScriptDefaults()

    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading defaults from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return ScriptDefaults()

    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    try:
        defaults = ScriptDefaults.model_validate(data)
    except Exception as e:
        raise ConfigError(f"Invalid configuration in {path}: {e}") from e

    logger.info("Loaded defaults from %s", path)
    return defaults

"""
Configuration loader — reads pacstate.yml into domain models.

This is the primary entry point for loading the desired-state manifest.
It reads YAML, validates against Pydantic schemas, and returns typed
domain objects.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml

from pacstate.core.errors import ConfigurationError
from pacstate.core.models.manifest import Manifest, Settings

logger = logging.getLogger(__name__)

# Default config filename
MANIFEST_FILE = "pacstate.yml"

# Environment override for settings.tool
TOOL_ENV_VAR = "PACSTATE_TOOL"


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Search for pacstate.yml starting from the given directory, walking up.

    Args:
        start_dir: Directory to start searching from (default: cwd).

    Returns:
        Path to pacstate.yml, or None if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        candidate = current / MANIFEST_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent

    return None


def load_manifest(path: Path | None = None) -> Manifest:
    """Load and validate the desired-state manifest.

    Args:
        path: Explicit path to pacstate.yml. If None, searches upward.

    Returns:
        Validated Manifest model.

    Raises:
        ConfigurationError: If the file is missing or invalid.
    """
    if path is None:
        path = find_config_file()

    if path is None:
        raise ConfigurationError(
            f"No {MANIFEST_FILE} found. Create one, or specify --config."
        )

    if not path.is_file():
        raise ConfigurationError(f"Config file not found: {path}")

    logger.debug("Loading manifest from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        data = {}

    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Expected a YAML mapping in {path}, got {type(data).__name__}"
        )

    try:
        manifest = Manifest.model_validate(data)
    except Exception as e:
        raise ConfigurationError(f"Invalid manifest: {e}") from e

    logger.info("Loaded manifest %s with %d packages", path, len(manifest.packages))
    return manifest


def load_settings(path: Path | None = None) -> Settings:
    """Resolve settings for single-package commands.

    A missing manifest is fine here: defaults apply. An explicit but
    broken manifest is still an error. ``PACSTATE_TOOL`` overrides the
    configured tool either way.
    """
    if path is None:
        path = find_config_file()

    settings = load_manifest(path).settings if path is not None else Settings()
    return with_env_overrides(settings)


def with_env_overrides(settings: Settings) -> Settings:
    """Apply environment overrides (currently ``PACSTATE_TOOL``)."""
    tool_override = os.environ.get(TOOL_ENV_VAR)
    if tool_override:
        return settings.model_copy(update={"tool": tool_override})
    return settings

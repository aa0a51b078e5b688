"""
Config check use case — validate pacstate.yml and report issues.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from pacstate.core.config.loader import MANIFEST_FILE, find_config_file, load_manifest
from pacstate.core.errors import ConfigurationError
from pacstate.core.models.manifest import Manifest
from pacstate.core.services.source_resolver import resolve_source


@dataclass
class ConfigCheckResult:
    """Result of manifest validation."""

    valid: bool = False
    manifest: Manifest | None = None
    config_path: Path | None = None
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "valid": self.valid,
            "config_path": str(self.config_path) if self.config_path else None,
            "errors": self.errors,
            "warnings": self.warnings,
            "tool": self.manifest.settings.tool if self.manifest else None,
            "package_count": len(self.manifest.packages) if self.manifest else 0,
        }


def check_config(config_path: Path | None = None) -> ConfigCheckResult:
    """Validate the manifest and report issues.

    Sources are classified here too, so a bad ``source`` is caught
    before an apply run gets to it.
    """
    result = ConfigCheckResult()

    if config_path is None:
        config_path = find_config_file()
    if config_path is None:
        result.errors.append(f"No {MANIFEST_FILE} found.")
        return result

    result.config_path = config_path

    try:
        manifest = load_manifest(config_path)
        result.manifest = manifest
    except ConfigurationError as e:
        result.errors.append(str(e))
        return result

    if not manifest.packages:
        result.warnings.append("No packages declared. Nothing to reconcile.")

    names = [p.name for p in manifest.packages]
    dupes = {n for n in names if names.count(n) > 1}
    if dupes:
        result.errors.append(f"Duplicate package names: {', '.join(sorted(dupes))}")

    for pkg in manifest.packages:
        if pkg.source is None:
            continue
        if not pkg.wants_installed:
            result.warnings.append(f"Package '{pkg.name}' is {pkg.ensure}; its source is ignored.")
            continue
        try:
            resolve_source(pkg.source)
        except ConfigurationError as e:
            result.errors.append(f"Package '{pkg.name}': {e}")

    result.valid = len(result.errors) == 0
    return result

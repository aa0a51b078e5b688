"""
Manifest model — desired state loaded from pacstate.yml.

Declares which packages should be present, absent, or kept at the
latest catalog version, plus the settings used to reach them.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from pacstate.core.models.package import PackageResource


class Settings(BaseModel):
    """How to reach the package tool."""

    tool: str = "pacman"            # executable name or absolute path
    timeout: int = Field(default=600, gt=0)


class Manifest(BaseModel):
    """Root desired-state document.

    Packages are reconciled in the order they are declared.
    """

    version: int = 1
    settings: Settings = Field(default_factory=Settings)
    packages: list[PackageResource] = Field(default_factory=list)

    def get_package(self, name: str) -> PackageResource | None:
        """Look up a declared package by name."""
        for pkg in self.packages:
            if pkg.name == name:
                return pkg
        return None

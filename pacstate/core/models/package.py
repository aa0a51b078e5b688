"""
Package models — desired state, observed state, and catalog entries.

None of these are persisted. Observations are rebuilt from the tool's
live output on every call.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, Field

PROVIDER = "pacman"

# Sentinel ensure values reported for packages that are not installed.
PURGED = "purged"
MISSING = "missing"

EnsureValue = Literal["present", "installed", "absent", "purged", "latest"]


class PackageResource(BaseModel):
    """Desired state of one package, as declared in the manifest."""

    name: str = Field(min_length=1)
    ensure: EnsureValue = "present"
    source: str | None = None

    def get(self, attribute: str) -> Any:
        """Read-only attribute accessor; unknown attributes read as None."""
        return getattr(self, attribute, None)

    @property
    def wants_installed(self) -> bool:
        return self.ensure in ("present", "installed", "latest")


class PackageState(BaseModel):
    """One point-in-time observation of a package's installed condition."""

    ensure: str
    name: str | None = None
    status: str | None = None
    error: str | None = None

    @property
    def installed(self) -> bool:
        return self.ensure not in (PURGED, MISSING)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


class InstalledPackage(BaseModel):
    """One entry of the installed-package listing."""

    name: str
    ensure: str
    provider: str = PROVIDER

    def properties(self) -> dict[str, str]:
        return {"provider": self.provider, "ensure": self.ensure, "name": self.name}


class SourceKind(str, Enum):
    """How a package source gets installed."""

    REPOSITORY = "repository"
    DIRECT = "direct"
    LOCAL_FILE = "local-file"


class ResolvedSource(BaseModel):
    """A classified install source and the argument to pass to ``-U``."""

    kind: SourceKind
    target: str | None = None

    @property
    def from_repository(self) -> bool:
        return self.kind is SourceKind.REPOSITORY

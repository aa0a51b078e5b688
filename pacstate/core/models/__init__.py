"""
Domain models — Pydantic types for the reconciler.

All models are re-exported here for convenient access:

    from pacstate.core.models import Manifest, PackageResource, PackageState, Receipt
"""

from pacstate.core.models.action import Invocation, Receipt
from pacstate.core.models.manifest import Manifest, Settings
from pacstate.core.models.package import (
    MISSING,
    PROVIDER,
    PURGED,
    InstalledPackage,
    PackageResource,
    PackageState,
    ResolvedSource,
    SourceKind,
)

__all__ = [
    # action.py
    "Invocation",
    # package.py
    "InstalledPackage",
    # manifest.py
    "Manifest",
    "MISSING",
    "PROVIDER",
    "PURGED",
    "PackageResource",
    "PackageState",
    "Receipt",
    "ResolvedSource",
    "Settings",
    "SourceKind",
]

"""
Apply use case — converge every declared package to its desired state.

Resources are reconciled one at a time, in manifest order. Each one is
independent: a failure is recorded on that resource's result and the
rest still run. Nothing is rolled back.

    present / installed   install when missing
    absent / purged       remove when installed
    latest                install when missing, update when the catalog
                          has a different version
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Literal

from pacstate.core.errors import PacstateError
from pacstate.core.models.manifest import Manifest
from pacstate.core.models.package import PackageResource, PackageState
from pacstate.core.services.reconciler import PacmanReconciler

logger = logging.getLogger(__name__)

ResourceAction = Literal["installed", "removed", "updated", "unchanged", "failed"]


@dataclass
class ResourceResult:
    """Outcome of reconciling one package."""

    name: str
    action: ResourceAction = "unchanged"
    before: str | None = None       # observed version, None if not installed
    after: str | None = None
    error: str | None = None

    @property
    def changed(self) -> bool:
        return self.action in ("installed", "removed", "updated")

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "action": self.action,
            "before": self.before,
            "after": self.after,
            "error": self.error,
        }


@dataclass
class ApplyReport:
    """Result of applying a manifest."""

    results: list[ResourceResult] = field(default_factory=list)
    dry_run: bool = False

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.results if r.action == "failed")

    @property
    def changed(self) -> int:
        return sum(1 for r in self.results if r.changed)

    @property
    def status(self) -> str:
        if self.failed == 0:
            return "ok"
        if self.failed == self.total:
            return "failed"
        return "partial"

    def to_dict(self) -> dict:
        return {
            "status": self.status,
            "dry_run": self.dry_run,
            "total": self.total,
            "changed": self.changed,
            "failed": self.failed,
            "results": [r.to_dict() for r in self.results],
        }


def _installed_version(state: PackageState | None) -> str | None:
    if state is None or not state.installed:
        return None
    return state.ensure


def reconcile_resource(
    resource: PackageResource,
    reconciler: PacmanReconciler,
    dry_run: bool = False,
) -> ResourceResult:
    """Bring one package to its desired state.

    Queries (and, for ``latest``, the catalog lookup) always run; in
    dry-run mode the changing calls are skipped and the result reports
    what would have happened.
    """
    result = ResourceResult(name=resource.name)

    try:
        current = _installed_version(reconciler.query(resource.name))
        result.before = current
        result.after = current

        if resource.ensure in ("absent", "purged"):
            if current is not None:
                result.action = "removed"
                if not dry_run:
                    reconciler.uninstall(resource.name)
                result.after = None

        elif current is None:
            result.action = "installed"
            if not dry_run:
                reconciler.install_resource(resource)
                result.after = _installed_version(reconciler.query(resource.name))

        elif resource.ensure == "latest":
            newest = reconciler.latest(resource.name)
            if newest and newest != current:
                result.action = "updated"
                if dry_run:
                    result.after = newest
                else:
                    reconciler.update(resource.name)
                    result.after = _installed_version(reconciler.query(resource.name))

    except PacstateError as e:
        logger.error("Failed to reconcile %s: %s", resource.name, e)
        result.action = "failed"
        result.error = str(e)

    if result.changed:
        logger.info("%s: %s (%s → %s)", resource.name, result.action, result.before, result.after)
    return result


def apply_manifest(
    manifest: Manifest,
    reconciler: PacmanReconciler,
    dry_run: bool = False,
    only: list[str] | None = None,
) -> ApplyReport:
    """Reconcile every package in ``manifest``.

    Args:
        manifest: Desired state.
        reconciler: Reconciler to drive.
        dry_run: Report planned changes without making them.
        only: Optional package names to restrict the run to.

    Returns:
        ApplyReport with one result per targeted package.
    """
    report = ApplyReport(dry_run=dry_run)

    for resource in manifest.packages:
        if only and resource.name not in only:
            continue
        report.results.append(reconcile_resource(resource, reconciler, dry_run=dry_run))

    logger.info(
        "Applied %d packages: %d changed, %d failed",
        report.total, report.changed, report.failed,
    )
    return report

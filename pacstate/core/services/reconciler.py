"""
Pacman reconciler — query, install, remove, and upgrade one package.

Every operation is a short, strictly sequential series of pacman
invocations made through an injected CommandRunner. Two of them are
two-phase and depend on that ordering:

    install from source:  -Sy (refresh catalog)  →  -U <source>
    latest:               -Sy (refresh catalog)  →  -Sp --print-format %v <name>

The second call is only built after the first has returned. Nothing is
cached between calls; every answer comes from the tool's live output.
"""

from __future__ import annotations

import logging
import os
from typing import Callable

from pacstate.adapters.base import CommandRunner
from pacstate.adapters.mock import MockRunner
from pacstate.adapters.shell.command import SubprocessRunner
from pacstate.core.config.tool_locator import locate_tool
from pacstate.core.errors import ExecutionFailure
from pacstate.core.models.manifest import Settings
from pacstate.core.models.package import (
    MISSING,
    PROVIDER,
    PURGED,
    InstalledPackage,
    PackageResource,
    PackageState,
)
from pacstate.core.services.pacman_output import parse_info_version, parse_list_line
from pacstate.core.services.source_resolver import resolve_source

logger = logging.getLogger(__name__)

# Flags that keep pacman from prompting or drawing progress bars
QUIET_FLAGS = ("--noconfirm", "--noprogressbar")


class PacmanReconciler:
    """Drive pacman towards a package's desired state.

    Args:
        tool_path: Absolute path to the pacman executable, resolved once
            at startup (see ``locate_tool``).
        runner: Execution collaborator for both blocking and streaming calls.
        warn: Sink for per-line parse warnings (default: module logger).
    """

    def __init__(
        self,
        tool_path: str,
        runner: CommandRunner,
        warn: Callable[[str], None] | None = None,
    ):
        self.tool_path = tool_path
        self.runner = runner
        self._warn = warn or logger.warning

    def __repr__(self) -> str:
        return f"<PacmanReconciler tool={self.tool_path!r} runner={self.runner.name!r}>"

    # ── Command building ────────────────────────────────────────

    def _command(self, *args: str) -> list[str]:
        return [self.tool_path, *args]

    def _quiet_command(self, *args: str) -> list[str]:
        return [self.tool_path, *QUIET_FLAGS, *args]

    def _refresh_catalog(self) -> None:
        self.runner.execute(self._quiet_command("-Sy"))

    # ── Act ─────────────────────────────────────────────────────

    def install(self, name: str, source: str | None = None) -> None:
        """Install ``name`` from the repositories, or from ``source``.

        Raises:
            ConfigurationError: ``source`` is malformed or unsupported.
                Raised before any command runs.
            ExecutionFailure: pacman failed, or the package is still not
                installed afterwards.
        """
        resolved = resolve_source(source)

        if resolved.from_repository:
            logger.info("Installing %s from repositories", name)
            self.runner.execute(self._quiet_command("-Sy", name))
        else:
            assert resolved.target is not None
            logger.info("Installing %s from %s (%s)", name, resolved.target, resolved.kind.value)
            self._refresh_catalog()
            self.runner.execute(self._quiet_command("-U", resolved.target))

        # A clean exit is not proof: confirm the package is really there
        state = self.query(name)
        if state is None or not state.installed:
            raise ExecutionFailure(
                f"Could not find package {name} after install",
                argv=self._command("-Qi", name),
            )

    def install_resource(self, resource: PackageResource) -> None:
        """Install a declared resource, honouring its ``source``."""
        self.install(resource.get("name"), source=resource.get("source"))

    def uninstall(self, name: str) -> None:
        """Remove ``name``. Failures propagate as ExecutionFailure."""
        logger.info("Removing %s", name)
        self.runner.execute(self._quiet_command("-R", name))

    def update(self, name: str) -> None:
        """Upgrade ``name`` through a repository install."""
        return self.install(name)

    # ── Observe ─────────────────────────────────────────────────

    def query(self, name: str) -> PackageState | None:
        """Report the installed version of ``name``.

        Returns:
            ``PackageState(ensure=<version>)`` when installed, None when
            pacman printed nothing usable, and a purged/missing state when
            pacman failed (the normal answer for unknown packages).
        """
        try:
            output = self.runner.execute(self._command("-Qi", name))
        except ExecutionFailure as e:
            logger.debug("Query for %s failed, treating as missing: %s", name, e)
            return PackageState(ensure=PURGED, status=MISSING, name=name, error="ok")

        version = parse_info_version(output or "")
        if version is None:
            return None
        return PackageState(ensure=version)

    def instances(self) -> list[InstalledPackage] | None:
        """List installed packages in pacman's order.

        Returns None (not an empty list) when the listing itself failed.
        Lines that don't parse are warned about and skipped.
        """
        packages: list[InstalledPackage] = []
        try:
            for chunk in self.runner.execute_streaming(self._command("-Q")):
                for line in chunk.splitlines():
                    if not line.strip():
                        continue
                    parsed = parse_list_line(line)
                    if parsed is None:
                        self._warn(f"Failed to match line {line}")
                        continue
                    name, version = parsed
                    packages.append(InstalledPackage(name=name, ensure=version, provider=PROVIDER))
        except ExecutionFailure as e:
            logger.debug("Package listing failed: %s", e)
            return None
        return packages

    def latest(self, name: str) -> str:
        """Return the newest version of ``name`` in the refreshed catalog."""
        self.runner.execute(self._command("-Sy"))
        output = self.runner.execute(self._command("-Sp", "--print-format", "%v", name))
        return (output or "").strip()


def build_reconciler(
    settings: Settings,
    *,
    mock_mode: bool = False,
    runner: CommandRunner | None = None,
) -> PacmanReconciler:
    """Wire a reconciler from settings.

    In mock mode the tool is not looked up on PATH and nothing is
    executed; a bare tool name is placed under /usr/bin.

    Raises:
        ConfigurationError: The tool cannot be located (real mode only).
    """
    if runner is None:
        runner = MockRunner.simulated() if mock_mode else SubprocessRunner(timeout=settings.timeout)

    if mock_mode:
        tool_path = settings.tool if os.path.isabs(settings.tool) else f"/usr/bin/{settings.tool}"
    else:
        tool_path = locate_tool(settings.tool)

    return PacmanReconciler(tool_path=tool_path, runner=runner)

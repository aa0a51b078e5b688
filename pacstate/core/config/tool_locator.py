"""
Tool locator — resolve the package tool's absolute path once.

The resolved path is handed to the reconciler at construction time
and used as the first element of every invocation.
"""

from __future__ import annotations

import logging
import os
import shutil

from pacstate.core.errors import ConfigurationError

logger = logging.getLogger(__name__)


def locate_tool(tool: str = "pacman", search_path: str | None = None) -> str:
    """Return the absolute path of ``tool``.

    ``tool`` may already be a path, in which case it must point at an
    executable file.

    Raises:
        ConfigurationError: The tool cannot be found or is not executable.
    """
    if os.sep in tool:
        path = os.path.abspath(tool)
        if os.path.isfile(path) and os.access(path, os.X_OK):
            return path
        raise ConfigurationError(f"{tool} is not an executable file")

    found = shutil.which(tool, path=search_path)
    if not found:
        raise ConfigurationError(f"{tool} not found on PATH")

    resolved = os.path.abspath(found)
    logger.debug("Resolved %s to %s", tool, resolved)
    return resolved

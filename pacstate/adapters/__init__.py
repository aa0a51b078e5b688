"""Adapters — process execution for the package tool.

Public re-exports for convenient access.
"""

from pacstate.adapters.base import CommandRunner
from pacstate.adapters.mock import MockRunner
from pacstate.adapters.shell.command import SubprocessRunner

__all__ = [
    "CommandRunner",
    "MockRunner",
    "SubprocessRunner",
]

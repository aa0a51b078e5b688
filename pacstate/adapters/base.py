"""
Runner base — the contract between the reconciler and process execution.

The reconciler never spawns processes itself. It hands argument vectors
to a CommandRunner and gets text back, or an ExecutionFailure.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterator, Sequence


class CommandRunner(ABC):
    """Abstract base class for all command runners.

    Unlike fire-and-forget adapters, runners DO raise: a non-zero exit or
    a command that cannot be started surfaces as ExecutionFailure, and the
    caller decides whether that is recoverable.

    To create a new runner:
        1. Subclass CommandRunner
        2. Implement name, is_available, execute, execute_streaming
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """The runner identifier (e.g., 'subprocess', 'mock')."""

    @abstractmethod
    def is_available(self) -> bool:
        """Check whether this runner can execute anything at all.

        Should be fast and never raise.
        """

    @abstractmethod
    def execute(self, argv: Sequence[str]) -> str:
        """Run ``argv`` to completion and return its captured stdout.

        Raises:
            ExecutionFailure: The command exited non-zero or could not run.
        """

    @abstractmethod
    def execute_streaming(self, argv: Sequence[str]) -> Iterator[str]:
        """Run ``argv`` and yield its output line by line (or by chunk).

        Raises:
            ExecutionFailure: Same contract as ``execute``.
        """

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"

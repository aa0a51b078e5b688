"""
Error taxonomy shared by the reconciler, adapters, and config layer.

Parse problems are not errors: unparseable tool output is reported
through the warning sink and skipped.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from pacstate.core.models.action import Receipt


class PacstateError(Exception):
    """Base class for everything pacstate raises on purpose."""


class ExecutionFailure(PacstateError):
    """The external tool reported an error, or could not be run at all."""

    def __init__(
        self,
        message: str,
        argv: Sequence[str] | None = None,
        receipt: Receipt | None = None,
    ):
        super().__init__(message)
        self.argv = list(argv) if argv else []
        self.receipt = receipt


class ConfigurationError(PacstateError):
    """Raised when a source, manifest, or tool setting is invalid or missing."""

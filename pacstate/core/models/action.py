"""
Invocation and Receipt models — the execution contract.

Invocations are argument vectors handed to a command runner. Receipts
capture what happened when one was run. The runner turns a failed
receipt into an ExecutionFailure; the receipt travels with it.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, Field


def _now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


class Invocation(BaseModel):
    """An ordered argument vector: ``[executable, *args]``."""

    argv: list[str]
    streaming: bool = False

    @property
    def executable(self) -> str:
        return self.argv[0] if self.argv else ""

    @property
    def args(self) -> list[str]:
        return self.argv[1:]

    def __contains__(self, item: str) -> bool:
        return item in self.argv

    def __str__(self) -> str:
        return " ".join(self.argv)


class Receipt(BaseModel):
    """Result of running one invocation."""

    argv: list[str]
    status: Literal["ok", "failed"] = "ok"

    started_at: str = Field(default_factory=_now_iso)
    ended_at: str = Field(default_factory=_now_iso)
    duration_ms: int = 0

    output: str = ""
    error: str | None = None
    return_code: int | None = None

    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        """Whether the command succeeded."""
        return self.status == "ok"

    @property
    def failed(self) -> bool:
        """Whether the command failed."""
        return self.status == "failed"

    @classmethod
    def success(cls, argv: list[str], output: str = "", **kwargs: Any) -> Receipt:
        """Create a success receipt."""
        return cls(argv=argv, status="ok", output=output, **kwargs)

    @classmethod
    def failure(cls, argv: list[str], error: str, **kwargs: Any) -> Receipt:
        """Create a failure receipt."""
        return cls(argv=argv, status="failed", error=error, **kwargs)

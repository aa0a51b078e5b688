"""
Mock runner — recording test double for command execution.

Used in tests and in ``--mock`` mode to simulate the package tool
without touching the system. Responses are keyed on a prefix of the
argument vector minus the executable, so ``set_response("-Qi", "vim", ...)``
matches ``[<tool>, "-Qi", "vim"]`` whatever the tool path is, and
``set_response("-Qi", ...)`` matches every ``-Qi`` query. The longest
matching prefix wins.
"""

from __future__ import annotations

from typing import Iterable, Iterator, NoReturn, Sequence

from pacstate.adapters.base import CommandRunner
from pacstate.core.errors import ExecutionFailure
from pacstate.core.models.action import Invocation, Receipt


class MockRunner(CommandRunner):
    """Universal mock runner for testing.

    By default every command succeeds with ``default_output``. Individual
    argument vectors can be given custom output (a string, or a list of
    chunks for streaming) or made to fail.
    """

    def __init__(
        self,
        runner_name: str = "mock",
        available: bool = True,
        default_output: str = "",
    ):
        self._name = runner_name
        self._available = available
        self._default_output = default_output
        self._responses: dict[tuple[str, ...], str | list[str]] = {}
        self._failures: dict[tuple[str, ...], str] = {}
        self._queued: dict[tuple[str, ...], list[tuple[bool, str | list[str]]]] = {}
        self._call_log: list[Invocation] = []

    @classmethod
    def simulated(cls, version: str = "0.0.0-mock") -> MockRunner:
        """A mock that reports every package as installed at ``version``.

        Backs ``--mock`` mode: installs verify, latest matches, and the
        listing is empty.
        """
        mock = cls(runner_name="simulated")
        mock.set_response("-Qi", output=f"Name            : simulated\nVersion         : {version}\n")
        mock.set_response("-Sp", output=f"{version}\n")
        return mock

    @property
    def name(self) -> str:
        return self._name

    @property
    def call_log(self) -> list[Invocation]:
        """All invocations this mock has received, in order."""
        return self._call_log

    @property
    def call_count(self) -> int:
        """Number of commands run, streaming or not."""
        return len(self._call_log)

    @property
    def calls(self) -> list[list[str]]:
        """The raw argument vectors, in order."""
        return [inv.argv for inv in self._call_log]

    def is_available(self) -> bool:
        return self._available

    def set_response(self, *args: str, output: str | list[str] = "") -> None:
        """Set the output for a specific argument vector."""
        self._failures.pop(tuple(args), None)
        self._responses[tuple(args)] = output

    def set_failure(self, *args: str, error: str = "Mock failure") -> None:
        """Configure a specific argument vector to fail."""
        self._responses.pop(tuple(args), None)
        self._failures[tuple(args)] = error

    def set_default_output(self, output: str) -> None:
        self._default_output = output

    def queue_response(self, *args: str, output: str | list[str] = "") -> None:
        """Answer the next matching command with ``output``, once.

        Queued answers are used up in order and take precedence over
        ``set_response`` and ``set_failure``.
        """
        self._queued.setdefault(tuple(args), []).append((True, output))

    def queue_failure(self, *args: str, error: str = "Mock failure") -> None:
        """Fail the next matching command, once."""
        self._queued.setdefault(tuple(args), []).append((False, error))

    def execute(self, argv: Sequence[str]) -> str:
        self._call_log.append(Invocation(argv=list(argv)))
        response = self._lookup(argv)
        if isinstance(response, list):
            return "".join(response)
        return response

    def execute_streaming(self, argv: Sequence[str]) -> Iterator[str]:
        self._call_log.append(Invocation(argv=list(argv), streaming=True))
        response = self._lookup(argv)
        chunks = response if isinstance(response, list) else [response]
        return iter([c for c in chunks if c])

    def reset(self) -> None:
        """Clear call log and custom responses."""
        self._call_log.clear()
        self._responses.clear()
        self._failures.clear()
        self._queued.clear()

    @staticmethod
    def _longest_prefix(args: tuple[str, ...], keys: Iterable[tuple[str, ...]]) -> tuple[str, ...] | None:
        best: tuple[str, ...] | None = None
        for key in keys:
            if args[: len(key)] == key and (best is None or len(key) > len(best)):
                best = key
        return best

    def _lookup(self, argv: Sequence[str]) -> str | list[str]:
        args = tuple(argv[1:])

        queued = self._longest_prefix(args, [k for k, q in self._queued.items() if q])
        if queued is not None:
            ok, value = self._queued[queued].pop(0)
            if ok:
                return value
            self._raise(argv, str(value))

        best = self._longest_prefix(args, (*self._responses, *self._failures))
        if best is not None and best in self._failures:
            self._raise(argv, self._failures[best])
        if best is not None:
            return self._responses[best]
        return self._default_output

    @staticmethod
    def _raise(argv: Sequence[str], error: str) -> NoReturn:
        receipt = Receipt.failure(
            argv=list(argv),
            error=error,
            return_code=1,
            metadata={"mock": True},
        )
        raise ExecutionFailure(error, argv=argv, receipt=receipt)

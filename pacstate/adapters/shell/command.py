"""
Subprocess runner — execute the package tool and capture its output.

This is the production runner: it spawns real processes, applies the
per-invocation timeout, and converts non-zero exits into ExecutionFailure
carrying a Receipt with the tool's error text.
"""

from __future__ import annotations

import logging
import os
import signal
import subprocess
import tempfile
import threading
import time
from typing import Iterator, Sequence

from pacstate.adapters.base import CommandRunner
from pacstate.core.errors import ExecutionFailure
from pacstate.core.models.action import Receipt

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 600


def _tool_env() -> dict[str, str]:
    """Environment for tool invocations.

    Field names in ``pacman -Qi`` output are translated under non-C
    locales, so parsing only works with the C locale forced.
    """
    return dict(os.environ, LC_ALL="C", LANG="C")


class SubprocessRunner(CommandRunner):
    """Run commands with :mod:`subprocess`.

    Args:
        timeout: Seconds before a command (blocking or streaming) is killed.
        env: Environment override (default: current env with LC_ALL=C).
    """

    def __init__(self, timeout: int = DEFAULT_TIMEOUT, env: dict[str, str] | None = None):
        self.timeout = timeout
        self._env = env

    @property
    def name(self) -> str:
        return "subprocess"

    def is_available(self) -> bool:
        # Spawns argv directly; whether the tool exists is the locator's job
        return True

    def execute(self, argv: Sequence[str]) -> str:
        argv = list(argv)
        logger.debug("Executing: %s", " ".join(argv))
        start = time.monotonic()

        try:
            result = subprocess.run(
                argv,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                env=self._env if self._env is not None else _tool_env(),
            )
        except subprocess.TimeoutExpired as e:
            receipt = Receipt.failure(
                argv=argv,
                error=f"Command timed out after {self.timeout}s",
                metadata={"timeout": self.timeout},
            )
            raise self._fail(receipt) from e
        except OSError as e:
            receipt = Receipt.failure(argv=argv, error=f"Command execution error: {e}")
            raise self._fail(receipt) from e

        elapsed_ms = int((time.monotonic() - start) * 1000)

        if result.returncode != 0:
            stderr = result.stderr.strip()
            receipt = Receipt.failure(
                argv=argv,
                error=stderr or f"Command exited with code {result.returncode}",
                output=result.stdout,
                return_code=result.returncode,
                duration_ms=elapsed_ms,
            )
            raise self._fail(receipt)

        logger.debug("Finished in %dms: %s", elapsed_ms, argv[0])
        return result.stdout

    def execute_streaming(self, argv: Sequence[str]) -> Iterator[str]:
        """Yield stdout lines as the process produces them.

        stderr goes to a temporary file so a chatty child can't block on
        a full pipe. The timeout covers the whole stream: a timer kills
        the process when it runs out. A failure to start is raised on the
        first ``next()``; a non-zero exit or timeout once output stops.
        """
        argv = list(argv)
        logger.debug("Streaming: %s", " ".join(argv))

        with tempfile.TemporaryFile(mode="w+", encoding="utf-8", errors="replace") as errfile:
            try:
                proc = subprocess.Popen(
                    argv,
                    stdout=subprocess.PIPE,
                    stderr=errfile,
                    text=True,
                    env=self._env if self._env is not None else _tool_env(),
                    start_new_session=True,
                )
            except OSError as e:
                receipt = Receipt.failure(argv=argv, error=f"Command execution error: {e}")
                raise self._fail(receipt) from e

            timed_out = threading.Event()

            def _kill() -> None:
                # Whole group: a grandchild would keep stdout open
                timed_out.set()
                try:
                    os.killpg(proc.pid, signal.SIGKILL)
                except ProcessLookupError:
                    pass

            timer = threading.Timer(self.timeout, _kill)
            timer.daemon = True
            timer.start()
            with proc:
                try:
                    assert proc.stdout is not None
                    for line in proc.stdout:
                        yield line.rstrip("\n")
                    returncode = proc.wait()
                finally:
                    timer.cancel()
                    if proc.poll() is None:
                        proc.kill()

            if timed_out.is_set():
                receipt = Receipt.failure(
                    argv=argv,
                    error=f"Command timed out after {self.timeout}s",
                    metadata={"timeout": self.timeout},
                )
                raise self._fail(receipt)

            if returncode != 0:
                errfile.seek(0)
                stderr = errfile.read()
                receipt = Receipt.failure(
                    argv=argv,
                    error=stderr.strip() or f"Command exited with code {returncode}",
                    return_code=returncode,
                )
                raise self._fail(receipt)

    @staticmethod
    def _fail(receipt: Receipt) -> ExecutionFailure:
        # Callers decide whether a failure is worth more than DEBUG
        logger.debug("Command failed: %s: %s", " ".join(receipt.argv), receipt.error)
        return ExecutionFailure(receipt.error or "Command failed", argv=receipt.argv, receipt=receipt)

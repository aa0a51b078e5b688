"""
Shared test fixtures and configuration.
"""

import logging

import pytest

from pacstate.adapters.mock import MockRunner
from pacstate.core.services.reconciler import PacmanReconciler

from tests.samples import TOOL


@pytest.fixture
def runner() -> MockRunner:
    """A recording mock runner; every command prints nothing by default."""
    return MockRunner()


@pytest.fixture
def warnings() -> list[str]:
    """Collects messages sent to the reconciler's warning sink."""
    return []


@pytest.fixture
def reconciler(runner: MockRunner, warnings: list[str]) -> PacmanReconciler:
    return PacmanReconciler(tool_path=TOOL, runner=runner, warn=warnings.append)


@pytest.fixture(autouse=True)
def _no_env_overrides(monkeypatch):
    """Keep the caller's PACSTATE_* environment out of the tests."""
    for var in ("PACSTATE_TOOL", "PACSTATE_LOG_LEVEL", "PACSTATE_LOG_FILE", "PACSTATE_LOG_FILE_LEVEL"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture(autouse=True)
def _reset_package_logger():
    """CLI runs install handlers on captured streams; drop them afterwards."""
    yield
    logger = logging.getLogger("pacstate")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)

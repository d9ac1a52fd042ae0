"""Shared test fixtures for insomnia-sync.

Provides reusable fixtures for loading spec fixtures, building deterministic
generation contexts, creating isolated config environments, managing output
and logging state, and running CLI commands. These fixtures are
automatically discovered by pytest and available to all test modules
without explicit imports.
"""

from __future__ import annotations

import itertools
import logging
import shutil
from pathlib import Path
from typing import Any, Callable

import pytest
import yaml

from insomnia_sync.generator.context import GenerationContext
from insomnia_sync.output import (
    OutputFormat,
    OutputLogHandler,
    OutputManager,
    reset_output,
    set_output,
)


FIXTURES_DIR = Path(__file__).parent / "fixtures"

EPOCH = 1_700_000_000_000


# ---------------------------------------------------------------------------
# Auto-reset global output and logging state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time.  When Typer's CliRunner redirects those streams during
    a test and the test finishes, the cached references become stale
    ("I/O operation on closed file").  Resetting forces a fresh manager
    to be created on next use.
    """
    yield
    reset_output()


@pytest.fixture(autouse=True)
def _reset_package_logger() -> None:
    """Undo :func:`configure_logging` so ``caplog`` sees package records again."""
    yield
    logger = logging.getLogger("insomnia_sync")
    for handler in list(logger.handlers):
        if isinstance(handler, OutputLogHandler):
            logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


# ---------------------------------------------------------------------------
# Spec fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def petstore_path() -> Path:
    """Path to the OpenAPI 3.0 petstore fixture."""
    return FIXTURES_DIR / "petstore.yaml"


@pytest.fixture
def petstore_tree(petstore_path: Path) -> dict[str, Any]:
    """Raw petstore tree as loaded by PyYAML."""
    with open(petstore_path, encoding="utf-8") as f:
        return yaml.safe_load(f)


@pytest.fixture
def swagger_tree() -> dict[str, Any]:
    """Raw Swagger 2.0 tree."""
    with open(FIXTURES_DIR / "swagger_2.0.yaml", encoding="utf-8") as f:
        return yaml.safe_load(f)


@pytest.fixture
def spec_file(tmp_path: Path, petstore_path: Path) -> Path:
    """A writable copy of the petstore fixture inside tmp_path."""
    target = tmp_path / "petstore.yaml"
    shutil.copyfile(petstore_path, target)
    return target


# ---------------------------------------------------------------------------
# Deterministic generation context
# ---------------------------------------------------------------------------


def counting_bytes() -> Callable[[int], bytes]:
    """Return a random-byte source yielding 1, 2, 3, ... as big-endian bytes."""
    counter = itertools.count(1)

    def _next(n: int) -> bytes:
        return next(counter).to_bytes(n, "big")

    return _next


@pytest.fixture
def ctx() -> GenerationContext:
    """A GenerationContext with a fixed epoch and sequential ids."""
    return GenerationContext(epoch=EPOCH, random_bytes=counting_bytes())


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Points XDG_CONFIG_HOME at a subdirectory of tmp_path so that tests never
    touch real user config, and changes the working directory to tmp_path.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setattr("insomnia_sync.config._is_xdg_platform", lambda: True)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a PLAIN-format, quiet OutputManager as the global output."""
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner.

    Returns a CliRunner instance that captures stdout/stderr and
    provides a consistent interface for invoking Typer apps in tests.
    """
    from typer.testing import CliRunner

    return CliRunner()

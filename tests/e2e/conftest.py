# ABOUTME: Fixtures for end-to-end CLI tests.
# ABOUTME: Isolates the environment, widens the shared console, and provides a CLI invoker.

import re
from collections.abc import Callable
from pathlib import Path

import pytest
from click.testing import CliRunner, Result

from readtrack.cli import cli
from readtrack.cli.context import console

ADDED_ID = re.compile(r"\(([0-9a-f]{32})\)")


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep the developer's READTRACK_* settings and .env out of the tests."""
    for name in (
        "READTRACK_BACKEND",
        "READTRACK_DATA_DIR",
        "READTRACK_USER_ID",
        "READTRACK_FIREBASE_API_KEY",
        "READTRACK_FIREBASE_PROJECT_ID",
        "READTRACK_FIREBASE_STORAGE_BUCKET",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    # Tables wrap at 80 columns otherwise.
    monkeypatch.setattr(console, "width", 200)


@pytest.fixture()
def data_dir(tmp_path: Path) -> Path:
    return tmp_path / "library"


@pytest.fixture()
def invoke(data_dir: Path) -> Callable[..., Result]:
    """Run a readtrack command against the temporary local library."""
    runner = CliRunner()

    def _invoke(*args: str, input: str | None = None) -> Result:
        return runner.invoke(cli, [*args, "--data-dir", str(data_dir)], input=input)

    return _invoke


@pytest.fixture()
def add_book(invoke: Callable[..., Result]) -> Callable[..., str]:
    """Add a book through the CLI and return its id."""

    def _add(title: str, author: str, *extra: str) -> str:
        result = invoke("add", "--title", title, "--author", author, *extra)
        assert result.exit_code == 0, result.output
        match = ADDED_ID.search(result.output)
        assert match, result.output
        return match.group(1)

    return _add

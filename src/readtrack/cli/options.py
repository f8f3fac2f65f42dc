# ABOUTME: Shared Click options for readtrack CLI commands.
# ABOUTME: Provides reusable decorators for --backend and --data-dir and builds Settings from them.

from collections.abc import Callable
from pathlib import Path
from typing import Any

import click

from readtrack.books.types import GENRES, BookStatus
from readtrack.config import DEFAULT_DATA_DIR, Settings

data_dir_option = click.option(
    "--data-dir",
    "data_dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help=f"Directory for the local library and session (default: {DEFAULT_DATA_DIR})",
)

backend_option = click.option(
    "--backend",
    type=click.Choice(["local", "firebase"]),
    default=None,
    help="Storage backend (default: READTRACK_BACKEND or local).",
)

status_type = click.Choice([status.value for status in BookStatus])
genre_type = click.Choice(GENRES, case_sensitive=False)


def store_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Apply --backend and --data-dir to a command."""
    return backend_option(data_dir_option(func))


def load_settings(backend: str | None, data_dir: Path | None) -> Settings:
    """Settings from the environment, overridden by explicit CLI options."""
    settings = Settings()
    overrides: dict[str, Any] = {}
    if backend is not None:
        overrides["backend"] = backend
    if data_dir is not None:
        overrides["data_dir"] = data_dir
    return settings.model_copy(update=overrides) if overrides else settings

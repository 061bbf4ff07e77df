"""Shared Typer app object, shared option types, and store utilities."""

import asyncio
import logging
from pathlib import Path
from typing import Annotated, Any, Coroutine, Optional, TypeVar

import typer
from rich.logging import RichHandler

from ..core.engine.config_loader import load_settings
from ..io.entry_store import EntryStore, get_default_store

T = TypeVar("T")

# Shared --data-path option type used across all commands
DataPathOption = Annotated[
    Optional[Path],
    typer.Option("--data-path", "-p", help="Path to entries JSONL file"),
]

JsonOption = Annotated[
    bool,
    typer.Option("--json", "-j", help="Output as JSON for machine processing"),
]

app = typer.Typer(
    name="workout-log",
    help="Personal workout log: record sets, reps and weight, and review trends.",
    no_args_is_help=False,
    invoke_without_command=True,
)


def get_store(data_path: Path | None) -> EntryStore:
    """Get entry store from path or default location."""
    if data_path is None:
        return get_default_store()
    return EntryStore(data_path)


def run(coro: Coroutine[Any, Any, T]) -> T:
    """Run one store coroutine to completion from a synchronous command."""
    return asyncio.run(coro)


def configure_logging(verbose: bool) -> None:
    """
    Route library logging through Rich.

    --verbose forces DEBUG; otherwise ``log_level`` from settings applies,
    and with neither set logging stays silent.
    """
    level_name = "DEBUG" if verbose else load_settings().get("log_level")
    if not level_name:
        return
    level = logging.getLevelName(str(level_name).upper())
    if not isinstance(level, int):
        level = logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(show_path=False)],
        force=True,
    )

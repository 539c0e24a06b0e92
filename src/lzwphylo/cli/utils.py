"""
Shared CLI utilities for lzwphylo commands.

Provides common functionality used across CLI modules.
"""

from __future__ import annotations

import logging
from collections.abc import Generator
from contextlib import contextmanager
from pathlib import Path
from typing import Any, NoReturn

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.progress import (
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
)

from lzwphylo.core.exceptions import LzwPhyloError
from lzwphylo.models.config import PipelineConfig


@contextmanager
def spinner_progress(
    description: str,
    console: Console | None = None,
    quiet: bool = False,
) -> Generator[Progress, None, None]:
    """Context manager for spinner-style progress display.

    Creates a standardized spinner progress bar used throughout the CLI.
    The spinner is suppressed when quiet mode is enabled.

    Args:
        description: Task description to display.
        console: Rich Console instance. If None and not quiet, creates one.
        quiet: If True, suppress the progress display entirely.

    Yields:
        Progress instance (even when quiet, for API consistency).
    """
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        TimeElapsedColumn(),
        console=console if not quiet else None,
        disable=quiet,
    ) as progress:
        progress.add_task(description=description, total=None)
        yield progress


def configure_logging(verbose: bool = False) -> None:
    """Route library logging through Rich.

    Args:
        verbose: INFO level if True, WARNING otherwise.
    """
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(show_path=False)],
        force=True,
    )


def load_config(
    console: Console,
    config_path: Path | None = None,
    kernel: dict[str, Any] | None = None,
    tree: dict[str, Any] | None = None,
) -> PipelineConfig:
    """Load YAML configuration (if given) and apply CLI overrides.

    Prints the error and exits with code 1 on invalid configuration.

    Args:
        console: Console for error output.
        config_path: Optional YAML configuration file.
        kernel: KernelConfig overrides from CLI options (None = unset).
        tree: TreeConfig overrides from CLI options (None = unset).

    Returns:
        Effective PipelineConfig.
    """
    try:
        config = PipelineConfig.from_yaml(config_path) if config_path else PipelineConfig()
        return config.with_overrides(kernel=kernel, tree=tree)
    except (ValidationError, ValueError) as e:
        console.print(f"[red]Error: invalid configuration: {escape(str(e))}[/red]")
        raise typer.Exit(code=1) from None


def exit_with_error(console: Console, error: LzwPhyloError) -> NoReturn:
    """Print an lzwphylo error with its suggestion and exit with code 1."""
    console.print(f"[red]Error: {error.message}[/red]")
    if error.suggestion:
        console.print(f"[dim]Suggestion: {error.suggestion}[/dim]")
    raise typer.Exit(code=1) from None


class QuietConsole:
    """Console wrapper that suppresses output in quiet mode.

    This class wraps a Rich Console instance and conditionally suppresses
    print output when quiet mode is enabled. All other console methods
    are delegated to the wrapped instance.

    Example:
        >>> console = Console()
        >>> qc = QuietConsole(console, quiet=True)
        >>> qc.print("This won't be shown")  # Suppressed
    """

    def __init__(self, console: Console, quiet: bool = False):
        """Initialize QuietConsole wrapper.

        Args:
            console: Rich Console instance to wrap.
            quiet: If True, suppress print output.
        """
        self._console = console
        self._quiet = quiet

    @property
    def console(self) -> Console:
        """Access the underlying Rich Console instance."""
        return self._console

    def print(self, *args: Any, **kwargs: Any) -> None:
        """Print to console unless quiet mode is enabled."""
        if not self._quiet:
            self._console.print(*args, **kwargs)

    def __getattr__(self, name: str) -> Any:
        """Delegate attribute access to wrapped console."""
        return getattr(self._console, name)

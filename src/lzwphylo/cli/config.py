"""
Config command for managing lzwphylo configuration files.

Provides subcommands:
- init: Write a YAML configuration file with default values
"""
from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

from lzwphylo.models.config import PipelineConfig

app = typer.Typer(
    name="config",
    help="Create and inspect configuration files",
    no_args_is_help=True,
)

console = Console()


@app.command(name="init")
def init(
    output: Path = typer.Option(
        Path("lzwphylo.yaml"),
        "--output",
        "-o",
        help="Output YAML file",
    ),
    force: bool = typer.Option(
        False,
        "--force",
        help="Overwrite an existing file",
    ),
) -> None:
    """
    Write a configuration file holding every default value.

    Edit the file and pass it to other commands with --config.
    """
    if output.exists() and not force:
        console.print(f"[red]Error: {output} already exists (use --force to overwrite)[/red]")
        raise typer.Exit(code=1) from None

    output.parent.mkdir(parents=True, exist_ok=True)
    PipelineConfig().to_yaml(output)
    console.print(f"[green]Wrote configuration to {output}[/green]")


@app.command(name="show")
def show(
    config: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        help="YAML configuration file (defaults if omitted)",
        exists=True,
        dir_okay=False,
    ),
) -> None:
    """Print the effective configuration as YAML."""
    from lzwphylo.cli.utils import load_config

    pipeline_config = load_config(console, config)
    console.print(pipeline_config.to_yaml_str(), markup=False, end="")

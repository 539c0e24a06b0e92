"""
Main CLI entry point for lzwphylo.

Provides subcommands for each stage of the pipeline:
- kernel: Compute LZW kernel matrices from FASTA sequences
- tree: Build neighbor-joining trees (Newick) from sequences or kernels
- config: Create configuration files
"""

from __future__ import annotations

import typer
from rich import print as rprint

from lzwphylo import __version__

app = typer.Typer(
    name="lzwphylo",
    help="Alignment-free phylogenies from LZW compression kernels",
    add_completion=False,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        rprint(f"lzwphylo version {__version__}")
        raise typer.Exit


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        "-V",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """
    lzwphylo: alignment-free phylogenies from LZW compression kernels.

    Sequences are parsed into LZW codeword sets, compared by their shared
    codewords, and joined into a binary tree by neighbor-joining.
    """


# Import subcommands
from lzwphylo.cli import config, kernel, tree

# Register subcommands
app.add_typer(kernel.app, name="kernel")
app.add_typer(tree.app, name="tree")
app.add_typer(config.app, name="config")


if __name__ == "__main__":
    app()

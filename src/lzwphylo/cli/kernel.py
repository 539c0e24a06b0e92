"""
Kernel command for computing LZW similarity matrices.

Provides subcommands:
- build: Compress FASTA records and write their LZW kernel matrix
"""
from __future__ import annotations

from enum import Enum
from pathlib import Path

import typer
from rich.console import Console

from lzwphylo.cli.utils import (
    QuietConsole,
    configure_logging,
    exit_with_error,
    load_config,
    spinner_progress,
)
from lzwphylo.core.alphabets import Alphabet
from lzwphylo.core.exceptions import LzwPhyloError

app = typer.Typer(
    name="kernel",
    help="Compute LZW kernel matrices from sequences",
    no_args_is_help=True,
)

console = Console()


class MatrixFormat(str, Enum):
    """Kernel matrix output format."""

    CSV = "csv"
    PARQUET = "parquet"


@app.command(name="build")
def build(
    fasta: Path = typer.Option(
        ...,
        "--fasta",
        "-f",
        help="Input FASTA file (plain or .gz)",
        exists=True,
        dir_okay=False,
    ),
    output: Path = typer.Option(
        ...,
        "--output",
        "-o",
        help="Output kernel matrix file",
    ),
    output_format: MatrixFormat = typer.Option(
        MatrixFormat.CSV,
        "--format",
        help="Output format: csv or parquet",
    ),
    alphabet: Alphabet | None = typer.Option(
        None,
        "--alphabet",
        "-a",
        help="Residue alphabet (default: dna_iupac)",
    ),
    weight: float | None = typer.Option(
        None,
        "--weight",
        "-w",
        help="Weight per shared codeword (default: 1.0)",
    ),
    gamma: float | None = typer.Option(
        None,
        "--gamma",
        "-g",
        help="Exponential decay of the kernel (default: 0.05)",
    ),
    threads: int | None = typer.Option(
        None,
        "--threads",
        "-t",
        help="Worker processes for pairwise scoring",
        min=1,
    ),
    config: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        help="YAML configuration file (CLI options take precedence)",
        exists=True,
        dir_okay=False,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose output",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Suppress progress output",
    ),
) -> None:
    """
    Build an LZW kernel matrix.

    Every sequence is parsed into LZW codewords; pairs are scored by their
    shared codewords. The matrix is symmetric with 1.0 on the diagonal.

    Examples:

        # Kernel from a FASTA file
        lzwphylo kernel build --fasta isolates.fasta --output kernel.csv

        # Protein sequences, 8 worker processes, Parquet output
        lzwphylo kernel build -f proteins.faa -o kernel.parquet --format parquet -a protein -t 8
    """
    from lzwphylo.core.kernel import KernelMatrix
    from lzwphylo.core.parsers import read_fasta

    configure_logging(verbose)
    out = QuietConsole(console, quiet=quiet)

    pipeline_config = load_config(
        console,
        config,
        kernel={"alphabet": alphabet, "weight": weight, "gamma": gamma, "num_workers": threads},
    )
    kernel_config = pipeline_config.kernel

    out.print("\n[bold blue]lzwphylo Kernel Builder[/bold blue]\n")
    out.print(f"[bold]Input:[/bold] {fasta}")
    out.print(f"[bold]Alphabet:[/bold] {kernel_config.alphabet.value}")
    out.print(f"[bold]Gamma:[/bold] {kernel_config.gamma}  [bold]Weight:[/bold] {kernel_config.weight}")

    try:
        records = read_fasta(fasta)
        out.print(f"[bold]Sequences:[/bold] {len(records)}")

        with spinner_progress(
            f"Scoring {len(records)} sequences...",
            console,
            quiet,
        ):
            kernel = KernelMatrix.from_records(records, kernel_config)
    except LzwPhyloError as e:
        exit_with_error(console, e)

    output.parent.mkdir(parents=True, exist_ok=True)
    try:
        kernel.write(output, output_format.value)
    except ValueError as e:
        console.print(f"[red]Error writing kernel matrix: {e}[/red]")
        raise typer.Exit(code=1) from None

    out.print("\n[bold green]Kernel built successfully![/bold green]")
    out.print(f"[bold]Output:[/bold] {output}")
    out.print(f"\n[dim]Use with: lzwphylo tree build --kernel {output} --output tree.nwk[/dim]")
    out.print()

"""
Tree command for building neighbor-joining trees.

Provides subcommands:
- build: Build a Newick tree from FASTA sequences or a kernel matrix
"""
from __future__ import annotations

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
from lzwphylo.core.distance import DistanceMethod
from lzwphylo.core.exceptions import LzwPhyloError

app = typer.Typer(
    name="tree",
    help="Build neighbor-joining trees from LZW kernels",
    no_args_is_help=True,
)

console = Console()


@app.command(name="build")
def build(
    fasta: Path | None = typer.Option(
        None,
        "--fasta",
        "-f",
        help="Input FASTA file (plain or .gz)",
        exists=True,
        dir_okay=False,
    ),
    kernel: Path | None = typer.Option(
        None,
        "--kernel",
        "-k",
        help="Precomputed kernel matrix (CSV or Parquet from 'kernel build')",
        exists=True,
        dir_okay=False,
    ),
    output: Path = typer.Option(
        ...,
        "--output",
        "-o",
        help="Output Newick file",
    ),
    distance_method: DistanceMethod | None = typer.Option(
        None,
        "--distance-method",
        "-d",
        help="Kernel-to-distance conversion (default: kernel-metric)",
    ),
    strict: bool | None = typer.Option(
        None,
        "--strict/--no-strict",
        help="Standard Newick with ';' (strict) or bare nested names; default from config",
    ),
    alphabet: Alphabet | None = typer.Option(
        None,
        "--alphabet",
        "-a",
        help="Residue alphabet for --fasta (default: dna_iupac)",
    ),
    weight: float | None = typer.Option(
        None,
        "--weight",
        "-w",
        help="Weight per shared codeword for --fasta (default: 1.0)",
    ),
    gamma: float | None = typer.Option(
        None,
        "--gamma",
        "-g",
        help="Exponential decay of the kernel for --fasta (default: 0.05)",
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
    Build a neighbor-joining tree.

    Takes either a FASTA file (sequences are compressed and scored first)
    or a kernel matrix written by 'lzwphylo kernel build'.

    Examples:

        # Tree straight from sequences
        lzwphylo tree build --fasta isolates.fasta --output tree.nwk

        # Tree from a saved kernel, standard Newick output
        lzwphylo tree build --kernel kernel.csv --output tree.nwk --strict
    """
    from lzwphylo.core.kernel import KernelMatrix
    from lzwphylo.core.parsers import read_fasta
    from lzwphylo.core.phylogeny.tree_builder import (
        build_kernel,
        kernel_to_tree,
        render_newick,
    )

    configure_logging(verbose)
    out = QuietConsole(console, quiet=quiet)

    if (fasta is None) == (kernel is None):
        console.print("[red]Error: provide exactly one of --fasta or --kernel[/red]")
        raise typer.Exit(code=1) from None

    pipeline_config = load_config(
        console,
        config,
        kernel={"alphabet": alphabet, "weight": weight, "gamma": gamma, "num_workers": threads},
        tree={"distance_method": distance_method, "strict_newick": strict},
    )

    out.print("\n[bold blue]lzwphylo Tree Builder[/bold blue]\n")
    out.print(f"[bold]Distance:[/bold] {pipeline_config.tree.distance_method.value}")

    try:
        if fasta is not None:
            out.print(f"[bold]Input:[/bold] {fasta}")
            records = read_fasta(fasta)
            with spinner_progress(
                f"Scoring {len(records)} sequences...",
                console,
                quiet,
            ):
                kernel_matrix = build_kernel(records, pipeline_config.kernel)
        else:
            out.print(f"[bold]Kernel matrix:[/bold] {kernel}")
            try:
                kernel_matrix = KernelMatrix.from_file(kernel)
            except ValueError as e:
                console.print(f"[red]Error loading kernel matrix: {e}[/red]")
                raise typer.Exit(code=1) from None

        out.print(f"[bold]Taxa:[/bold] {len(kernel_matrix)}")

        with spinner_progress(
            f"Joining {len(kernel_matrix)} taxa...",
            console,
            quiet,
        ):
            tree = kernel_to_tree(kernel_matrix, pipeline_config.tree.distance_method)
    except LzwPhyloError as e:
        exit_with_error(console, e)

    newick = render_newick(tree, strict=pipeline_config.tree.strict_newick)

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(newick + "\n")

    out.print("\n[bold green]Tree built successfully![/bold green]")
    out.print(f"[bold]Output:[/bold] {output}")
    out.print()

"""
Integration tests for CLI commands.

Runs the Typer app end to end on small FASTA files with CliRunner.
"""

from __future__ import annotations

from io import StringIO
from pathlib import Path

import polars as pl
import pytest
from Bio import Phylo
from typer.testing import CliRunner

from lzwphylo import __version__
from lzwphylo.cli.main import app
from lzwphylo.models.config import PipelineConfig

runner = CliRunner()


class TestMainApp:
    """Tests for the top-level app."""

    def test_version(self):
        """--version prints the package version."""
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_help(self):
        """--help lists the subcommands."""
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        for command in ("kernel", "tree", "config"):
            assert command in result.output


class TestKernelBuild:
    """Tests for 'kernel build'."""

    def test_csv_output(self, fasta_file: Path, tmp_path: Path):
        """Writes a square CSV kernel with a name column."""
        output = tmp_path / "kernel.csv"
        result = runner.invoke(app, [
            "kernel", "build",
            "--fasta", str(fasta_file),
            "--output", str(output),
            "--quiet",
        ])
        assert result.exit_code == 0, result.output
        df = pl.read_csv(output)
        assert df.columns == ["name", "seqA", "seqB", "seqC", "seqD"]
        assert df.get_column("seqA")[0] == pytest.approx(1.0)

    def test_parquet_output_with_options(self, gzipped_fasta_file: Path, tmp_path: Path):
        """Parquet output honors alphabet and worker options."""
        output = tmp_path / "nested" / "kernel.parquet"
        result = runner.invoke(app, [
            "kernel", "build",
            "-f", str(gzipped_fasta_file),
            "-o", str(output),
            "--format", "parquet",
            "--alphabet", "dna",
            "--gamma", "0.1",
            "--threads", "2",
        ])
        assert result.exit_code == 0, result.output
        assert pl.read_parquet(output).height == 4

    def test_invalid_gamma(self, fasta_file: Path, tmp_path: Path):
        """Non-positive gamma exits with an error."""
        result = runner.invoke(app, [
            "kernel", "build",
            "--fasta", str(fasta_file),
            "--output", str(tmp_path / "kernel.csv"),
            "--gamma", "0",
        ])
        assert result.exit_code == 1
        assert "invalid configuration" in result.output

    def test_empty_sequence(self, tmp_path: Path):
        """Empty records are reported with their name."""
        fasta = tmp_path / "blank.fasta"
        fasta.write_text(">full\nACGT\n>blank\n")
        result = runner.invoke(app, [
            "kernel", "build",
            "--fasta", str(fasta),
            "--output", str(tmp_path / "kernel.csv"),
        ])
        assert result.exit_code == 1
        assert "blank" in result.output

    def test_missing_fasta(self, tmp_path: Path):
        """A missing input file is rejected by option validation."""
        result = runner.invoke(app, [
            "kernel", "build",
            "--fasta", str(tmp_path / "absent.fasta"),
            "--output", str(tmp_path / "kernel.csv"),
        ])
        assert result.exit_code != 0


class TestTreeBuild:
    """Tests for 'tree build'."""

    def test_from_fasta(self, fasta_file: Path, tmp_path: Path):
        """Builds a simplified Newick tree straight from sequences."""
        output = tmp_path / "tree.nwk"
        result = runner.invoke(app, [
            "tree", "build",
            "--fasta", str(fasta_file),
            "--output", str(output),
        ])
        assert result.exit_code == 0, result.output
        newick = output.read_text().strip()
        assert not newick.endswith(";")
        for name in ("seqA", "seqB", "seqC", "seqD"):
            assert newick.count(name) == 1

    def test_from_kernel_strict(self, fasta_file: Path, tmp_path: Path):
        """A saved kernel gives the same tree, in strict Newick if asked."""
        kernel = tmp_path / "kernel.csv"
        runner.invoke(app, [
            "kernel", "build", "--fasta", str(fasta_file), "--output", str(kernel), "-q",
        ])
        direct = tmp_path / "direct.nwk"
        runner.invoke(app, [
            "tree", "build", "--fasta", str(fasta_file), "--output", str(direct), "-q",
        ])

        output = tmp_path / "tree.nwk"
        result = runner.invoke(app, [
            "tree", "build",
            "--kernel", str(kernel),
            "--output", str(output),
            "--strict",
            "--quiet",
        ])
        assert result.exit_code == 0, result.output

        newick = output.read_text().strip()
        assert newick.endswith(";")
        parsed = Phylo.read(StringIO(newick), "newick")
        assert parsed.count_terminals() == 4
        assert newick.rstrip(";") == direct.read_text().strip()

    def test_distance_method_option(self, fasta_file: Path, tmp_path: Path):
        """The complement distance can be selected."""
        output = tmp_path / "tree.nwk"
        result = runner.invoke(app, [
            "tree", "build",
            "--fasta", str(fasta_file),
            "--output", str(output),
            "--distance-method", "complement",
            "-q",
        ])
        assert result.exit_code == 0, result.output
        assert output.exists()

    def test_requires_one_input(self, fasta_file: Path, tmp_path: Path):
        """Neither or both of --fasta/--kernel is an error."""
        output = tmp_path / "tree.nwk"
        result = runner.invoke(app, ["tree", "build", "--output", str(output)])
        assert result.exit_code == 1
        assert "exactly one" in result.output

        result = runner.invoke(app, [
            "tree", "build",
            "--fasta", str(fasta_file),
            "--kernel", str(fasta_file),
            "--output", str(output),
        ])
        assert result.exit_code == 1

    def test_single_sequence(self, tmp_path: Path):
        """One sequence cannot form a tree."""
        fasta = tmp_path / "one.fasta"
        fasta.write_text(">only\nACGT\n")
        result = runner.invoke(app, [
            "tree", "build",
            "--fasta", str(fasta),
            "--output", str(tmp_path / "tree.nwk"),
        ])
        assert result.exit_code == 1
        assert "Too few taxa" in result.output

    def test_config_file(self, fasta_file: Path, tmp_path: Path):
        """Values from --config are applied."""
        config = tmp_path / "config.yaml"
        config.write_text("tree:\n  strict_newick: true\n")
        output = tmp_path / "tree.nwk"
        result = runner.invoke(app, [
            "tree", "build",
            "--fasta", str(fasta_file),
            "--output", str(output),
            "--config", str(config),
            "-q",
        ])
        assert result.exit_code == 0, result.output
        assert output.read_text().strip().endswith(";")

    def test_no_strict_overrides_config(self, fasta_file: Path, tmp_path: Path):
        """--no-strict turns off strict_newick set in the config file."""
        config = tmp_path / "config.yaml"
        config.write_text("tree:\n  strict_newick: true\n")
        output = tmp_path / "tree.nwk"
        result = runner.invoke(app, [
            "tree", "build",
            "--fasta", str(fasta_file),
            "--output", str(output),
            "--config", str(config),
            "--no-strict",
            "-q",
        ])
        assert result.exit_code == 0, result.output
        newick = output.read_text().strip()
        assert newick.startswith("(")
        assert not newick.endswith(";")


class TestConfigCommands:
    """Tests for 'config init' and 'config show'."""

    def test_init_writes_defaults(self, tmp_path: Path):
        """init writes a loadable default configuration."""
        output = tmp_path / "lzwphylo.yaml"
        result = runner.invoke(app, ["config", "init", "--output", str(output)])
        assert result.exit_code == 0, result.output
        assert PipelineConfig.from_yaml(output) == PipelineConfig()

    def test_init_refuses_overwrite(self, tmp_path: Path):
        """Existing files are kept unless --force is given."""
        output = tmp_path / "lzwphylo.yaml"
        output.write_text("kernel:\n  gamma: 0.2\n")
        result = runner.invoke(app, ["config", "init", "--output", str(output)])
        assert result.exit_code == 1
        assert "gamma: 0.2" in output.read_text()

        result = runner.invoke(app, ["config", "init", "--output", str(output), "--force"])
        assert result.exit_code == 0
        assert PipelineConfig.from_yaml(output) == PipelineConfig()

    def test_show(self, tmp_path: Path):
        """show prints the effective configuration."""
        config = tmp_path / "config.yaml"
        config.write_text("kernel:\n  gamma: 0.2\n")
        result = runner.invoke(app, ["config", "show", "--config", str(config)])
        assert result.exit_code == 0, result.output
        assert "gamma: 0.2" in result.output

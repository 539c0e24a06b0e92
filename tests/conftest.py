"""
Shared pytest fixtures for lzwphylo tests.

Provides reusable sequences, FASTA files, and distance matrices
for unit and integration testing.
"""

from __future__ import annotations

import gzip
from pathlib import Path

import numpy as np
import pytest

from lzwphylo.core.parsers import SequenceRecord


# =============================================================================
# Sequence Fixtures
# =============================================================================


@pytest.fixture
def four_records() -> list[SequenceRecord]:
    """Four short DNA records, two closely related pairs."""
    return [
        SequenceRecord("seqA", "ACGTACGTACGTTTGACCA"),
        SequenceRecord("seqB", "ACGTACGTACGTTTGACCT"),
        SequenceRecord("seqC", "GGGCCCAAATTTGGGCCCAAAT"),
        SequenceRecord("seqD", "GGGCCCAAATTTGGGCCCAAAG"),
    ]


@pytest.fixture
def fasta_text(four_records: list[SequenceRecord]) -> str:
    """FASTA rendering of four_records, with descriptions on the headers."""
    return "".join(f">{r.name} sample record\n{r.sequence}\n" for r in four_records)


@pytest.fixture
def fasta_file(tmp_path: Path, fasta_text: str) -> Path:
    """Plain FASTA file holding four_records."""
    path = tmp_path / "records.fasta"
    path.write_text(fasta_text)
    return path


@pytest.fixture
def gzipped_fasta_file(tmp_path: Path, fasta_text: str) -> Path:
    """Gzipped FASTA file holding four_records."""
    path = tmp_path / "records.fasta.gz"
    with gzip.open(path, "wt") as handle:
        handle.write(fasta_text)
    return path


# =============================================================================
# Distance Matrix Fixtures
# =============================================================================


@pytest.fixture
def four_taxon_distances() -> np.ndarray:
    """
    Four-taxon additive-looking distance matrix.

    Q-matrix ties (0,1) with (2,3); the row-major rule picks (0,1).
    """
    return np.array(
        [
            [0.0, 5.0, 9.0, 9.0],
            [5.0, 0.0, 10.0, 10.0],
            [9.0, 10.0, 0.0, 8.0],
            [9.0, 10.0, 8.0, 0.0],
        ]
    )


@pytest.fixture
def four_taxon_names() -> list[str]:
    """Names matching four_taxon_distances."""
    return ["A", "B", "C", "D"]

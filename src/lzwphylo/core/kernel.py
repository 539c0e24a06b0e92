"""
LZW kernel: pairwise sequence similarity from shared codewords.

Two sequences are similar when their LZW parses emit many of the same
codewords. The normalized score is a cosine-style normalization of
exp(gamma * w * |A & B|), computed in log space so that large dictionaries
neither overflow nor underflow.

The matrix is assembled from the strict upper triangle plus a 0.5 diagonal
and symmetrized as M + M.T, which leaves an exact 1.0 on the diagonal.
Cells are independent, so the flattened index range is split into chunks
that may be scored by a multiprocessing pool.
"""

from __future__ import annotations

import logging
import math
import multiprocessing as mp
from collections.abc import Sequence
from functools import partial
from pathlib import Path
from typing import TYPE_CHECKING, TypeAlias

import numpy as np
import polars as pl

from lzwphylo.core.constants import (
    DEFAULT_GAMMA,
    DEFAULT_WEIGHT,
    KERNEL_CHUNK_SIZE,
    KERNEL_DIAGONAL_SEED,
)
from lzwphylo.core.exceptions import (
    DistanceMatrixNotSquareError,
    InvalidParameterError,
    NameCountMismatchError,
)
from lzwphylo.core.io_utils import (
    OutputFormat,
    dataframe_to_matrix,
    matrix_to_dataframe,
    read_dataframe,
    write_dataframe,
)
from lzwphylo.core.lzw import CodeDictionary, compress_records

if TYPE_CHECKING:
    from lzwphylo.core.parsers import SequenceRecord
    from lzwphylo.models.config import KernelConfig

logger = logging.getLogger(__name__)

# (flat_index, score) pairs produced by one worker chunk
ScoredCells: TypeAlias = list[tuple[int, float]]


def _log_score(
    code_a: frozenset[str] | set[str],
    code_b: frozenset[str] | set[str],
    weight: float,
    gamma: float,
) -> float:
    """Normalized score from raw codeword sets, in the subtractive log-space form."""
    matches = weight * len(code_a & code_b)
    a_score = len(code_a) * weight
    b_score = len(code_b) * weight
    return math.exp((gamma * matches) - (0.5 * gamma * (a_score + b_score)))


def raw_lzw_score(
    code_a: CodeDictionary,
    code_b: CodeDictionary,
    weight: float = DEFAULT_WEIGHT,
    gamma: float = DEFAULT_GAMMA,
) -> float:
    """Unnormalized score exp(gamma * w * |A & B|)."""
    return math.exp(gamma * weight * len(code_a.code & code_b.code))


def reference_lzw_score(
    code_a: CodeDictionary,
    code_b: CodeDictionary,
    weight: float = DEFAULT_WEIGHT,
    gamma: float = DEFAULT_GAMMA,
) -> float:
    """
    Normalized score computed from separate exponentials.

    Mathematically equal to normalized_lzw_score but overflows for large
    dictionaries. Kept as a cross-check only.
    """
    score_aa = raw_lzw_score(code_a, code_a, weight, gamma)
    score_bb = raw_lzw_score(code_b, code_b, weight, gamma)
    score_ab = raw_lzw_score(code_a, code_b, weight, gamma)
    return score_ab / math.sqrt(score_aa * score_bb)


def normalized_lzw_score(
    code_a: CodeDictionary,
    code_b: CodeDictionary,
    weight: float = DEFAULT_WEIGHT,
    gamma: float = DEFAULT_GAMMA,
) -> float:
    """
    Normalized LZW similarity of two code dictionaries.

    score = exp(gamma*w*|A & B| - 0.5*gamma*w*(|A| + |B|))

    Args:
        code_a: First dictionary.
        code_b: Second dictionary.
        weight: Weight per shared codeword.
        gamma: Exponential decay.

    Returns:
        Similarity in (0, 1]; 1.0 for identical codeword sets.
    """
    return _log_score(code_a.code, code_b.code, weight, gamma)


def _score_chunk_worker(
    bounds: tuple[int, int],
    codes: Sequence[frozenset[str]],
    weight: float,
    gamma: float,
) -> ScoredCells:
    """
    Worker function for parallel kernel scoring.

    Runs in a separate process. Scores every upper-triangle cell and seeds
    every diagonal cell in the flat index range [start, stop). Lower
    triangle cells are left out and stay zero.

    Args:
        bounds: (start, stop) flat indices into the n*n matrix.
        codes: Codeword set per sequence (read-only).
        weight: Weight per shared codeword.
        gamma: Exponential decay.

    Returns:
        List of (flat_index, score) pairs owned by this chunk.
    """
    n = len(codes)
    start, stop = bounds
    cells: ScoredCells = []
    for idx in range(start, stop):
        row, col = divmod(idx, n)
        if row == col:
            cells.append((idx, KERNEL_DIAGONAL_SEED))
        elif row < col:
            cells.append((idx, _log_score(codes[row], codes[col], weight, gamma)))
    return cells


def _validate_parameters(weight: float, gamma: float, num_workers: int) -> None:
    if not (math.isfinite(weight) and weight > 0):
        raise InvalidParameterError("weight", weight, "a finite number > 0")
    if not (math.isfinite(gamma) and gamma > 0):
        raise InvalidParameterError("gamma", gamma, "a finite number > 0")
    if num_workers < 1:
        raise InvalidParameterError("num_workers", num_workers, ">= 1")


def lzw_kernel(
    dictionaries: Sequence[CodeDictionary],
    weight: float = DEFAULT_WEIGHT,
    gamma: float = DEFAULT_GAMMA,
    num_workers: int = 1,
    chunk_size: int = KERNEL_CHUNK_SIZE,
) -> np.ndarray:
    """
    Compute the symmetric LZW kernel matrix.

    Args:
        dictionaries: One CodeDictionary per sequence, in row order.
            Never mutated.
        weight: Weight per shared codeword (default: 1.0).
        gamma: Exponential decay (default: 0.05).
        num_workers: Worker processes. 1 scores in-process.
        chunk_size: Flat matrix cells per worker task.

    Returns:
        n x n float64 array, symmetric, with 1.0 on the diagonal.

    Raises:
        InvalidParameterError: If weight, gamma or num_workers is invalid.
    """
    _validate_parameters(weight, gamma, num_workers)

    n = len(dictionaries)
    if n == 0:
        return np.zeros((0, 0), dtype=np.float64)

    codes = [frozenset(d.code) for d in dictionaries]
    total = n * n
    step = max(1, chunk_size)
    chunks = [(start, min(start + step, total)) for start in range(0, total, step)]

    worker_fn = partial(_score_chunk_worker, codes=codes, weight=weight, gamma=gamma)

    scores = np.zeros(total, dtype=np.float64)
    if num_workers == 1 or len(chunks) == 1:
        for chunk in chunks:
            for idx, value in worker_fn(chunk):
                scores[idx] = value
    else:
        logger.info(
            "Scoring %d sequence pairs in %d chunks with %d workers",
            n * (n - 1) // 2,
            len(chunks),
            num_workers,
        )
        with mp.Pool(processes=num_workers) as pool:
            for chunk_cells in pool.imap(worker_fn, chunks):
                for idx, value in chunk_cells:
                    scores[idx] = value

    kernel = scores.reshape(n, n)
    return kernel + kernel.T


class KernelMatrix:
    """
    LZW kernel matrix with the record names of its rows.

    The matrix is symmetric with an exact 1.0 diagonal. Rows follow the
    order in which records were supplied.

    Example:
        records = read_fasta(Path("isolates.fasta"))
        kernel = KernelMatrix.from_records(records)
        kernel.write(Path("kernel.csv"))
    """

    __slots__ = ("_name_to_idx", "_names", "_values")

    def __init__(self, values: np.ndarray, names: Sequence[str]) -> None:
        """
        Wrap a precomputed kernel.

        Args:
            values: Square float matrix.
            names: One name per row.

        Raises:
            DistanceMatrixNotSquareError: If values is not square.
            NameCountMismatchError: If names does not match the matrix size.
        """
        values = np.array(values, dtype=np.float64)
        if values.ndim != 2 or values.shape[0] != values.shape[1]:
            rows = values.shape[0] if values.ndim >= 1 else 0
            cols = values.shape[1] if values.ndim == 2 else 0
            raise DistanceMatrixNotSquareError(rows, cols)
        if len(names) != values.shape[0]:
            raise NameCountMismatchError(len(names), values.shape[0])

        values.setflags(write=False)
        self._values = values
        self._names: tuple[str, ...] = tuple(names)
        self._name_to_idx: dict[str, int] = {name: idx for idx, name in enumerate(self._names)}

    @classmethod
    def from_dictionaries(
        cls,
        dictionaries: Sequence[CodeDictionary],
        names: Sequence[str],
        config: KernelConfig | None = None,
    ) -> KernelMatrix:
        """Score precomputed dictionaries."""
        from lzwphylo.models.config import KernelConfig

        config = config or KernelConfig()
        values = lzw_kernel(
            dictionaries,
            weight=config.weight,
            gamma=config.gamma,
            num_workers=config.num_workers,
        )
        return cls(values, names)

    @classmethod
    def from_records(
        cls,
        records: Sequence[SequenceRecord],
        config: KernelConfig | None = None,
    ) -> KernelMatrix:
        """
        Compress records and score every pair.

        Args:
            records: Named sequences, in row order.
            config: Kernel configuration (uses defaults if None).

        Returns:
            KernelMatrix over the records.
        """
        from lzwphylo.models.config import KernelConfig

        config = config or KernelConfig()
        dictionaries = compress_records(records, config.alphabet)
        kernel = cls.from_dictionaries(dictionaries, [r.name for r in records], config)
        logger.info(
            "Built %dx%d LZW kernel (gamma=%g, w=%g)",
            len(kernel),
            len(kernel),
            config.gamma,
            config.weight,
        )
        return kernel

    @classmethod
    def from_file(cls, path: Path) -> KernelMatrix:
        """Load a kernel matrix written by write()."""
        values, names = dataframe_to_matrix(read_dataframe(path))
        return cls(values, names)

    @property
    def names(self) -> tuple[str, ...]:
        """Record names in row order."""
        return self._names

    @property
    def values(self) -> np.ndarray:
        """Read-only kernel array."""
        return self._values

    def __len__(self) -> int:
        """Number of records in the matrix."""
        return len(self._names)

    def score(self, name_a: str, name_b: str) -> float:
        """
        Kernel value between two records.

        Raises:
            KeyError: If either name is not in the matrix.
        """
        return float(self._values[self._name_to_idx[name_a], self._name_to_idx[name_b]])

    def to_dataframe(self) -> pl.DataFrame:
        """Matrix as a DataFrame with a leading name column."""
        return matrix_to_dataframe(self._values, self._names)

    def write(self, path: Path, output_format: OutputFormat = "csv") -> None:
        """Write the matrix as CSV or Parquet."""
        write_dataframe(self.to_dataframe(), path, output_format)

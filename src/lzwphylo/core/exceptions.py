"""
Custom exceptions with actionable guidance.

Provides specific error types for common failure scenarios,
each with helpful suggestions for resolution.
"""

from __future__ import annotations


class LzwPhyloError(Exception):
    """Base exception for lzwphylo errors."""

    def __init__(self, message: str, suggestion: str | None = None):
        self.message = message
        self.suggestion = suggestion
        super().__init__(self.full_message)

    @property
    def full_message(self) -> str:
        if self.suggestion:
            return f"{self.message}\n\nSuggestion: {self.suggestion}"
        return self.message


class SequenceError(LzwPhyloError):
    """Base class for sequence and dictionary errors."""


class DictionaryInitError(SequenceError):
    """Raised when an alphabet cannot be turned into an initial key set."""

    def __init__(self, alphabet: object, reason: str):
        super().__init__(
            message=f"Cannot initialize code dictionary from alphabet {alphabet!r}: {reason}",
            suggestion=(
                "Use one of the supported alphabets: "
                "dna, dna_n, dna_iupac, protein, test."
            ),
        )
        self.alphabet = alphabet


class EmptySequenceError(SequenceError):
    """Raised when a zero-length sequence is passed to the compressor."""

    def __init__(self, name: str | None = None):
        label = f"'{name}' " if name else ""
        super().__init__(
            message=f"Sequence {label}is empty and cannot be compressed",
            suggestion=(
                "Remove empty records from the input FASTA file. "
                "Every sequence needs at least one residue."
            ),
        )
        self.name = name


class FastaFileError(SequenceError):
    """Raised when a FASTA file cannot be read."""

    def __init__(
        self,
        path: str,
        reason: str = "file not found",
        suggestion: str = "Check the path and that the file is plain or gzipped FASTA.",
    ):
        super().__init__(
            message=f"Cannot read FASTA file '{path}': {reason}",
            suggestion=suggestion,
        )
        self.path = path


class EmptyFastaFileError(FastaFileError):
    """Raised when a FASTA file holds no records."""

    def __init__(self, path: str):
        super().__init__(
            path,
            reason="no sequence records found",
            suggestion=(
                "FASTA records start with a '>' header line followed by residues. "
                "Check that the file was not truncated."
            ),
        )


class ContractViolation(LzwPhyloError):
    """Base class for invalid inputs to the neighbor-joining engine."""


class DistanceMatrixNotSquareError(ContractViolation):
    """Raised when a distance or kernel matrix is not square."""

    def __init__(self, rows: int, cols: int):
        super().__init__(
            message=f"Distance matrix is not square: {rows} rows x {cols} columns",
            suggestion=(
                "Neighbor-joining needs one row and one column per taxon. "
                "Regenerate the matrix with 'lzwphylo kernel build'."
            ),
        )
        self.rows = rows
        self.cols = cols


class DistanceMatrixAsymmetricError(ContractViolation):
    """Raised when a distance matrix is not symmetric."""

    def __init__(self, row: int, col: int, upper: float, lower: float):
        super().__init__(
            message=(
                f"Distance matrix is not symmetric: d[{row},{col}] = {upper:g} "
                f"but d[{col},{row}] = {lower:g}"
            ),
            suggestion="Symmetrize the matrix before building a tree.",
        )
        self.row = row
        self.col = col


class TooFewTaxaError(ContractViolation):
    """Raised when fewer than two taxa are given."""

    def __init__(self, count: int):
        super().__init__(
            message=f"Too few taxa for tree building (need >= 2, got {count})",
            suggestion="Provide at least two sequences.",
        )
        self.count = count


class NameCountMismatchError(ContractViolation):
    """Raised when the name list does not match the matrix size."""

    def __init__(self, n_names: int, size: int):
        super().__init__(
            message=f"Got {n_names} names for a {size}x{size} distance matrix",
            suggestion="Pass exactly one name per matrix row, in row order.",
        )
        self.n_names = n_names
        self.size = size


class InvalidDistanceError(ContractViolation):
    """Raised when a distance matrix holds negative, NaN or infinite values."""

    def __init__(self, row: int, col: int, value: float):
        where = "diagonal" if row == col else "off-diagonal"
        super().__init__(
            message=f"Invalid {where} distance d[{row},{col}] = {value:g}",
            suggestion=(
                "Distances must be finite, non-negative, and zero on the diagonal."
            ),
        )
        self.row = row
        self.col = col
        self.value = value


class NoJoinablePairError(ContractViolation):
    """Raised when no finite Q value is left to select a pair from."""

    def __init__(self, size: int):
        super().__init__(
            message=f"No joinable pair found in a {size}x{size} Q-matrix",
            suggestion="Check the distance matrix for NaN or infinite values.",
        )
        self.size = size


class ConfigurationError(LzwPhyloError):
    """Raised when configuration is invalid."""


class InvalidParameterError(ConfigurationError):
    """Raised when a scoring parameter is out of its valid range."""

    def __init__(self, param_name: str, value: float, constraint: str):
        super().__init__(
            message=f"{param_name} = {value} is invalid: must be {constraint}",
            suggestion=f"Set {param_name} to a value that is {constraint}.",
        )
        self.param_name = param_name
        self.value = value

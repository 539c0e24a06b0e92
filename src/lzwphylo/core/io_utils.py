"""
I/O utilities for matrix serialization.

Provides consistent handling of output formats (CSV/Parquet) across the codebase.
Square matrices are stored with a leading name column followed by one
column per record, in row order.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Literal

import numpy as np
import polars as pl

from lzwphylo.core.constants import NAME_COLUMN

OutputFormat = Literal["csv", "parquet"]


def write_dataframe(
    df: pl.DataFrame,
    path: Path,
    output_format: OutputFormat = "csv",
) -> None:
    """
    Write DataFrame to file in specified format.

    For Parquet output, uses zstd compression for optimal size/speed tradeoff.

    Args:
        df: Polars DataFrame to write.
        path: Output file path.
        output_format: Output format - 'csv' or 'parquet'.

    Example:
        >>> df = pl.DataFrame({"a": [1, 2, 3]})
        >>> write_dataframe(df, Path("output.parquet"), "parquet")
    """
    if output_format == "parquet":
        df.write_parquet(path, compression="zstd")
    else:
        df.write_csv(path)


def read_dataframe(path: Path) -> pl.DataFrame:
    """
    Read DataFrame from file, auto-detecting format from extension.

    Supports: .csv, .tsv, .parquet, .csv.gz, .tsv.gz

    Args:
        path: Input file path.

    Returns:
        Polars DataFrame.

    Raises:
        ValueError: If file extension is not recognized.
    """
    suffix = path.suffix.lower()
    name = path.name.lower()

    if suffix == ".parquet":
        return pl.read_parquet(path)
    if suffix == ".csv" or name.endswith(".csv.gz"):
        return pl.read_csv(path)
    if suffix == ".tsv" or name.endswith(".tsv.gz"):
        return pl.read_csv(path, separator="\t")
    msg = f"Unrecognized file format: {path}"
    raise ValueError(msg)


def matrix_to_dataframe(values: np.ndarray, names: Sequence[str]) -> pl.DataFrame:
    """
    Convert a square matrix to a DataFrame with a leading name column.

    Args:
        values: Square float matrix.
        names: One name per row, in row order.

    Returns:
        DataFrame with columns [name, <names>...].

    Raises:
        ValueError: If names repeat or collide with the name column.
    """
    if len(set(names)) != len(names) or NAME_COLUMN in names:
        msg = f"Matrix names must be unique and must not be '{NAME_COLUMN}'"
        raise ValueError(msg)

    data: dict[str, list[str] | list[float]] = {NAME_COLUMN: list(names)}
    for col, name in enumerate(names):
        data[name] = values[:, col].tolist()
    return pl.DataFrame(data)


def dataframe_to_matrix(df: pl.DataFrame) -> tuple[np.ndarray, list[str]]:
    """
    Convert a matrix DataFrame back to a float array and its row names.

    The first column holds row names; remaining columns are reordered to
    match the row order so that the result is aligned on both axes.

    Args:
        df: DataFrame as written by matrix_to_dataframe.

    Returns:
        Tuple of (values, names).

    Raises:
        DistanceMatrixNotSquareError: If the row and column counts differ.
        ValueError: If row and column names do not match.
    """
    from lzwphylo.core.exceptions import DistanceMatrixNotSquareError

    names = [str(n) for n in df.get_column(df.columns[0]).to_list()]
    value_columns = df.columns[1:]

    if len(names) != len(value_columns):
        raise DistanceMatrixNotSquareError(len(names), len(value_columns))

    if set(names) != set(value_columns):
        msg = "Matrix row names do not match column names"
        raise ValueError(msg)

    values = df.select(names).to_numpy().astype(np.float64)
    return values, names

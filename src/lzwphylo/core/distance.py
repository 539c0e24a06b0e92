"""
Conversion of LZW kernel matrices into distance matrices.

Neighbor-joining needs a symmetric, non-negative matrix with a zero
diagonal. Both conversions below guarantee that exactly, whatever
rounding the kernel carries.
"""

from __future__ import annotations

from enum import Enum

import numpy as np

from lzwphylo.core.exceptions import DistanceMatrixNotSquareError


class DistanceMethod(str, Enum):
    """Kernel-to-distance conversion."""

    KERNEL_METRIC = "kernel-metric"
    COMPLEMENT = "complement"


def kernel_to_distance(
    kernel: np.ndarray,
    method: DistanceMethod = DistanceMethod.KERNEL_METRIC,
) -> np.ndarray:
    """
    Convert a similarity kernel into a distance matrix.

    - kernel-metric: d(i, j) = sqrt(K[i,i] + K[j,j] - 2*K[i,j]), the
      Euclidean distance between the two sequences in the kernel's
      feature space.
    - complement: d(i, j) = max(diag(K)) - K[i,j].

    Negative values from rounding are clipped to zero and the diagonal is
    set to exactly zero.

    Args:
        kernel: Square, symmetric similarity matrix.
        method: Conversion to apply.

    Returns:
        New float64 distance matrix of the same shape.

    Raises:
        DistanceMatrixNotSquareError: If kernel is not square.
    """
    kernel = np.asarray(kernel, dtype=np.float64)
    if kernel.ndim != 2 or kernel.shape[0] != kernel.shape[1]:
        rows = kernel.shape[0] if kernel.ndim >= 1 else 0
        cols = kernel.shape[1] if kernel.ndim == 2 else 0
        raise DistanceMatrixNotSquareError(rows, cols)

    if kernel.size == 0:
        return kernel.copy()

    diag = np.diag(kernel)
    if method == DistanceMethod.COMPLEMENT:
        dist = diag.max() - kernel
    else:
        squared = diag[:, None] + diag[None, :] - 2.0 * kernel
        dist = np.sqrt(np.clip(squared, 0.0, None))

    dist = np.clip(dist, 0.0, None)
    np.fill_diagonal(dist, 0.0)
    return dist

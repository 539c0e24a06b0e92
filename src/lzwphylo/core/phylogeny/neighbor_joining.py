"""
Neighbor-joining tree construction.

Repeatedly merges the pair of active subtrees with the smallest Q value
until two remain, then joins those two into the root. The working
distance matrix and the active node list shrink in lockstep: position k
of the node list always belongs to row and column k of the matrix.

Q(r, c) = (m - 2) * d(r, c) - total(r) - total(c)

where m is the current matrix size and total(r) is the row sum. Ties go
to the first cell in row-major order. After merging (i, j), row and
column j are dropped and row i is replaced by
0.5 * (d(i, k) + d(j, k) - d(i, j)).

Each iteration is O(m^2), so a full run is O(n^3) time and O(n^2) memory.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import NamedTuple

import numpy as np

from lzwphylo.core.constants import Q_DIAGONAL_SENTINEL, SYMMETRY_TOLERANCE
from lzwphylo.core.exceptions import (
    DistanceMatrixAsymmetricError,
    DistanceMatrixNotSquareError,
    InvalidDistanceError,
    NameCountMismatchError,
    NoJoinablePairError,
    TooFewTaxaError,
)
from lzwphylo.core.phylogeny.tree import Node

logger = logging.getLogger(__name__)


class JoinStep(NamedTuple):
    """
    One merge of the neighbor-joining run.

    i and j are positions in the active list at the time of the merge
    (i < j). q_value is None for the final root join, which is forced.
    """

    i: int
    j: int
    q_value: float | None
    node_id: int


def validate_distance_matrix(dist: np.ndarray, names: Sequence[str]) -> np.ndarray:
    """
    Check the neighbor-joining preconditions.

    Args:
        dist: Candidate distance matrix.
        names: One taxon name per row.

    Returns:
        float64 copy of dist.

    Raises:
        DistanceMatrixNotSquareError: If dist is not a square 2-D matrix.
        TooFewTaxaError: If there are fewer than two taxa.
        NameCountMismatchError: If len(names) differs from the matrix size.
        InvalidDistanceError: On NaN, infinite or negative values, or a
            non-zero diagonal.
        DistanceMatrixAsymmetricError: If d[r, c] and d[c, r] differ.
    """
    arr = np.array(dist, dtype=np.float64)
    if arr.ndim != 2 or arr.shape[0] != arr.shape[1]:
        rows = arr.shape[0] if arr.ndim >= 1 else 0
        cols = arr.shape[1] if arr.ndim == 2 else 0
        raise DistanceMatrixNotSquareError(rows, cols)

    n = arr.shape[0]
    if n < 2:
        raise TooFewTaxaError(n)
    if len(names) != n:
        raise NameCountMismatchError(len(names), n)

    bad = np.argwhere(~np.isfinite(arr) | (arr < 0))
    if len(bad):
        row, col = (int(x) for x in bad[0])
        raise InvalidDistanceError(row, col, float(arr[row, col]))

    nonzero_diag = np.flatnonzero(np.diag(arr))
    if len(nonzero_diag):
        k = int(nonzero_diag[0])
        raise InvalidDistanceError(k, k, float(arr[k, k]))

    asym = np.argwhere(np.abs(arr - arr.T) > SYMMETRY_TOLERANCE)
    if len(asym):
        row, col = sorted(int(x) for x in asym[0])
        raise DistanceMatrixAsymmetricError(row, col, float(arr[row, col]), float(arr[col, row]))

    return arr


def make_q_matrix(dist: np.ndarray) -> np.ndarray:
    """
    Compute the Q-matrix for the current working distances.

    The diagonal holds a +inf sentinel so it can never be selected.

    Args:
        dist: Current m x m distance matrix.

    Returns:
        New m x m Q-matrix.
    """
    m = dist.shape[0]
    total = dist.sum(axis=1)
    q = (m - 2) * dist - total[:, None] - total[None, :]
    np.fill_diagonal(q, Q_DIAGONAL_SENTINEL)
    return q


def find_closest(q: np.ndarray) -> tuple[int, int]:
    """
    Locate the minimum Q value.

    NaN cells are never selected. Ties resolve to the first cell in
    row-major order. The returned pair is ordered so that i < j.

    Args:
        q: Q-matrix from make_q_matrix.

    Returns:
        (i, j) positions of the pair to merge.

    Raises:
        NoJoinablePairError: If no finite off-diagonal value exists.
    """
    masked = np.where(np.isnan(q), np.inf, q)
    flat = int(np.argmin(masked))
    if not np.isfinite(masked.flat[flat]):
        raise NoJoinablePairError(q.shape[0])

    row, col = divmod(flat, q.shape[1])
    return (row, col) if row < col else (col, row)


def reduce_distance(dist: np.ndarray, pair: tuple[int, int]) -> np.ndarray:
    """
    Shrink the distance matrix after merging a pair.

    Row and column j are dropped; row and column i hold the distances from
    the merged node. All other entries are copied unchanged.

    Args:
        dist: Current m x m distance matrix.
        pair: Merged positions (i, j) with i < j.

    Returns:
        New (m-1) x (m-1) distance matrix.
    """
    i, j = pair
    merged = 0.5 * (dist[i] + dist[j] - dist[i, j])

    reduced = dist.copy()
    reduced[i, :] = merged
    reduced[:, i] = merged
    reduced[i, i] = 0.0

    reduced = np.delete(reduced, j, axis=0)
    return np.delete(reduced, j, axis=1)


class NeighborJoiner:
    """
    Neighbor-joining run over one distance matrix.

    Leaves get ids 1..n in input order, internal nodes get n+1, n+2, ...
    in merge order. Every node has height 1.0 and internal nodes are named
    after their id.

    Example:
        joiner = NeighborJoiner(dist, ["A", "B", "C", "D"])
        tree = joiner.run()
        print(tree.to_newick(), joiner.iterations)
    """

    def __init__(self, dist: np.ndarray, names: Sequence[str]) -> None:
        """
        Validate the input and prepare a run.

        Args:
            dist: Symmetric, non-negative distance matrix with zero diagonal.
            names: One taxon name per row.

        Raises:
            ContractViolation: If any precondition does not hold.
        """
        self._dist = validate_distance_matrix(dist, names)
        self._names: tuple[str, ...] = tuple(names)
        self.steps: list[JoinStep] = []

    @property
    def iterations(self) -> int:
        """Number of Q-matrix selections in the last run (n - 2)."""
        return sum(1 for step in self.steps if step.q_value is not None)

    def run(self) -> Node:
        """
        Build the tree.

        Returns:
            Root node of the binary tree.
        """
        n = len(self._names)
        dist = self._dist.copy()
        nodes = [Node.leaf(idx, name) for idx, name in enumerate(self._names, 1)]
        next_id = n + 1
        self.steps = []

        logger.info("Neighbor-joining %d taxa", n)

        while len(nodes) > 2:
            q = make_q_matrix(dist)
            i, j = find_closest(q)
            q_value = float(q[i, j])

            nodes[i] = Node.join(next_id, nodes[i], nodes[j])
            del nodes[j]
            dist = reduce_distance(dist, (i, j))

            self.steps.append(JoinStep(i, j, q_value, next_id))
            logger.debug("Joined positions %d and %d into node %d (Q=%g)", i, j, next_id, q_value)
            next_id += 1

        root = Node.join(next_id, nodes[0], nodes[1])
        self.steps.append(JoinStep(0, 1, None, next_id))
        logger.debug("Joined last two subtrees into root %d", next_id)

        return root


def neighbor_joining(dist: np.ndarray, names: Sequence[str]) -> Node:
    """
    Build a binary tree from a distance matrix by neighbor-joining.

    Args:
        dist: Symmetric n x n distance matrix, non-negative off-diagonal,
            zero diagonal, n >= 2.
        names: n taxon names in row order.

    Returns:
        Root node. Its leaves are exactly the input names.

    Raises:
        ContractViolation: If the matrix or names violate the preconditions.
    """
    return NeighborJoiner(dist, names).run()

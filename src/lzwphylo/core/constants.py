"""
Constants used throughout the lzwphylo package.

Centralizes default scoring parameters and numeric conventions
to improve maintainability and consistency.
"""

from __future__ import annotations

# =============================================================================
# LZW Kernel Scoring
#
# score(A, B) = exp(gamma * w * |A & B| - 0.5 * gamma * w * (|A| + |B|))
# =============================================================================

# Weight applied to every shared codeword
DEFAULT_WEIGHT = 1.0

# Exponential decay applied to the weighted match count
DEFAULT_GAMMA = 0.05

# Value written to the kernel diagonal before symmetrization.
# M + M.T doubles it, so the emitted diagonal is exactly 1.0.
KERNEL_DIAGONAL_SEED = 0.5

# Number of flattened matrix cells handed to one worker task
KERNEL_CHUNK_SIZE = 4096

# =============================================================================
# Neighbor-Joining
# =============================================================================

# Height assigned to every leaf and internal node
NODE_HEIGHT = 1.0

# Q-matrix diagonal: never a valid pairing, so it must never be the minimum
Q_DIAGONAL_SENTINEL = float("inf")

# Absolute tolerance for the distance matrix symmetry check
SYMMETRY_TOLERANCE = 1e-9

# =============================================================================
# Matrix Files
# =============================================================================

# First column of kernel/distance matrix files, holding record names
NAME_COLUMN = "name"

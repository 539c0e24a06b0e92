"""Unit tests for kernel-to-distance conversion."""

from __future__ import annotations

import math

import numpy as np
import pytest

from lzwphylo.core.distance import DistanceMethod, kernel_to_distance
from lzwphylo.core.exceptions import DistanceMatrixNotSquareError
from lzwphylo.core.kernel import KernelMatrix


class TestKernelMetric:
    """Tests for the feature-space distance."""

    def test_values(self):
        """d = sqrt(Kii + Kjj - 2 Kij)."""
        kernel = np.array([[1.0, 0.5], [0.5, 1.0]])
        dist = kernel_to_distance(kernel, DistanceMethod.KERNEL_METRIC)
        assert dist[0, 1] == pytest.approx(math.sqrt(1.0))
        assert dist[1, 0] == dist[0, 1]

    def test_zero_diagonal_and_symmetric(self, four_records):
        """Distances from a real kernel meet the NJ preconditions."""
        kernel = KernelMatrix.from_records(four_records).values
        dist = kernel_to_distance(kernel)
        assert np.all(np.diag(dist) == 0.0)
        assert np.array_equal(dist, dist.T)
        assert np.all(dist >= 0.0)

    def test_rounding_clipped(self):
        """Tiny negative squared distances become zero, not NaN."""
        kernel = np.array([[1.0, 1.0 + 1e-15], [1.0 + 1e-15, 1.0]])
        dist = kernel_to_distance(kernel)
        assert not np.isnan(dist).any()
        assert dist[0, 1] == 0.0

    def test_input_not_modified(self):
        """The kernel array is left untouched."""
        kernel = np.array([[1.0, 0.2], [0.2, 1.0]])
        kernel_to_distance(kernel)
        assert kernel.tolist() == [[1.0, 0.2], [0.2, 1.0]]


class TestComplement:
    """Tests for the complement distance."""

    def test_values(self):
        """d = max(diag) - K."""
        kernel = np.array([[1.0, 0.25, 0.5], [0.25, 1.0, 0.75], [0.5, 0.75, 1.0]])
        dist = kernel_to_distance(kernel, DistanceMethod.COMPLEMENT)
        np.testing.assert_allclose(
            dist,
            [[0.0, 0.75, 0.5], [0.75, 0.0, 0.25], [0.5, 0.25, 0.0]],
        )

    def test_method_from_string(self):
        """Methods can be selected by their CLI value."""
        assert DistanceMethod("complement") is DistanceMethod.COMPLEMENT
        assert DistanceMethod("kernel-metric") is DistanceMethod.KERNEL_METRIC


class TestValidation:
    """Tests for input validation."""

    def test_not_square(self):
        """Non-square input raises DistanceMatrixNotSquareError."""
        with pytest.raises(DistanceMatrixNotSquareError):
            kernel_to_distance(np.ones((2, 3)))

    def test_empty(self):
        """A 0x0 kernel gives a 0x0 distance matrix."""
        assert kernel_to_distance(np.zeros((0, 0))).shape == (0, 0)

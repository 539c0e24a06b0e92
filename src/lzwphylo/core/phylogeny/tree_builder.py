"""Build phylogenetic trees from sequences or LZW kernel matrices.

This module chains the pipeline stages: LZW compression of every record,
kernel scoring, kernel-to-distance conversion, and neighbor-joining.
Trees are returned as Node objects or rendered as Newick strings.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Sequence
from typing import TYPE_CHECKING

from lzwphylo.core.distance import DistanceMethod, kernel_to_distance
from lzwphylo.core.exceptions import TooFewTaxaError
from lzwphylo.core.kernel import KernelMatrix
from lzwphylo.core.phylogeny.neighbor_joining import NeighborJoiner

if TYPE_CHECKING:
    from lzwphylo.core.parsers import SequenceRecord
    from lzwphylo.core.phylogeny.tree import Node
    from lzwphylo.models.config import KernelConfig, PipelineConfig

logger = logging.getLogger(__name__)


def build_kernel(
    records: Sequence[SequenceRecord],
    config: KernelConfig | None = None,
) -> KernelMatrix:
    """Compress records and compute their LZW kernel matrix.

    Args:
        records: Named sequences, in row order.
        config: Kernel configuration (uses defaults if None).

    Returns:
        KernelMatrix over the records.

    Raises:
        EmptySequenceError: If any record has an empty sequence.
    """
    duplicates = [name for name, count in Counter(r.name for r in records).items() if count > 1]
    if duplicates:
        logger.warning(
            "%d record names occur more than once (e.g. %s); leaves will repeat",
            len(duplicates),
            duplicates[0],
        )
    return KernelMatrix.from_records(records, config)


def kernel_to_tree(
    kernel: KernelMatrix,
    method: DistanceMethod = DistanceMethod.KERNEL_METRIC,
) -> Node:
    """Build a neighbor-joining tree from a kernel matrix.

    Args:
        kernel: LZW kernel matrix with record names.
        method: Kernel-to-distance conversion.

    Returns:
        Root node of the tree.

    Raises:
        TooFewTaxaError: If the kernel covers fewer than two records.
    """
    if len(kernel) < 2:
        raise TooFewTaxaError(len(kernel))

    dist = kernel_to_distance(kernel.values, method)
    joiner = NeighborJoiner(dist, kernel.names)
    tree = joiner.run()
    logger.info("Built tree over %d taxa in %d joins", len(kernel), len(joiner.steps))
    return tree


def build_tree(
    records: Sequence[SequenceRecord],
    config: PipelineConfig | None = None,
) -> Node:
    """Build a neighbor-joining tree directly from sequences.

    Args:
        records: Named sequences (at least two).
        config: Pipeline configuration (uses defaults if None).

    Returns:
        Root node of the tree.

    Raises:
        TooFewTaxaError: If fewer than two records are given.
        EmptySequenceError: If any record has an empty sequence.
    """
    from lzwphylo.models.config import PipelineConfig

    config = config or PipelineConfig()
    if len(records) < 2:
        raise TooFewTaxaError(len(records))

    kernel = build_kernel(records, config.kernel)
    return kernel_to_tree(kernel, config.tree.distance_method)


def render_newick(tree: Node, strict: bool = False) -> str:
    """Render a tree as simplified Newick, or as standard Newick if strict."""
    return tree.to_strict_newick() if strict else tree.to_newick()


def records_to_newick(
    records: Sequence[SequenceRecord],
    config: PipelineConfig | None = None,
) -> str:
    """Build a tree from sequences and render it as Newick.

    Uses the simplified format (no branch lengths, no ';') unless the
    configuration asks for strict Newick.

    Args:
        records: Named sequences (at least two).
        config: Pipeline configuration (uses defaults if None).

    Returns:
        Newick string.
    """
    from lzwphylo.models.config import PipelineConfig

    config = config or PipelineConfig()
    tree = build_tree(records, config)
    return render_newick(tree, strict=config.tree.strict_newick)

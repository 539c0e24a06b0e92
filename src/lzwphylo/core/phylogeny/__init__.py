"""Phylogeny module for neighbor-joining tree building.

Provides the binary merge tree, the neighbor-joining engine that builds it
from a distance matrix, and pipeline functions that go from sequences to
Newick strings.
"""

from lzwphylo.core.phylogeny.neighbor_joining import (
    JoinStep,
    NeighborJoiner,
    neighbor_joining,
)
from lzwphylo.core.phylogeny.tree import EMPTY, Empty, Node, TreeNode
from lzwphylo.core.phylogeny.tree_builder import (
    build_kernel,
    build_tree,
    kernel_to_tree,
    records_to_newick,
)

__all__ = [
    "EMPTY",
    "Empty",
    "JoinStep",
    "NeighborJoiner",
    "Node",
    "TreeNode",
    "build_kernel",
    "build_tree",
    "kernel_to_tree",
    "neighbor_joining",
    "records_to_newick",
]

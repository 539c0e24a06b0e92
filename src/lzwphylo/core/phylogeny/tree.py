"""
Binary merge trees built by neighbor-joining.

A tree is either EMPTY or a Node holding its data and two children.
Leaves have two EMPTY children; every internal node records one merge.
Nodes are frozen once created and every subtree has exactly one parent.

Traversal, comparison, Newick rendering and BioPython conversion use
explicit stacks, so deep caterpillar trees from large inputs do not hit
the interpreter's recursion limit.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from itertools import zip_longest
from typing import TYPE_CHECKING, TypeAlias

from lzwphylo.core.constants import NODE_HEIGHT

if TYPE_CHECKING:
    from Bio.Phylo.BaseTree import Clade
    from Bio.Phylo.BaseTree import Tree as PhyloTree

# Labels containing any of these need quoting in standard Newick
_NEWICK_SPECIAL = re.compile(r"[\s()\[\]':;,]")


@dataclass(frozen=True)
class TreeNode:
    """Data carried by a tree node."""

    height: float
    id: int
    name: str


class Empty:
    """Absent child. Use the EMPTY singleton."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "EMPTY"

    def __len__(self) -> int:
        return 0

    def dfs(self) -> Iterator[TreeNode]:
        return iter(())

    def leaves(self) -> list[str]:
        return []

    def to_newick(self) -> str:
        return ""


EMPTY = Empty()


@dataclass(frozen=True, eq=False, repr=False)
class Node:
    """
    Tree node with two children.

    Two nodes are equal when their subtrees have the same shape and the
    same data at every position.

    Attributes:
        data: Height, id and name of this node.
        left: Left subtree (EMPTY for leaves).
        right: Right subtree (EMPTY for leaves).
    """

    data: TreeNode
    left: Tree = EMPTY
    right: Tree = EMPTY

    @classmethod
    def leaf(cls, node_id: int, name: str, height: float = NODE_HEIGHT) -> Node:
        """Create a leaf."""
        return cls(TreeNode(height=height, id=node_id, name=name))

    @classmethod
    def join(cls, node_id: int, left: Node, right: Node, height: float = NODE_HEIGHT) -> Node:
        """Create the internal node of one merge, named after its id."""
        return cls(TreeNode(height=height, id=node_id, name=str(node_id)), left, right)

    @property
    def is_leaf(self) -> bool:
        """True if the left child is EMPTY (the Newick leaf rule)."""
        return self.left is EMPTY

    def __len__(self) -> int:
        """Number of nodes in this subtree."""
        return sum(1 for _ in self.dfs())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Node):
            return NotImplemented
        if self is other:
            return True
        sentinel = object()
        return all(
            a == b
            for a, b in zip_longest(self._shape(), other._shape(), fillvalue=sentinel)
        )

    def __hash__(self) -> int:
        return hash(tuple(self._shape()))

    def __repr__(self) -> str:
        return f"Node(id={self.data.id}, name={self.data.name!r}, size={len(self)})"

    def _shape(self) -> Iterator[TreeNode | None]:
        """Preorder data with None marking each EMPTY child."""
        stack: list[Tree] = [self]
        while stack:
            node = stack.pop()
            if isinstance(node, Empty):
                yield None
                continue
            yield node.data
            stack.append(node.right)
            stack.append(node.left)

    def dfs(self) -> Iterator[TreeNode]:
        """
        Preorder traversal: this node, then the left subtree, then the right.

        Each call starts a fresh traversal.

        Yields:
            TreeNode data of every node in the subtree.
        """
        return (data for data in self._shape() if data is not None)

    def leaves(self) -> list[str]:
        """Leaf names, left to right."""
        names: list[str] = []
        stack: list[Tree] = [self]
        while stack:
            node = stack.pop()
            if isinstance(node, Empty):
                continue
            if node.is_leaf:
                names.append(node.data.name)
                continue
            stack.append(node.right)
            stack.append(node.left)
        return names

    def _render(self, label: Callable[[str], str]) -> str:
        parts: list[str] = []
        stack: list[Tree | str] = [self]
        while stack:
            item = stack.pop()
            if isinstance(item, str):
                parts.append(item)
            elif isinstance(item, Empty):
                continue
            elif item.is_leaf:
                parts.append(label(item.data.name))
            else:
                stack.extend((")", item.right, ",", item.left, "("))
        return "".join(parts)

    def to_newick(self) -> str:
        """
        Render the topology as simplified Newick.

        Leaves render as their bare name and any other node as
        "(<left>,<right>)". No branch lengths and no terminating ';'.

        Example:
            >>> xy = Node.join(4, Node.leaf(1, "X"), Node.leaf(2, "Y"))
            >>> Node.join(5, xy, Node.leaf(3, "Z")).to_newick()
            '((X,Y),Z)'
        """
        return self._render(str)

    def to_strict_newick(self) -> str:
        """
        Standard Newick with a terminating ';'.

        Leaf names holding whitespace or Newick punctuation are single-quoted.
        Internal nodes are unlabelled, so readers see taxa only.
        """
        return self._render(_quote_label) + ";"

    def to_phylo(self) -> PhyloTree:
        """
        Convert to a BioPython tree.

        Leaves keep their names; internal nodes are left unnamed.

        Returns:
            Rooted Bio.Phylo.BaseTree.Tree with the same topology.
        """
        from Bio.Phylo.BaseTree import Tree as PhyloTree

        return PhyloTree(root=_to_clade(self), rooted=True)


Tree: TypeAlias = "Node | Empty"


def _quote_label(name: str) -> str:
    if _NEWICK_SPECIAL.search(name):
        return "'" + name.replace("'", "''") + "'"
    return name


def _to_clade(root: Node) -> Clade:
    """Build the Clade hierarchy bottom-up with an explicit stack."""
    from Bio.Phylo.BaseTree import Clade

    clades: dict[int, Clade] = {}
    stack: list[tuple[Node, bool]] = [(root, False)]
    while stack:
        node, children_done = stack.pop()
        if node.is_leaf:
            clades[id(node)] = Clade(name=node.data.name)
            continue
        children = [child for child in (node.left, node.right) if isinstance(child, Node)]
        if children_done:
            clades[id(node)] = Clade(clades=[clades.pop(id(child)) for child in children])
            continue
        stack.append((node, True))
        stack.extend((child, False) for child in reversed(children))
    return clades[id(root)]

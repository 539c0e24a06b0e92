"""
lzwphylo: alignment-free phylogenies from LZW compression kernels.

Sequences are parsed into LZW codeword sets, compared with a normalized
exponential kernel over shared codewords, and clustered into a binary
tree by neighbor-joining.
"""

__version__ = "0.1.0"
__author__ = "lzwphylo Team"

from lzwphylo.core.alphabets import Alphabet
from lzwphylo.core.kernel import KernelMatrix
from lzwphylo.core.lzw import compress
from lzwphylo.core.phylogeny import neighbor_joining, records_to_newick

__all__ = [
    "Alphabet",
    "KernelMatrix",
    "__version__",
    "compress",
    "neighbor_joining",
    "records_to_newick",
]

"""
Core algorithms for LZW-kernel phylogenies.

This module contains the LZW dictionary builder, the kernel matrix engine,
and supporting components for reading sequences and writing matrices.
"""

from lzwphylo.core.alphabets import Alphabet
from lzwphylo.core.kernel import KernelMatrix, lzw_kernel, normalized_lzw_score
from lzwphylo.core.lzw import CodeDictionary, compress
from lzwphylo.core.parsers import SequenceRecord, read_fasta

__all__ = [
    "Alphabet",
    "CodeDictionary",
    "KernelMatrix",
    "SequenceRecord",
    "compress",
    "lzw_kernel",
    "normalized_lzw_score",
    "read_fasta",
]

"""
LZW code dictionaries for alignment-free sequence comparison.

A sequence is parsed greedily from left to right: the current run is
extended while it is a known key, otherwise the run is emitted as a
codeword, the extended run becomes a new key, and parsing restarts at the
current character. The set of emitted codewords is the sequence's
fingerprint for the LZW kernel.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from lzwphylo.core.alphabets import Alphabet
from lzwphylo.core.exceptions import DictionaryInitError, EmptySequenceError
from lzwphylo.core.parsers import SequenceRecord

logger = logging.getLogger(__name__)


@dataclass
class CodeDictionary:
    """
    Keys and emitted codewords of one LZW parse.

    Attributes:
        keys: Every substring inserted while parsing, seeded with the
            alphabet's single symbols. Only used to decide when to extend
            the current run.
        code: Emitted codewords. Only grows while parsing.
    """

    keys: set[str] = field(default_factory=set)
    code: set[str] = field(default_factory=set)

    @classmethod
    def from_alphabet(cls, alphabet: Alphabet | str) -> CodeDictionary:
        """
        Create an empty dictionary seeded with an alphabet's symbols.

        Args:
            alphabet: Alphabet member or its name (case-insensitive).

        Returns:
            CodeDictionary with one key per symbol and no codewords.

        Raises:
            DictionaryInitError: If the alphabet is unknown or its symbols
                are not single characters.
        """
        if isinstance(alphabet, Alphabet):
            resolved = alphabet
        elif isinstance(alphabet, str):
            try:
                resolved = Alphabet(alphabet.lower())
            except ValueError:
                raise DictionaryInitError(alphabet, "unknown alphabet") from None
        else:
            raise DictionaryInitError(
                alphabet, f"expected an Alphabet, got {type(alphabet).__name__}"
            )

        symbols = resolved.symbols
        if not symbols:
            raise DictionaryInitError(alphabet, "alphabet has no symbols")
        if any(len(symbol) != 1 for symbol in symbols):
            raise DictionaryInitError(alphabet, "symbols must be single characters")

        return cls(keys=set(symbols), code=set())

    def __len__(self) -> int:
        """Number of distinct codewords."""
        return len(self.code)


def compress(sequence: str, alphabet: Alphabet | str = Alphabet.DNA_IUPAC) -> CodeDictionary:
    """
    Parse a sequence into its set of LZW codewords.

    Args:
        sequence: Residue string (at least one character).
        alphabet: Alphabet whose symbols seed the key set.

    Returns:
        CodeDictionary holding the grown key set and the emitted codewords.

    Raises:
        EmptySequenceError: If the sequence is empty.
        DictionaryInitError: If the alphabet cannot seed a dictionary.

    Example:
        >>> sorted(compress("ACGTACGT", Alphabet.DNA).code)
        ['A', 'AC', 'C', 'G', 'GT', 'T']
    """
    if not sequence:
        raise EmptySequenceError()

    dictionary = CodeDictionary.from_alphabet(alphabet)
    keys = dictionary.keys
    code = dictionary.code

    current = ""
    for char in sequence[:-1]:
        extended = current + char
        if extended in keys:
            current = extended
        else:
            keys.add(extended)
            code.add(current)
            current = char

    # Flush: the final character always closes the last codeword
    code.add(current + sequence[-1])
    return dictionary


def compress_records(
    records: Iterable[SequenceRecord],
    alphabet: Alphabet | str = Alphabet.DNA_IUPAC,
) -> list[CodeDictionary]:
    """
    Compress every record, in order.

    A single failure aborts the batch: a kernel matrix is only meaningful
    when every sequence has a dictionary.

    Args:
        records: Named sequences.
        alphabet: Alphabet used for every record.

    Returns:
        One CodeDictionary per record, in input order.

    Raises:
        EmptySequenceError: If any record has an empty sequence (the error
            names the record).
        DictionaryInitError: If the alphabet cannot seed a dictionary.
    """
    dictionaries: list[CodeDictionary] = []
    for record in records:
        if not record.sequence:
            raise EmptySequenceError(record.name)
        dictionaries.append(compress(record.sequence, alphabet))

    logger.info("Compressed %d sequences", len(dictionaries))
    return dictionaries

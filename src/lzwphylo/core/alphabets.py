"""
Residue alphabets used to seed LZW code dictionaries.

Each alphabet is a closed set of symbols. Upper and lower case are both
listed, matching the common bioinformatics alphabet tables, so soft-masked
sequences parse without inventing new keys for every lowercase residue.
"""

from __future__ import annotations

from enum import Enum


class Alphabet(str, Enum):
    """Residue alphabet selection."""

    DNA = "dna"
    DNA_N = "dna_n"
    DNA_IUPAC = "dna_iupac"
    PROTEIN = "protein"
    TEST = "test"

    @property
    def symbols(self) -> str:
        """Symbols of this alphabet, in table order."""
        return ALPHABET_SYMBOLS[self]


ALPHABET_SYMBOLS: dict[Alphabet, str] = {
    Alphabet.DNA: "ACGTacgt",
    Alphabet.DNA_N: "ACGTNacgtn",
    Alphabet.DNA_IUPAC: "ACGTRYSWKMBDHVNZacgtryswkmbdhvnz",
    Alphabet.PROTEIN: "ARNDCEQGHILKMFPSTWYVarndceqghilkmfpstwyv",
    Alphabet.TEST: "ab",
}


def detect_alphabet(sequence: str) -> Alphabet:
    """Pick the narrowest alphabet that covers a sequence.

    Args:
        sequence: Residue string.

    Returns:
        DNA if only ACGT occur, DNA_N if N also occurs, DNA_IUPAC for other
        nucleotide ambiguity codes, PROTEIN otherwise.

    Example:
        >>> detect_alphabet("ACGTN")
        <Alphabet.DNA_N: 'dna_n'>
    """
    residues = set(sequence.upper())
    if residues <= set("ACGT"):
        return Alphabet.DNA
    if residues <= set("ACGTN"):
        return Alphabet.DNA_N
    if residues <= set(ALPHABET_SYMBOLS[Alphabet.DNA_IUPAC].upper()):
        return Alphabet.DNA_IUPAC
    return Alphabet.PROTEIN

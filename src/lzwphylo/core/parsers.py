"""
FASTA parsing for sequence records.

Records are read with BioPython's SeqIO and reduced to lightweight
(name, sequence) tuples, the only shape the compression kernel needs.
Gzipped files are detected by their .gz suffix.
"""

from __future__ import annotations

import gzip
import logging
from collections.abc import Iterator
from pathlib import Path
from typing import NamedTuple

logger = logging.getLogger(__name__)


class SequenceRecord(NamedTuple):
    """Named residue sequence. Immutable once read."""

    name: str
    sequence: str


def iter_fasta(path: Path) -> Iterator[SequenceRecord]:
    """
    Stream records from a FASTA file.

    Args:
        path: Plain or gzipped FASTA file.

    Yields:
        SequenceRecord per FASTA entry. The name is the header's first word.
    """
    from Bio import SeqIO

    open_func = gzip.open if path.suffix == ".gz" else Path.open
    with open_func(path, "rt") as handle:
        for record in SeqIO.parse(handle, "fasta"):
            yield SequenceRecord(name=record.id, sequence=str(record.seq))


def read_fasta(path: Path) -> list[SequenceRecord]:
    """
    Read all records from a FASTA file.

    Empty sequences are kept so that the compressor can reject them with
    an error naming the record.

    Args:
        path: Plain or gzipped FASTA file.

    Returns:
        Records in file order.

    Raises:
        FastaFileError: If the file does not exist or cannot be decoded.
        EmptyFastaFileError: If the file holds no records.
    """
    from lzwphylo.core.exceptions import EmptyFastaFileError, FastaFileError

    if not path.exists():
        raise FastaFileError(str(path))

    try:
        records = list(iter_fasta(path))
    except (OSError, UnicodeDecodeError) as e:
        raise FastaFileError(str(path), reason=str(e)) from e

    if not records:
        raise EmptyFastaFileError(str(path))

    empty = sum(1 for record in records if not record.sequence)
    if empty:
        logger.warning("%d of %d records in %s have empty sequences", empty, len(records), path)

    logger.info("Read %d sequences from %s", len(records), path)
    return records


def records_from_mapping(sequences: dict[str, str]) -> list[SequenceRecord]:
    """Build records from a name -> sequence mapping, keeping insertion order."""
    return [SequenceRecord(name=name, sequence=seq) for name, seq in sequences.items()]

#!/usr/bin/env python3
"""
FASTA utilities for TE libraries

TE library headers follow the RepeatMasker convention
``famname#class/subclass``; everything after the first whitespace is
free text and is preserved when records are copied.
"""
import logging
from typing import Iterable, List, Tuple

from Bio import SeqIO
from Bio.Seq import Seq
from Bio.SeqIO.FastaIO import SimpleFastaParser
from Bio.SeqRecord import SeqRecord

from panedta.exceptions import FileOperationError
from panedta.utils.file import atomic_write

logger = logging.getLogger("panedta.utils.fasta")

UNKNOWN_CLASS = "Unknown"


def read_fasta_records(file_path: str) -> List[Tuple[str, str]]:
    """Read a FASTA file keeping each header exactly as written

    Args:
        file_path: Path to the FASTA file

    Returns:
        List of (header, sequence) tuples in file order

    Raises:
        FileOperationError: If the file cannot be read
    """
    try:
        with open(file_path, 'r') as handle:
            return [(title, sequence) for title, sequence in SimpleFastaParser(handle)]
    except OSError as e:
        error_msg = f"Error reading FASTA file {file_path}: {str(e)}"
        logger.error(error_msg)
        raise FileOperationError(error_msg, {"file_path": file_path}) from e


def write_fasta_records(file_path: str, records: Iterable[Tuple[str, str]]) -> int:
    """Write (header, sequence) records atomically, one sequence line each

    Args:
        file_path: Output path
        records: (header, sequence) tuples

    Returns:
        Number of records written
    """
    seq_records = []
    for header, sequence in records:
        identifier = header.split()[0] if header else ""
        # description equal to the full header makes SeqIO emit it unchanged
        seq_records.append(SeqRecord(Seq(sequence), id=identifier, description=header))

    with atomic_write(file_path, 'w') as handle:
        count = SeqIO.write(seq_records, handle, "fasta-2line")

    logger.debug(f"Wrote {count} records to {file_path}")
    return count


def parse_te_header(header: str) -> Tuple[str, str]:
    """Split a library header into family name and classification

    Args:
        header: Header such as ``TE_00000012#LTR/Copia some text``

    Returns:
        (family, classification); classification is ``Unknown`` when absent
    """
    identifier = header.split()[0] if header.strip() else ""
    if '#' in identifier:
        family, classification = identifier.split('#', 1)
        return family, classification or UNKNOWN_CLASS
    return identifier, UNKNOWN_CLASS


def format_te_header(family: str, classification: str) -> str:
    """Build a ``famname#class/subclass`` header"""
    return f"{family}#{classification or UNKNOWN_CLASS}"


def sequence_lengths(records: Iterable[Tuple[str, str]]) -> dict:
    """Map each record identifier (without classification) to its length"""
    return {parse_te_header(header)[0]: len(sequence) for header, sequence in records}

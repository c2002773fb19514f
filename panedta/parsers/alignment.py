#!/usr/bin/env python3
"""
Parser for all-versus-all BLAST tabular output (-outfmt 6)

The pool is searched against itself with the custom column list in
BLAST_COLUMNS so that query length, and therefore query coverage, is
available on every row. Plain 12-column outfmt 6 files are accepted too
when the caller supplies the sequence lengths.
"""
import os
import logging
from typing import Dict, List, Optional, Sequence

from panedta.exceptions import AlignmentDataError
from panedta.models.library import AlignmentHit
from panedta.utils.fasta import parse_te_header

logger = logging.getLogger("panedta.parsers.alignment")

BLAST_COLUMNS = ('qseqid', 'sseqid', 'pident', 'length', 'qstart', 'qend',
                 'sstart', 'send', 'evalue', 'bitscore', 'qlen', 'slen')

STANDARD_COLUMNS = ('qseqid', 'sseqid', 'pident', 'length', 'mismatch', 'gapopen',
                    'qstart', 'qend', 'sstart', 'send', 'evalue', 'bitscore')


def blast_outfmt(columns: Sequence[str] = BLAST_COLUMNS) -> str:
    """Value for blastn's -outfmt option producing ``columns``"""
    return "6 " + " ".join(columns)


class BlastTabularParser:
    """Turn BLAST tabular rows into AlignmentHit records"""

    def __init__(self, columns: Sequence[str] = BLAST_COLUMNS,
                 lengths: Optional[Dict[str, int]] = None):
        """Initialize the parser

        Args:
            columns: Column names in file order
            lengths: Sequence lengths keyed by identifier, used when the
                file has no qlen column
        """
        self.columns = tuple(columns)
        self.index = {name: i for i, name in enumerate(self.columns)}
        self.lengths = lengths or {}
        self.malformed = 0

        missing = {'qseqid', 'sseqid', 'pident', 'length', 'qstart', 'qend'} - set(self.columns)
        if missing:
            raise AlignmentDataError(f"BLAST columns lack required fields: {', '.join(sorted(missing))}",
                                     {"columns": self.columns})

    def parse_line(self, line: str) -> Optional[AlignmentHit]:
        """Parse one row; malformed rows are counted and return None"""
        if not line.strip() or line.startswith('#'):
            return None

        fields = line.rstrip('\n').split('\t')
        if len(fields) < len(self.columns):
            self.malformed += 1
            return None

        try:
            query_id = parse_te_header(fields[self.index['qseqid']])[0]
            target_id = parse_te_header(fields[self.index['sseqid']])[0]
            identity = float(fields[self.index['pident']])
            alignment_length = int(fields[self.index['length']])
            qstart = int(fields[self.index['qstart']])
            qend = int(fields[self.index['qend']])

            if 'qlen' in self.index:
                query_length = int(fields[self.index['qlen']])
            else:
                query_length = self.lengths.get(query_id, 0)
        except ValueError:
            self.malformed += 1
            return None

        if query_length <= 0:
            self.malformed += 1
            return None

        coverage = min(1.0, (abs(qend - qstart) + 1) / query_length)
        return AlignmentHit(query_id=query_id, target_id=target_id, identity=identity,
                            alignment_length=alignment_length, query_coverage=coverage)

    def parse(self, file_path: str) -> List[AlignmentHit]:
        """Parse a BLAST tabular file

        Args:
            file_path: Path to the table

        Returns:
            Valid hits in file order

        Raises:
            AlignmentDataError: If the file is missing or unreadable
        """
        if not os.path.isfile(file_path):
            raise AlignmentDataError(f"Alignment table not found: {file_path}",
                                     {"file_path": file_path})

        self.malformed = 0
        hits = []
        try:
            with open(file_path, 'r') as f:
                for line in f:
                    hit = self.parse_line(line)
                    if hit is not None:
                        hits.append(hit)
        except (OSError, UnicodeDecodeError) as e:
            raise AlignmentDataError(f"Error reading alignment table {file_path}: {str(e)}",
                                     {"file_path": file_path}) from e

        if self.malformed:
            logger.warning(f"Skipped {self.malformed} malformed alignment rows in {file_path}")
        logger.info(f"Parsed {len(hits)} alignment hits from {file_path}")
        return hits


def parse_blast_tabular(file_path: str, lengths: Optional[Dict[str, int]] = None,
                        columns: Sequence[str] = BLAST_COLUMNS) -> List[AlignmentHit]:
    """Parse a BLAST tabular file into AlignmentHit records"""
    return BlastTabularParser(columns, lengths).parse(file_path)

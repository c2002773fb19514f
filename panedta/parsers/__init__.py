#!/usr/bin/env python3
"""
Parsers for external tool output
"""
from .repeatmasker import parse_repeatmasker_out, parse_repeatmasker_line, is_full_length
from .alignment import BlastTabularParser, parse_blast_tabular, blast_outfmt, BLAST_COLUMNS

__all__ = [
    'parse_repeatmasker_out',
    'parse_repeatmasker_line',
    'is_full_length',
    'BlastTabularParser',
    'parse_blast_tabular',
    'blast_outfmt',
    'BLAST_COLUMNS',
]

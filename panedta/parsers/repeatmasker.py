#!/usr/bin/env python3
"""
RepeatMasker .out parser

Reads the fixed-width-ish, whitespace separated RepeatMasker report:

    SW  perc perc perc  query  position in query  matching  repeat  position in repeat
 score  div. del. ins.  sequence begin end (left)  repeat   class/family begin end (left) ID

On the complement strand the last three repeat columns are reported as
``(left) end begin``; the parser normalizes both strands to begin/end/left.
"""
import os
import re
import logging
from typing import List, Optional

from panedta.exceptions import MissingAnnotationError
from panedta.models.library import AnnotationHit

logger = logging.getLogger("panedta.parsers.repeatmasker")

_PARENS = re.compile(r'[()]')


def _strip_parens(value: str) -> int:
    return int(_PARENS.sub('', value))


def parse_repeatmasker_line(line: str) -> Optional[AnnotationHit]:
    """Parse one data line of a RepeatMasker .out file

    Args:
        line: Raw line

    Returns:
        AnnotationHit, or None for header, blank or malformed lines
    """
    fields = line.split()
    if len(fields) < 14 or not fields[0].isdigit():
        return None

    try:
        strand = '-' if fields[8] == 'C' else '+'
        if strand == '+':
            repeat_start = _strip_parens(fields[11])
            repeat_end = _strip_parens(fields[12])
            repeat_left = _strip_parens(fields[13])
        else:
            repeat_left = _strip_parens(fields[11])
            repeat_end = _strip_parens(fields[12])
            repeat_start = _strip_parens(fields[13])

        return AnnotationHit(
            family=fields[9],
            classification=fields[10],
            chrom=fields[4],
            start=int(fields[5]),
            end=int(fields[6]),
            strand=strand,
            divergence=float(fields[1]),
            repeat_start=repeat_start,
            repeat_end=repeat_end,
            repeat_left=repeat_left,
        )
    except (ValueError, IndexError):
        logger.debug(f"Skipping malformed RepeatMasker line: {line.rstrip()}")
        return None


def parse_repeatmasker_out(out_path: str, genome: Optional[str] = None) -> List[AnnotationHit]:
    """Parse a RepeatMasker .out file

    Args:
        out_path: Path to the .out file
        genome: Genome the annotation belongs to, for error reporting

    Returns:
        Hits in file order

    Raises:
        MissingAnnotationError: If the file does not exist
    """
    if not os.path.isfile(out_path):
        raise MissingAnnotationError(
            f"Annotation file {out_path} is missing for genome {genome or 'unknown'}",
            {"genome": genome, "file_path": out_path,
             "precondition": "RepeatMasker .out produced by the initial annotation"}
        )

    hits = []
    skipped = 0
    with open(out_path, 'r') as f:
        for line in f:
            hit = parse_repeatmasker_line(line)
            if hit is not None:
                hits.append(hit)
            elif line.strip() and line.split()[0].isdigit():
                skipped += 1

    if skipped:
        logger.warning(f"Skipped {skipped} malformed lines in {out_path}")
    logger.debug(f"Parsed {len(hits)} hits from {out_path}")
    return hits


def is_full_length(hit: AnnotationHit, min_coverage: float = 0.95) -> bool:
    """Whether a hit spans nearly the whole repeat consensus

    Args:
        hit: RepeatMasker hit
        min_coverage: Minimum fraction of the consensus the hit must span

    Returns:
        True for a full-length copy
    """
    return hit.repeat_length > 0 and hit.repeat_coverage >= min_coverage

#!/usr/bin/env python3
"""
Copy-count filter

Keeps the families of a genome's raw library that have at least
``min_copies`` full-length copies in that genome's RepeatMasker
annotation. Families below the threshold do not enter the pan-genome pool.
"""
import logging
from typing import Iterable, List, Optional

import pandas as pd

from panedta.models.library import AnnotationHit
from panedta.parsers.repeatmasker import parse_repeatmasker_out, is_full_length
from panedta.utils.file import write_text_file

logger = logging.getLogger("panedta.library.copy_count")


class CopyCountFilter:
    """Select families with enough full-length copies"""

    def __init__(self, min_copies: int = 3, full_length_coverage: float = 0.95):
        """Initialize the filter

        Args:
            min_copies: Minimum number of full-length copies (fl_copy)
            full_length_coverage: Fraction of the consensus a hit must span
                to count as a full-length copy
        """
        if min_copies < 1:
            raise ValueError(f"min_copies must be at least 1, got {min_copies}")
        self.min_copies = min_copies
        self.full_length_coverage = full_length_coverage

    def count_copies(self, hits: Iterable[AnnotationHit]) -> pd.Series:
        """Count full-length copies per family

        Args:
            hits: Annotation hits of one genome

        Returns:
            Series of copy counts indexed by family name, sorted by name
        """
        families = [hit.family for hit in hits
                    if is_full_length(hit, self.full_length_coverage)]
        counts = pd.Series(families, dtype=object).value_counts()
        return counts.sort_index()

    def select(self, counts: pd.Series) -> List[str]:
        """Families whose count reaches the threshold, sorted by name"""
        kept = counts[counts >= self.min_copies]
        return sorted(str(name) for name in kept.index)

    def filter_hits(self, hits: Iterable[AnnotationHit]) -> List[str]:
        """Count copies and select qualifying families in one step"""
        return self.select(self.count_copies(hits))

    def filter_annotation(self, out_path: str, genome: Optional[str] = None,
                          keep_list_path: Optional[str] = None) -> List[str]:
        """Select qualifying families from a RepeatMasker .out file

        Args:
            out_path: RepeatMasker .out of the genome's initial annotation
            genome: Genome name for messages and errors
            keep_list_path: If given, write the ``family#`` keep list there

        Returns:
            Sorted family names

        Raises:
            MissingAnnotationError: If the .out file is absent
        """
        logger.info(f"Identify full-length TEs for genome {genome or out_path}")
        hits = parse_repeatmasker_out(out_path, genome)
        counts = self.count_copies(hits)
        kept = self.select(counts)

        logger.info(f"Genome {genome or out_path}: {len(kept)} of {len(counts)} families "
                    f"have >= {self.min_copies} full-length copies")
        if not kept:
            logger.warning(f"Genome {genome or out_path} contributes no families to the pan-genome pool")

        if keep_list_path:
            write_text_file(keep_list_path, "".join(f"{name}#\n" for name in kept))

        return kept

#!/usr/bin/env python3
"""
Candidate extractor

Pulls the sequences of the families kept by the copy-count filter out of a
genome's raw TE library. When a curated library is in use, sequences come
from the "novel" library (raw families not already covered by the curated
set) so curated families are not added back to the pool.
"""
import logging
from typing import Iterable, List, Optional, Tuple

from panedta.models.genome import GenomeArtifacts
from panedta.models.library import CandidateFamily
from panedta.utils.fasta import read_fasta_records, write_fasta_records, parse_te_header
from panedta.utils.file import check_file_exists
from panedta.exceptions import MissingAnnotationError

logger = logging.getLogger("panedta.library.extractor")


def source_library(artifacts: GenomeArtifacts, use_curated: bool) -> str:
    """Library a genome's candidates are drawn from

    Args:
        artifacts: Artifact layout of the genome
        use_curated: Whether a curated library is in effect

    Returns:
        Path to the novel library with a curated library, else the raw one
    """
    return artifacts.novel_library if use_curated else artifacts.raw_library


def extract_candidates(records: Iterable[Tuple[str, str]], families: Iterable[str],
                       genome: str) -> List[CandidateFamily]:
    """Select library records belonging to the kept families

    A record matches a family when its identifier starts with the exact
    token ``family#``, so ``TE_00000001`` never matches ``TE_000000010``.

    Args:
        records: (header, sequence) tuples of the source library
        families: Family names to keep
        genome: Genome the library belongs to

    Returns:
        Matching families in library order
    """
    wanted = set(families)
    found = set()
    candidates = []

    for header, sequence in records:
        identifier = header.split()[0] if header.strip() else ""
        if '#' not in identifier:
            continue
        name, classification = parse_te_header(identifier)
        if name in wanted:
            found.add(name)
            candidates.append(CandidateFamily(name=name, genome=genome, sequence=sequence,
                                              classification=classification))

    for name in sorted(wanted - found):
        logger.warning(f"Family {name} of genome {genome} has no sequence in the source library; skipped")

    return candidates


class CandidateExtractor:
    """Extract candidate sequences for one genome at a time"""

    def __init__(self, use_curated: bool = False):
        self.use_curated = use_curated

    def extract(self, artifacts: GenomeArtifacts, families: List[str], genome: Optional[str] = None,
                output_path: Optional[str] = None) -> List[CandidateFamily]:
        """Extract a genome's kept families from its library

        Args:
            artifacts: Artifact layout of the genome
            families: Family names retained by the copy-count filter
            genome: Genome name, defaults to the artifact name
            output_path: If given, write the extracted records there

        Returns:
            Extracted candidate families

        Raises:
            MissingAnnotationError: If the source library is missing
        """
        genome = genome or artifacts.genome_name
        library_path = source_library(artifacts, self.use_curated)

        if not families:
            candidates = []
        elif not check_file_exists(library_path):
            raise MissingAnnotationError(
                f"TE library {library_path} is missing for genome {genome}",
                {"genome": genome, "file_path": library_path,
                 "precondition": "TE library produced by the initial annotation"}
            )
        else:
            candidates = extract_candidates(read_fasta_records(library_path), families, genome)

        logger.info(f"Extracted {len(candidates)} candidate sequences for genome {genome}")

        if output_path:
            write_fasta_records(output_path, ((f"{c.name}#{c.classification}", c.sequence)
                                              for c in candidates))
        return candidates

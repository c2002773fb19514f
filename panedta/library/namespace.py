#!/usr/bin/env python3
"""
Namespace merger

Each genome's raw library numbers its families independently, so merging
them as-is would produce colliding identifiers. Genome ``i`` (0-based) is
given the offset ``(i + 1) * stride`` and its candidates the offset IDs
``offset + 1 .. offset + n``. A final pass renumbers the merged pool to
compact sequential IDs. Provenance stays on each CandidateSequence.
"""
import re
import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Sequence, Tuple

from panedta.exceptions import ValidationError
from panedta.models.library import CandidateFamily, CandidateSequence
from panedta.utils.fasta import parse_te_header

logger = logging.getLogger("panedta.library.namespace")

_TRAILING_NUMBER = re.compile(r'(\d+)$')


@dataclass
class MergeResult:
    """Outcome of merging per-genome candidate sets"""
    candidates: List[CandidateSequence] = field(default_factory=list)
    offsets: Dict[str, int] = field(default_factory=dict)
    id_map: Dict[int, int] = field(default_factory=dict)

    def is_bijective(self) -> bool:
        return len(set(self.id_map.values())) == len(self.id_map)


class NamespaceMerger:
    """Merge candidate sets from many genomes into one collision-free pool"""

    def __init__(self, stride: int = 5000, prefix: str = "TE_", width: int = 8):
        """Initialize the merger

        Args:
            stride: Gap between genome offsets; must exceed any genome's
                candidate count
            prefix: Identifier prefix of the merged pool
            width: Zero padding of the numeric part
        """
        if stride < 1:
            raise ValueError(f"stride must be positive, got {stride}")
        self.stride = stride
        self.prefix = prefix
        self.width = width

    def format_id(self, number: int) -> str:
        return f"{self.prefix}{number:0{self.width}d}"

    def offset_for(self, genome_index: int) -> int:
        return (genome_index + 1) * self.stride

    def offset_ids(self, genome_sets: Sequence[Tuple[str, List[CandidateFamily]]]
                   ) -> List[Tuple[int, CandidateFamily]]:
        """Give every candidate an offset ID unique across genomes

        Args:
            genome_sets: (genome name, candidates) in genome list order

        Returns:
            (offset ID, candidate) pairs in ascending offset ID order

        Raises:
            ValidationError: If a genome has as many candidates as the stride
        """
        numbered = []
        for index, (genome, candidates) in enumerate(genome_sets):
            if len(candidates) >= self.stride:
                raise ValidationError(
                    f"Genome {genome} has {len(candidates)} candidates, which does not fit "
                    f"in an ID stride of {self.stride}",
                    {"genome": genome, "candidates": len(candidates), "stride": self.stride}
                )
            offset = self.offset_for(index)
            numbered.extend((offset + local, candidate)
                            for local, candidate in enumerate(candidates, 1))
        return numbered

    def merge(self, genome_sets: Sequence[Tuple[str, List[CandidateFamily]]]) -> MergeResult:
        """Merge per-genome candidates and renumber them compactly

        Args:
            genome_sets: (genome name, candidates) in genome list order

        Returns:
            MergeResult with pool members numbered 1..N
        """
        result = MergeResult()
        for index, (genome, _) in enumerate(genome_sets):
            result.offsets[genome] = self.offset_for(index)

        numbered = self.offset_ids(genome_sets)
        for compact_id, (offset_id, candidate) in enumerate(numbered, 1):
            result.id_map[offset_id] = compact_id
            result.candidates.append(CandidateSequence(
                id=compact_id,
                name=self.format_id(compact_id),
                genome=candidate.genome,
                sequence=candidate.sequence,
                classification=candidate.classification,
                original_name=candidate.name,
            ))

        if not result.is_bijective():
            raise ValidationError("Namespace merge produced colliding identifiers",
                                  {"candidates": len(numbered)})

        logger.info(f"Merged {len(result.candidates)} candidates from {len(genome_sets)} genomes")
        return result


def candidates_from_records(records: Iterable[Tuple[str, str]],
                            genome: str = "pool") -> List[CandidateSequence]:
    """Build pool members from an already merged library

    The numeric tail of each identifier becomes the candidate ID when all
    tails are present and distinct; otherwise records are numbered in file
    order.

    Args:
        records: (header, sequence) tuples
        genome: Provenance label for the candidates

    Returns:
        Candidates in file order
    """
    parsed = []
    for header, sequence in records:
        name, classification = parse_te_header(header)
        match = _TRAILING_NUMBER.search(name)
        parsed.append((name, classification, sequence, int(match.group(1)) if match else None))

    numbers = [number for _, _, _, number in parsed]
    names = [name for name, _, _, _ in parsed]
    if len(set(names)) != len(names):
        raise ValidationError("Library contains duplicate sequence identifiers",
                              {"records": len(names)})
    use_numbers = None not in numbers and len(set(numbers)) == len(numbers)

    return [
        CandidateSequence(id=number if use_numbers else ordinal, name=name, genome=genome,
                          sequence=sequence, classification=classification, original_name=name)
        for ordinal, (name, classification, sequence, number) in enumerate(parsed, 1)
    ]

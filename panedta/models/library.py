#!/usr/bin/env python3
"""
Data transfer objects for TE library consolidation.

These records cross the boundary between the external tools (EDTA,
RepeatMasker, BLAST) and the library building code, so nothing in
panedta.library depends on a tool's text format.
"""
from dataclasses import dataclass, field
from typing import List, Optional, Dict, Any, Iterator

from panedta.utils.fasta import format_te_header


@dataclass
class AnnotationHit:
    """One RepeatMasker hit of a library family in a genome"""
    family: str
    classification: str
    chrom: str
    start: int
    end: int
    strand: str
    divergence: float
    repeat_start: int
    repeat_end: int
    repeat_left: int

    @property
    def repeat_length(self) -> int:
        """Consensus length of the repeat implied by the hit"""
        return self.repeat_end + self.repeat_left

    @property
    def repeat_coverage(self) -> float:
        """Fraction of the repeat consensus spanned by the hit"""
        if self.repeat_length <= 0:
            return 0.0
        return (self.repeat_end - self.repeat_start + 1) / self.repeat_length


@dataclass
class CandidateFamily:
    """A TE family as it exists in one genome's raw library"""
    name: str
    genome: str
    sequence: str = ""
    classification: str = "Unknown"


@dataclass(frozen=True)
class CandidateSequence:
    """A sequence admitted to the pan-genome pool

    ``id`` is the numeric part of the identifier and drives every
    deterministic tie-break; ``name`` is the identifier written to FASTA.
    """
    id: int
    name: str
    genome: str
    sequence: str
    classification: str = "Unknown"
    original_name: Optional[str] = None

    @property
    def length(self) -> int:
        return len(self.sequence)

    @property
    def header(self) -> str:
        return format_te_header(self.name, self.classification)


@dataclass(frozen=True)
class AlignmentHit:
    """Pairwise alignment between two pool members"""
    query_id: str
    target_id: str
    identity: float
    alignment_length: int
    query_coverage: float

    @property
    def is_self_hit(self) -> bool:
        return self.query_id == self.target_id


@dataclass(frozen=True)
class CuratedEntry:
    """Record of an externally curated library, kept verbatim"""
    header: str
    sequence: str


@dataclass(frozen=True)
class FinalLibraryEntry:
    """A record of the final pan-genome library"""
    header: str
    sequence: str
    curated: bool = False
    genome: Optional[str] = None

    @property
    def identifier(self) -> str:
        """First whitespace-delimited token of the header"""
        return self.header.split()[0] if self.header else ""

    @classmethod
    def from_candidate(cls, candidate: CandidateSequence) -> 'FinalLibraryEntry':
        return cls(header=candidate.header, sequence=candidate.sequence,
                   curated=False, genome=candidate.genome)

    @classmethod
    def from_curated(cls, entry: CuratedEntry) -> 'FinalLibraryEntry':
        return cls(header=entry.header, sequence=entry.sequence, curated=True)


@dataclass
class PanLibrary:
    """The final non-redundant pan-genome TE library"""
    entries: List[FinalLibraryEntry] = field(default_factory=list)

    def __iter__(self) -> Iterator[FinalLibraryEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    @property
    def representative_count(self) -> int:
        return sum(1 for entry in self.entries if not entry.curated)

    @property
    def curated_count(self) -> int:
        return sum(1 for entry in self.entries if entry.curated)

    @property
    def identifiers(self) -> List[str]:
        return [entry.identifier for entry in self.entries]

    def duplicate_identifiers(self) -> List[str]:
        """Identifiers shared by more than one entry, sorted"""
        seen = set()
        duplicates = set()
        for identifier in self.identifiers:
            if identifier in seen:
                duplicates.add(identifier)
            seen.add(identifier)
        return sorted(duplicates)

    def get_summary(self) -> Dict[str, Any]:
        return {
            'total': len(self),
            'representatives': self.representative_count,
            'curated': self.curated_count,
        }

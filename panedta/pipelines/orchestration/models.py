#!/usr/bin/env python3
"""
Models for pipeline orchestration
"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, List, Dict, Any, Tuple

from panedta.exceptions import PipelineError
from panedta.models.genome import Genome


class GenomeState(Enum):
    """Per-genome pipeline states in execution order"""
    UNANNOTATED = "unannotated"
    INITIALLY_ANNOTATED = "initially_annotated"
    CONTRIBUTED_TO_POOL = "contributed_to_pool"
    REANNOTATED = "reannotated"


ALLOWED_TRANSITIONS = {
    GenomeState.UNANNOTATED: {GenomeState.INITIALLY_ANNOTATED},
    GenomeState.INITIALLY_ANNOTATED: {GenomeState.CONTRIBUTED_TO_POOL},
    GenomeState.CONTRIBUTED_TO_POOL: {GenomeState.REANNOTATED},
    GenomeState.REANNOTATED: set(),
}


@dataclass
class GenomeStatus:
    """Inspectable status of one genome within a run"""
    genome: Genome
    state: GenomeState = GenomeState.UNANNOTATED
    annotation_skipped: bool = False
    families_kept: int = 0
    sequences_contributed: int = 0
    error: Optional[str] = None
    history: List[Tuple[GenomeState, datetime]] = field(default_factory=list)

    @property
    def name(self) -> str:
        return self.genome.name

    def advance(self, new_state: GenomeState) -> None:
        """Move to the next state

        Raises:
            PipelineError: If the transition is not allowed
        """
        if new_state not in ALLOWED_TRANSITIONS[self.state]:
            raise PipelineError(
                f"Genome {self.name} cannot move from {self.state.value} to {new_state.value}",
                {"genome": self.name, "state": self.state.value, "requested": new_state.value}
            )
        self.history.append((self.state, datetime.now()))
        self.state = new_state

    def to_dict(self) -> Dict[str, Any]:
        return {
            'genome': self.name,
            'state': self.state.value,
            'annotation_skipped': self.annotation_skipped,
            'families_kept': self.families_kept,
            'sequences_contributed': self.sequences_contributed,
            'error': self.error,
        }


@dataclass
class PipelineRun:
    """Represents a complete pipeline execution"""
    run_id: str
    genomes: List[GenomeStatus] = field(default_factory=list)
    start_time: datetime = field(default_factory=datetime.now)
    end_time: Optional[datetime] = None
    library_path: Optional[str] = None
    library_summary: Dict[str, int] = field(default_factory=dict)
    reduction_summary: Dict[str, int] = field(default_factory=dict)

    @property
    def is_complete(self) -> bool:
        return self.end_time is not None

    @property
    def duration(self) -> float:
        end = self.end_time or datetime.now()
        return (end - self.start_time).total_seconds()

    @property
    def reannotation_failures(self) -> List[GenomeStatus]:
        return [status for status in self.genomes
                if status.state == GenomeState.CONTRIBUTED_TO_POOL and status.error]

    @property
    def success(self) -> bool:
        return all(status.state == GenomeState.REANNOTATED for status in self.genomes)

    def status_for(self, genome_name: str) -> Optional[GenomeStatus]:
        for status in self.genomes:
            if status.name == genome_name:
                return status
        return None

    def finalize(self) -> None:
        """Mark pipeline run as complete"""
        self.end_time = datetime.now()

    def get_summary(self) -> Dict[str, Any]:
        """Get run summary"""
        return {
            'run_id': self.run_id,
            'status': 'completed' if self.success else 'completed_with_errors',
            'duration': self.duration,
            'library': self.library_path,
            'library_entries': self.library_summary,
            'reduction': self.reduction_summary,
            'genomes': [status.to_dict() for status in self.genomes],
            'reannotation_failures': [status.name for status in self.reannotation_failures],
        }

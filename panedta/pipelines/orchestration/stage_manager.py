#!/usr/bin/env python3
"""
Pipeline stage management
"""
import logging
from typing import Iterable, List

from panedta.exceptions import PipelineError
from panedta.models.genome import Genome
from panedta.utils.file import check_file_exists
from .models import GenomeState, GenomeStatus


class StageManager:
    """Decides where each genome starts and guards the pool barrier"""

    def __init__(self, work_dir: str = "."):
        self.work_dir = work_dir
        self.logger = logging.getLogger("panedta.pipelines.stage_manager")

    def is_annotated(self, genome: Genome) -> bool:
        """Whether the annotation summary of a previous run is present"""
        return check_file_exists(genome.artifacts(self.work_dir).summary, min_size=1)

    def initial_status(self, genome: Genome) -> GenomeStatus:
        """Status of a genome at the start of a run

        A genome whose annotation summary already exists resumes in
        INITIALLY_ANNOTATED and skips the initial annotation.
        """
        status = GenomeStatus(genome=genome)
        if self.is_annotated(genome):
            status.advance(GenomeState.INITIALLY_ANNOTATED)
            status.annotation_skipped = True
            self.logger.info(f"Annotation summary for {genome.name} exists; skipping initial annotation")
        return status

    def initial_statuses(self, genomes: Iterable[Genome]) -> List[GenomeStatus]:
        return [self.initial_status(genome) for genome in genomes]

    def pending_annotation(self, statuses: Iterable[GenomeStatus]) -> List[GenomeStatus]:
        return [status for status in statuses if status.state == GenomeState.UNANNOTATED]

    def require_state(self, statuses: Iterable[GenomeStatus], state: GenomeState, barrier: str) -> None:
        """Block until every genome has reached ``state``

        Raises:
            PipelineError: Naming the genomes that have not
        """
        behind = [status.name for status in statuses if status.state != state]
        if behind:
            raise PipelineError(
                f"Cannot start {barrier}: {len(behind)} genomes are not {state.value} ({', '.join(behind)})",
                {"barrier": barrier, "genomes": behind}
            )

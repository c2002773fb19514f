# panedta/pipelines/orchestrator.py
import os
import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from datetime import datetime
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from panedta.config import ConfigManager
from panedta.error_handlers import log_exception
from panedta.exceptions import (
    AlignmentDataError, AnnotationError, PanEDTAError, ReannotationError
)
from panedta.jobs import ToolRunner, create_tool_runner
from panedta.library import (
    CandidateExtractor, CopyCountFilter, NamespaceMerger, RedundancyReducer,
    ReductionThresholds, candidates_from_records, compose_library, load_curated_library,
    write_library
)
from panedta.models.genome import Genome, read_genome_list
from panedta.models.library import AlignmentHit, CandidateFamily, PanLibrary
from panedta.parsers.alignment import BLAST_COLUMNS, parse_blast_tabular
from panedta.utils.fasta import read_fasta_records, write_fasta_records
from panedta.utils.file import check_input_file, ensure_dir
from .alignment import AllVersusAllAligner
from .annotation import (
    EDTAAnnotator, RepeatMaskerAnnotator, normalize_repeatmasker_classes, write_genome_stats
)
from .orchestration import GenomeState, GenomeStatus, PipelineRun, StageManager
from .report import write_run_summary


class PipelineOrchestrator:
    """Drives the genomes from initial annotation to re-annotation

    Stages per genome follow GenomeState. Pool construction starts only
    after every genome has contributed, and re-annotation only after the
    library file exists.
    """

    def __init__(self, config_manager: ConfigManager, runner: Optional[ToolRunner] = None):
        """Initialize orchestrator with configuration

        Args:
            config_manager: Loaded configuration
            runner: Tool runner; created from configuration when omitted
        """
        self.logger = logging.getLogger("panedta.orchestrator")
        self.config_manager = config_manager
        self.config = config_manager.config

        self.work_dir = os.path.abspath(config_manager.get_path('work_dir', '.'))
        self.config['paths']['work_dir'] = self.work_dir
        ensure_dir(self.work_dir)

        pipeline = self.config.get('pipeline', {})
        self.worker_count = int(pipeline.get('worker_count', 10))
        self.parallel_genomes = max(1, int(pipeline.get('max_parallel_genomes', 1)))
        self.tool_threads = max(1, self.worker_count // self.parallel_genomes)
        self.dry_run = bool(pipeline.get('dry_run', False))

        self.runner = runner or create_tool_runner(self.config)
        self.stage_manager = StageManager(self.work_dir)

        library = self.config.get('library', {})
        self.copy_filter = CopyCountFilter(
            min_copies=int(library.get('min_full_length_copies', 3)),
            full_length_coverage=float(library.get('full_length_coverage', 0.95)),
        )
        self.merger = NamespaceMerger(
            stride=int(library.get('id_stride', 5000)),
            prefix=library.get('id_prefix', 'TE_'),
            width=int(library.get('id_width', 8)),
        )
        self.reducer = RedundancyReducer(ReductionThresholds.from_config(self.config))

        self.edta = EDTAAnnotator(self.runner, self.config, self.tool_threads)
        self.repeatmasker = RepeatMaskerAnnotator(self.runner, self.config, self.tool_threads)
        self.aligner = AllVersusAllAligner(self.runner, self.config, self.worker_count)

        self.curated_library: Optional[str] = None
        self._last_reduction: Dict[str, int] = {}

    @property
    def library_path(self) -> str:
        return os.path.join(self.work_dir, self.config_manager.get_path('library_name', 'panEDTA.TElib.fa'))

    def load_genomes(self) -> List[Genome]:
        """Validate inputs and read the genome list

        Raises:
            ConfigError: If a required input is missing or empty
        """
        inputs = self.config.get('inputs', {})
        cds = inputs.get('coding_sequences')
        curated = inputs.get('curated_library')

        genome_list = check_input_file(inputs.get('genome_list'), "genome list")
        if cds:
            cds = os.path.abspath(check_input_file(cds, "cds"))
        if curated:
            curated = os.path.abspath(check_input_file(curated, "curated library"))
        self.curated_library = curated

        genomes = read_genome_list(genome_list, default_cds=cds)
        for genome in genomes:
            genome.path = os.path.abspath(genome.path)
            if genome.cds:
                genome.cds = os.path.abspath(genome.cds)
            genome.artifacts(self.work_dir)

        self.logger.info(f"Genome files: {genome_list} ({len(genomes)} genomes)")
        self.logger.info(f"Coding sequences: {cds or 'none'}")
        self.logger.info(f"Curated library: {curated or 'none'}")
        self.logger.info(f"Copy cutoff: {self.copy_filter.min_copies}")
        self.logger.info(f"CPUs: {self.worker_count} ({self.parallel_genomes} genomes in parallel)")
        return genomes

    def _run_parallel(self, statuses: List[GenomeStatus],
                      task: Callable[[GenomeStatus], None]) -> Dict[str, Exception]:
        """Run ``task`` for each genome, bounded by max_parallel_genomes

        Returns:
            Exceptions raised, keyed by genome name
        """
        failures: Dict[str, Exception] = {}
        if not statuses:
            return failures

        with ThreadPoolExecutor(max_workers=self.parallel_genomes) as executor:
            future_to_status = {executor.submit(task, status): status for status in statuses}
            for future in as_completed(future_to_status):
                status = future_to_status[future]
                try:
                    future.result()
                except Exception as e:
                    failures[status.name] = e
        return failures

    def _annotate(self, status: GenomeStatus) -> None:
        genome = status.genome
        artifacts = genome.artifacts(self.work_dir)
        if not self.dry_run:
            write_genome_stats(genome.path, artifacts.stats)
        self.edta.annotate(genome, self.curated_library)
        status.advance(GenomeState.INITIALLY_ANNOTATED)

    def annotate_genomes(self, statuses: List[GenomeStatus]) -> None:
        """Initial annotation of every genome without a summary artifact

        Raises:
            AnnotationError: If any genome fails; the run cannot continue
        """
        pending = self.stage_manager.pending_annotation(statuses)
        self.logger.info(f"Initial annotation: {len(pending)} genomes to annotate, "
                         f"{len(statuses) - len(pending)} already annotated")

        failures = self._run_parallel(pending, self._annotate)
        if failures:
            for name, error in sorted(failures.items()):
                self.logger.error(f"Initial EDTA failed for {name}: {error}")
                status = next(s for s in statuses if s.name == name)
                status.error = str(error)
            raise AnnotationError(
                f"Initial EDTA failed for {', '.join(sorted(failures))}",
                {"genomes": sorted(failures),
                 "precondition": "every genome must be annotated before the pan-genome pool is built"}
            )

    def contribute(self, status: GenomeStatus) -> List[CandidateFamily]:
        """Copy-count filter and candidate extraction for one genome

        Raises:
            MissingAnnotationError: If the genome's annotation files are absent
        """
        artifacts = status.genome.artifacts(self.work_dir)
        families = self.copy_filter.filter_annotation(
            artifacts.repeatmasker_out, status.name, keep_list_path=artifacts.keep_list
        )
        extractor = CandidateExtractor(use_curated=self.curated_library is not None)
        candidates = extractor.extract(artifacts, families, status.name,
                                       output_path=artifacts.kept_sequences)

        status.families_kept = len(families)
        status.sequences_contributed = len(candidates)
        status.advance(GenomeState.CONTRIBUTED_TO_POOL)
        return candidates

    def _alignment_hits(self, raw_path: str, pool_size: int) -> List[AlignmentHit]:
        """Align the pool against itself; missing data keeps every sequence"""
        try:
            table = self.aligner.align(raw_path, pool_size)
            return parse_blast_tabular(table)
        except AlignmentDataError as e:
            self.logger.warning(f"No usable alignment data ({e.message}); "
                                f"every candidate is kept as its own representative")
            return []

    def build_library(self, statuses: List[GenomeStatus],
                      genome_sets: List[Tuple[str, List[CandidateFamily]]]) -> PanLibrary:
        """Merge, reduce and compose the pan-genome library

        Args:
            statuses: All genome statuses; all must have contributed
            genome_sets: (genome name, candidates) in genome list order

        Returns:
            The PanLibrary written to ``library_path``
        """
        self.stage_manager.require_state(statuses, GenomeState.CONTRIBUTED_TO_POOL, "pool construction")
        self.logger.info("Generate the panEDTA library")

        merged = self.merger.merge(genome_sets)
        raw_path = f"{self.library_path}.raw"
        write_fasta_records(raw_path, ((c.header, c.sequence) for c in merged.candidates))

        if merged.candidates:
            hits = self._alignment_hits(raw_path, len(merged.candidates))
        else:
            self.logger.warning("The candidate pool is empty; the library holds curated entries only")
            hits = []

        reduction = self.reducer.reduce(merged.candidates, hits)
        curated = load_curated_library(self.curated_library) if self.curated_library else []
        library = compose_library(reduction.representatives, curated)
        write_library(library, self.library_path)

        self._last_reduction = reduction.get_summary()
        return library

    def _reannotate(self, status: GenomeStatus) -> None:
        genome = status.genome
        artifacts = genome.artifacts(self.work_dir)
        library = self.library_path

        try:
            target = artifacts.masked_input
            if not os.path.isfile(target):
                raise ReannotationError(f"Masking input {target} is missing for genome {genome.name}",
                                        {"genome": genome.name, "file_path": target})
            self.repeatmasker.mask(genome, target, library)
            normalize_repeatmasker_classes(artifacts.reannotation_out)
            self.edta.finalize(genome, library, artifacts.reannotation_out)
        except ReannotationError:
            raise
        except PanEDTAError as e:
            raise ReannotationError(f"Re-annotation failed for genome {genome.name}: {e.message}",
                                    {"genome": genome.name, **e.details}) from e

        status.advance(GenomeState.REANNOTATED)

    def reannotate_genomes(self, statuses: List[GenomeStatus]) -> List[str]:
        """Re-annotate every genome with the pan-genome library

        Failures are recorded on the genome's status and do not stop the
        other genomes.

        Returns:
            Names of genomes whose re-annotation failed
        """
        self.stage_manager.require_state(statuses, GenomeState.CONTRIBUTED_TO_POOL, "re-annotation")
        failures = self._run_parallel(statuses, self._reannotate)

        for name, error in sorted(failures.items()):
            status = next(s for s in statuses if s.name == name)
            status.error = error.message if isinstance(error, PanEDTAError) else str(error)
            log_exception(self.logger, error, context={"genome": name, "stage": "re-annotation"})
        return sorted(failures)

    def status(self) -> List[GenomeStatus]:
        """Inspect where each genome would start without running anything"""
        return self.stage_manager.initial_statuses(self.load_genomes())

    def run(self) -> PipelineRun:
        """Run the complete pipeline

        Returns:
            PipelineRun with per-genome statuses

        Raises:
            ConfigError: On missing or empty inputs, before any work starts
            AnnotationError: If initial annotation fails for any genome
            MissingAnnotationError: If a genome's annotation files are absent
        """
        run = PipelineRun(run_id=datetime.now().strftime("panedta_%Y%m%d_%H%M%S"))
        genomes = self.load_genomes()
        run.genomes = self.stage_manager.initial_statuses(genomes)

        self.annotate_genomes(run.genomes)
        if self.dry_run:
            self.logger.info("Dry run: stopping before pool construction")
            run.finalize()
            return run

        genome_sets = [(status.name, self.contribute(status)) for status in run.genomes]
        library = self.build_library(run.genomes, genome_sets)
        run.library_path = self.library_path
        run.library_summary = library.get_summary()
        run.reduction_summary = self._last_reduction

        self.reannotate_genomes(run.genomes)
        run.finalize()

        write_run_summary(run, os.path.join(self.work_dir, self.config_manager.get_path(
            'summary_name', 'panEDTA.summary.tsv')))
        self.logger.info(f"panEDTA annotation of {len(run.genomes)} genomes is finished")
        return run


def reduce_library(fasta_path: str, hits_path: str, output_path: str,
                   thresholds: Optional[ReductionThresholds] = None,
                   curated_path: Optional[str] = None,
                   columns: Sequence[str] = BLAST_COLUMNS) -> PanLibrary:
    """Reduce an existing candidate pool without running the pipeline

    Args:
        fasta_path: Pool FASTA with unique identifiers
        hits_path: BLAST tabular all-versus-all hits of the pool
        output_path: Where to write the reduced library
        thresholds: Containment thresholds, defaults when omitted
        curated_path: Optional curated library appended verbatim
        columns: Column layout of the hit table

    Returns:
        The written PanLibrary
    """
    logger = logging.getLogger("panedta.orchestrator")
    check_input_file(fasta_path, "candidate pool")

    records = read_fasta_records(fasta_path)
    candidates = candidates_from_records(records)
    lengths = {candidate.name: candidate.length for candidate in candidates}

    try:
        hits = parse_blast_tabular(hits_path, lengths, columns)
    except AlignmentDataError as e:
        logger.warning(f"No usable alignment data ({e.message}); "
                       f"every candidate is kept as its own representative")
        hits = []

    reduction = RedundancyReducer(thresholds).reduce(candidates, hits)
    curated = load_curated_library(check_input_file(curated_path, "curated library")) if curated_path else []
    library = compose_library(reduction.representatives, curated)
    write_library(library, output_path)
    return library

# panedta/cli/main.py
import argparse
import json
import sys
from typing import Any, Dict, List, Optional

from ..config import ConfigManager
from ..core.logging_config import LoggingManager
from ..error_handlers import cli_error_handler
from ..library import ReductionThresholds
from ..parsers.alignment import BLAST_COLUMNS, STANDARD_COLUMNS
from ..pipelines.orchestrator import PipelineOrchestrator, reduce_library
from ..pipelines.report import format_run_summary, status_table


def build_parser() -> argparse.ArgumentParser:
    # Create the top-level parser
    parser = argparse.ArgumentParser(
        prog='panedta',
        description='panEDTA: build a pan-genome TE library and re-annotate genomes with it')

    # Global options
    parser.add_argument('--config', type=str, help='Path to configuration file')
    parser.add_argument('-v', '--verbose', action='count', default=0,
                        help='Enable debug logging')
    parser.add_argument('--log-file', type=str,
                        help='Log to file in addition to stdout')
    parser.add_argument('--log-dir', type=str,
                        help='Directory for log files')
    parser.add_argument('--json', action='store_true',
                        help='Output results as JSON')

    subparsers = parser.add_subparsers(dest='command', help='Command to run')

    # Full pipeline command
    run_parser = subparsers.add_parser('run', help='Run the pan-genome annotation')
    run_parser.add_argument('-g', '--genomes', type=str,
                            help='List of genome files, one per line, optionally followed by a CDS file')
    run_parser.add_argument('-c', '--cds', type=str,
                            help='Coding sequences used for every genome without its own CDS')
    run_parser.add_argument('-l', '--curated-library', type=str,
                            help='Curated TE library appended verbatim to the pan-genome library')
    run_parser.add_argument('-f', '--fl-copy', type=int,
                            help='Minimum full-length copies for a family to be kept (default 3)')
    run_parser.add_argument('-t', '--threads', type=int,
                            help='Total number of threads (default 10)')
    run_parser.add_argument('-p', '--parallel-genomes', type=int,
                            help='Genomes annotated at the same time (default 1)')
    run_parser.add_argument('--work-dir', type=str, help='Directory for all outputs')
    run_parser.add_argument('--dry-run', action='store_true',
                            help='Log tool commands without running them')

    # Standalone reduction command
    reduce_parser = subparsers.add_parser('reduce', help='Remove redundancy from an existing TE pool')
    reduce_parser.add_argument('--fasta', type=str, required=True, help='Candidate pool FASTA')
    reduce_parser.add_argument('--hits', type=str, required=True,
                               help='All-versus-all BLAST hits of the pool (tabular)')
    reduce_parser.add_argument('--output', type=str, required=True, help='Output library')
    reduce_parser.add_argument('-l', '--curated-library', type=str,
                               help='Curated TE library appended verbatim')
    reduce_parser.add_argument('--cov', type=float, help='Minimum coverage of the covered sequence')
    reduce_parser.add_argument('--minlen', type=int, help='Minimum alignment length')
    reduce_parser.add_argument('--miniden', type=float, help='Minimum percent identity')
    reduce_parser.add_argument('--standard-outfmt', action='store_true',
                               help='Hit table uses the 12 standard outfmt 6 columns')

    # Status check command
    status_parser = subparsers.add_parser('status', help='Show where each genome would resume')
    status_parser.add_argument('-g', '--genomes', type=str, help='List of genome files')
    status_parser.add_argument('-c', '--cds', type=str, help='Coding sequences')
    status_parser.add_argument('--work-dir', type=str, help='Directory holding previous outputs')

    return parser


def config_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """Translate command line flags into configuration overrides"""
    overrides: Dict[str, Any] = {
        'inputs': {
            'genome_list': getattr(args, 'genomes', None),
            'coding_sequences': getattr(args, 'cds', None),
            'curated_library': getattr(args, 'curated_library', None),
        },
        'library': {'min_full_length_copies': getattr(args, 'fl_copy', None)},
        'paths': {'work_dir': getattr(args, 'work_dir', None)},
        'pipeline': {
            'worker_count': getattr(args, 'threads', None),
            'max_parallel_genomes': getattr(args, 'parallel_genomes', None),
        },
        'reduction': {
            'min_coverage': getattr(args, 'cov', None),
            'min_length': getattr(args, 'minlen', None),
            'min_identity': getattr(args, 'miniden', None),
        },
    }
    if getattr(args, 'dry_run', False):
        overrides['pipeline']['dry_run'] = True
    return overrides


def run_command(args: argparse.Namespace, config_manager: ConfigManager) -> int:
    orchestrator = PipelineOrchestrator(config_manager)
    run = orchestrator.run()

    if args.json:
        print(json.dumps(run.get_summary(), indent=2, default=str))
    else:
        print(format_run_summary(run))
    return 0


def reduce_command(args: argparse.Namespace, config_manager: ConfigManager) -> int:
    thresholds = ReductionThresholds.from_config(config_manager.config)
    library = reduce_library(args.fasta, args.hits, args.output, thresholds,
                             curated_path=args.curated_library,
                             columns=STANDARD_COLUMNS if args.standard_outfmt else BLAST_COLUMNS)

    if args.json:
        print(json.dumps({'library': args.output, **library.get_summary()}, indent=2))
    else:
        print(f"Wrote {len(library)} sequences to {args.output} "
              f"({library.representative_count} representatives, {library.curated_count} curated)")
    return 0


def status_command(args: argparse.Namespace, config_manager: ConfigManager) -> int:
    orchestrator = PipelineOrchestrator(config_manager)
    statuses = orchestrator.status()

    if args.json:
        print(json.dumps([status.to_dict() for status in statuses], indent=2))
    else:
        print(status_table(statuses).drop(columns=['error']).to_string(index=False))
    return 0


COMMANDS = {
    'run': run_command,
    'reduce': reduce_command,
    'status': status_command,
}


@cli_error_handler
def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    config_manager = ConfigManager(args.config, overrides=config_overrides(args))

    # Level comes from the logging section unless -v asks for debug output
    LoggingManager.configure(
        verbose=args.verbose > 0,
        log_file=args.log_file,
        log_dir=args.log_dir,
        component="panedta",
        config=config_manager.config
    )
    logger = LoggingManager.get_logger("panedta.cli")
    logger.debug(f"Running command {args.command}")

    return COMMANDS[args.command](args, config_manager)


if __name__ == "__main__":
    sys.exit(main())

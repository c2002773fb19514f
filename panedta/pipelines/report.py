#!/usr/bin/env python3
"""
Run summaries for the panEDTA pipeline
"""
import logging
from typing import List

import pandas as pd

from panedta.utils.file import atomic_write
from .orchestration import GenomeStatus, PipelineRun

logger = logging.getLogger("panedta.pipelines.report")

SUMMARY_COLUMNS = ['genome', 'state', 'annotation_skipped', 'families_kept',
                   'sequences_contributed', 'error']


def status_table(statuses: List[GenomeStatus]) -> pd.DataFrame:
    """Per-genome status as a DataFrame in genome list order"""
    return pd.DataFrame([status.to_dict() for status in statuses], columns=SUMMARY_COLUMNS)


def write_run_summary(run: PipelineRun, path: str) -> str:
    """Write the per-genome summary of a run as TSV

    Args:
        run: Finished pipeline run
        path: Output path

    Returns:
        Path written
    """
    table = status_table(run.genomes)
    with atomic_write(path, 'w') as handle:
        table.to_csv(handle, sep='\t', index=False, na_rep='')
    logger.info(f"Run summary written to {path}")
    return path


def format_run_summary(run: PipelineRun) -> str:
    """Human readable summary for the terminal"""
    summary = run.get_summary()
    lines = [f"Pipeline completed with status: {summary['status']}"]

    if run.library_path:
        entries = run.library_summary
        lines.append(f"Library: {run.library_path} ({entries.get('total', 0)} entries, "
                     f"{entries.get('representatives', 0)} representatives, "
                     f"{entries.get('curated', 0)} curated)")

    table = status_table(run.genomes)
    if not table.empty:
        lines.append(table.drop(columns=['error']).to_string(index=False))

    failures = summary['reannotation_failures']
    if failures:
        lines.append(f"Re-annotation failed for: {', '.join(failures)}")
        for status in run.reannotation_failures:
            lines.append(f"  {status.name}: {status.error}")
    return "\n".join(lines)

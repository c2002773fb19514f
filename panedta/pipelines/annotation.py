#!/usr/bin/env python3
"""
Per-genome annotation with EDTA and RepeatMasker

Builds the command lines for the initial EDTA run, the homology-based
re-annotation with the pan-genome library and the final structural EDTA
step, and performs the small file fix-ups between them.
"""
import os
import re
import shlex
import logging
from typing import Any, Dict, List, Optional

import pandas as pd
from Bio import SeqIO

from panedta.exceptions import FileOperationError
from panedta.jobs.base import ToolRunner, ToolResult
from panedta.models.genome import Genome
from panedta.utils.file import atomic_write

logger = logging.getLogger("panedta.pipelines.annotation")

_BARE_DNA_CLASS = re.compile(r'\s+DNA\s+')


class EDTAAnnotator:
    """Run EDTA for one genome"""

    def __init__(self, runner: ToolRunner, config: Dict[str, Any], threads: int):
        self.runner = runner
        self.config = config
        self.threads = threads
        self.edta = shlex.split(config.get('tools', {}).get('edta_path', 'EDTA.pl'))
        self.work_dir = config.get('paths', {}).get('work_dir', '.')

    def initial_command(self, genome: Genome, curated_library: Optional[str] = None) -> List[str]:
        command = self.edta + ['--genome', genome.path, '-t', str(self.threads), '--anno', '1']
        if genome.cds:
            command += ['--cds', genome.cds]
        if curated_library:
            command += ['--curatedlib', curated_library]
        return command

    def final_command(self, genome: Genome, library: str, rmout: str) -> List[str]:
        command = self.edta + ['--genome', genome.path, '-t', str(self.threads),
                               '--step', 'final', '--anno', '1', '--curatedlib', library]
        if genome.cds:
            command += ['--cds', genome.cds]
        command += ['--rmout', rmout]
        return command

    def annotate(self, genome: Genome, curated_library: Optional[str] = None) -> ToolResult:
        """Initial de novo annotation of a genome"""
        logger.info(f"Annotate genome {genome.name} with EDTA")
        return self.runner.run(self.initial_command(genome, curated_library),
                               f"edta_initial_{genome.name}", cwd=self.work_dir)

    def finalize(self, genome: Genome, library: str, rmout: str) -> ToolResult:
        """Structural re-annotation using the pan-genome library"""
        logger.info(f"Reannotate genome {genome.name} with the panEDTA library - structural")
        return self.runner.run(self.final_command(genome, library, rmout),
                               f"edta_final_{genome.name}", cwd=self.work_dir)


class RepeatMaskerAnnotator:
    """Homology-based re-annotation with RepeatMasker"""

    def __init__(self, runner: ToolRunner, config: Dict[str, Any], threads: int):
        self.runner = runner
        self.threads = threads
        self.repeatmasker = shlex.split(config.get('tools', {}).get('repeatmasker_path', 'RepeatMasker'))
        reannotation = config.get('reannotation', {})
        self.divergence = reannotation.get('divergence', 40)
        self.cutoff = reannotation.get('cutoff', 225)
        self.work_dir = config.get('paths', {}).get('work_dir', '.')

    def command(self, target: str, library: str) -> List[str]:
        return self.repeatmasker + ['-pa', str(self.threads), '-q', '-div', str(self.divergence),
                                    '-lib', library, '-cutoff', str(self.cutoff), '-gff', target]

    def mask(self, genome: Genome, target: str, library: str) -> ToolResult:
        logger.info(f"Reannotate genome {genome.name} with the panEDTA library - homology")
        return self.runner.run(self.command(target, library),
                               f"repeatmasker_{genome.name}", cwd=self.work_dir)


def normalize_repeatmasker_classes(out_path: str) -> int:
    """Rewrite the bare ``DNA`` class as ``DNA/unknown`` in a .out file

    EDTA's final step expects every class to carry a subclass.

    Args:
        out_path: RepeatMasker .out file, rewritten in place

    Returns:
        Number of lines changed
    """
    if not os.path.isfile(out_path):
        raise FileOperationError(f"RepeatMasker output not found: {out_path}",
                                 {"file_path": out_path})

    with open(out_path, 'r') as source:
        lines = source.read().splitlines()

    changed = 0
    with atomic_write(out_path, 'w') as target:
        for line in lines:
            fixed = _BARE_DNA_CLASS.sub('\tDNA/unknown\t', line, count=1)
            if fixed != line:
                changed += 1
            target.write(fixed + '\n')

    logger.debug(f"Normalized {changed} DNA class labels in {out_path}")
    return changed


def genome_base_stats(genome_path: str) -> pd.DataFrame:
    """Per-sequence base composition of a genome FASTA

    Args:
        genome_path: Genome FASTA

    Returns:
        DataFrame with one row per sequence plus an ``All`` total row
    """
    rows = []
    for record in SeqIO.parse(genome_path, "fasta"):
        sequence = str(record.seq).upper()
        rows.append({
            'sequence': record.id,
            'length': len(sequence),
            'A': sequence.count('A'),
            'C': sequence.count('C'),
            'G': sequence.count('G'),
            'T': sequence.count('T'),
            'N': sequence.count('N'),
        })

    stats = pd.DataFrame(rows, columns=['sequence', 'length', 'A', 'C', 'G', 'T', 'N'])
    total = stats.drop(columns=['sequence']).sum()
    stats.loc[len(stats)] = ['All'] + [int(value) for value in total]
    acgt = stats[['A', 'C', 'G', 'T']].sum(axis=1)
    stats['GC'] = ((stats['G'] + stats['C']) / acgt.where(acgt > 0)).round(4).fillna(0.0)
    return stats


def write_genome_stats(genome_path: str, stats_path: str) -> str:
    """Write base composition statistics of a genome as TSV"""
    stats = genome_base_stats(genome_path)
    with atomic_write(stats_path, 'w') as handle:
        stats.to_csv(handle, sep='\t', index=False)
    logger.debug(f"Wrote base statistics for {genome_path} to {stats_path}")
    return stats_path

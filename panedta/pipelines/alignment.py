#!/usr/bin/env python3
"""
All-versus-all alignment of the candidate pool with BLAST+
"""
import os
import shlex
import logging
from typing import Any, Dict, List, Optional

from panedta.jobs.base import ToolRunner
from panedta.parsers.alignment import BLAST_COLUMNS, blast_outfmt
from panedta.utils.fasta import read_fasta_records

logger = logging.getLogger("panedta.pipelines.alignment")


class AllVersusAllAligner:
    """Search a FASTA file against itself"""

    def __init__(self, runner: ToolRunner, config: Dict[str, Any], threads: int):
        self.runner = runner
        self.threads = threads
        tools = config.get('tools', {})
        self.makeblastdb = shlex.split(tools.get('makeblastdb_path', 'makeblastdb'))
        self.blastn = shlex.split(tools.get('blastn_path', 'blastn'))

        alignment = config.get('alignment', {})
        # 0 means one target slot per pool member
        self.max_target_seqs = int(alignment.get('max_target_seqs', 0))
        self.evalue = alignment.get('evalue', 1e-10)

    def target_limit(self, pool_size: int) -> int:
        """Targets reported per query; covers the whole pool unless configured"""
        return max(self.max_target_seqs or pool_size, 1)

    def database_command(self, fasta_path: str) -> List[str]:
        return self.makeblastdb + ['-in', fasta_path, '-dbtype', 'nucl', '-out', fasta_path]

    def search_command(self, fasta_path: str, output_path: str, pool_size: int) -> List[str]:
        return self.blastn + ['-query', fasta_path, '-db', fasta_path,
                              '-outfmt', blast_outfmt(BLAST_COLUMNS),
                              '-evalue', str(self.evalue), '-dust', 'no',
                              '-max_target_seqs', str(self.target_limit(pool_size)),
                              '-num_threads', str(self.threads), '-out', output_path]

    def align(self, fasta_path: str, pool_size: Optional[int] = None) -> str:
        """Align every pool member against every other

        Args:
            fasta_path: Pool FASTA
            pool_size: Number of pool members; counted from the file when omitted

        Returns:
            Path to the BLAST tabular output
        """
        if pool_size is None:
            pool_size = len(read_fasta_records(fasta_path))
        if 0 < self.max_target_seqs < pool_size:
            logger.warning(f"blastn reports at most {self.max_target_seqs} targets for a pool of "
                           f"{pool_size}; some coverers may be missed")

        output_path = f"{fasta_path}.blast.tsv"
        name = os.path.basename(fasta_path)
        logger.info(f"Aligning candidate pool {fasta_path} against itself")
        self.runner.run(self.database_command(fasta_path), f"makeblastdb_{name}")
        self.runner.run(self.search_command(fasta_path, output_path, pool_size), f"blastn_{name}")
        return output_path

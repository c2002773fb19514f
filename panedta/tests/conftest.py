#!/usr/bin/env python3
"""
Shared fixtures for the panEDTA test suite

Provides temporary directories, writers for the text formats the external
tools produce, and a fake tool runner that materializes tool outputs so
the orchestrator can run end to end without EDTA, RepeatMasker or BLAST.
"""

import os
import shutil
import tempfile
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import pytest

from panedta.exceptions import ToolExecutionError
from panedta.jobs.base import ToolResult, ToolRunner
from panedta.models.genome import GenomeArtifacts
from panedta.models.library import AlignmentHit, CandidateSequence
from panedta.utils.fasta import read_fasta_records, parse_te_header

RM_HEADER = (
    "   SW   perc perc perc  query     position in query    matching  repeat      position in repeat\n"
    "score   div. del. ins.  sequence  begin  end  (left)   repeat    class/family begin  end (left)  ID\n"
    "\n"
)


def write_fasta(path: str, records: Iterable[Tuple[str, str]]) -> str:
    """Write (header, sequence) records as plain FASTA"""
    with open(path, 'w') as f:
        for header, sequence in records:
            f.write(f">{header}\n{sequence}\n")
    return path


def rm_line(family: str, classification: str = "LTR/Copia", consensus: int = 1000,
            covered: Optional[int] = None, strand: str = '+', chrom: str = "chr1",
            start: int = 1, hit_id: int = 1) -> str:
    """One RepeatMasker .out data line

    Args:
        family: Repeat name
        classification: class/family column
        consensus: Consensus length of the repeat
        covered: Consensus bases spanned by the hit, full length by default
        strand: '+' or 'C'
    """
    covered = consensus if covered is None else covered
    left = consensus - covered
    end = start + covered - 1
    if strand == 'C':
        repeat = f"({left}) {covered} 1"
    else:
        repeat = f"1 {covered} ({left})"
    return (f"  2300  5.2  0.1  0.3  {chrom}  {start}  {end}  (90000) {strand}  "
            f"{family}  {classification}  {repeat}  {hit_id}\n")


def write_rm_out(path: str, lines: Iterable[str]) -> str:
    """Write a RepeatMasker .out file with its header"""
    os.makedirs(os.path.dirname(path) or '.', exist_ok=True)
    with open(path, 'w') as f:
        f.write(RM_HEADER)
        for line in lines:
            f.write(line)
    return path


def full_length_lines(copies: Dict[str, int], classification: str = "LTR/Copia") -> List[str]:
    """Full-length RepeatMasker lines, ``copies[family]`` per family"""
    lines = []
    hit_id = 1
    for family, count in copies.items():
        for copy in range(count):
            lines.append(rm_line(family, classification, start=1 + copy * 2000, hit_id=hit_id))
            hit_id += 1
    return lines


def blast_row(query: str, subject: str, identity: float, length: int,
              qstart: int, qend: int, qlen: int, slen: int = 1000) -> str:
    """One row in the 12 custom columns of the pool alignment"""
    return (f"{query}\t{subject}\t{identity:.2f}\t{length}\t{qstart}\t{qend}\t"
            f"1\t{length}\t0.0\t{2 * length}\t{qlen}\t{slen}\n")


def write_blast(path: str, rows: Iterable[str]) -> str:
    with open(path, 'w') as f:
        for row in rows:
            f.write(row)
    return path


def candidate(candidate_id: int, length: int = 1000, genome: str = "g1.fa",
              classification: str = "LTR/Copia") -> CandidateSequence:
    return CandidateSequence(id=candidate_id, name=f"TE_{candidate_id:08d}", genome=genome,
                             sequence="A" * length, classification=classification)


def covers(covered: CandidateSequence, coverer: CandidateSequence, identity: float = 95.0,
           coverage: float = 1.0, alignment_length: Optional[int] = None) -> AlignmentHit:
    """Hit stating that ``covered`` lies inside ``coverer``"""
    return AlignmentHit(query_id=covered.name, target_id=coverer.name, identity=identity,
                        alignment_length=alignment_length or covered.length,
                        query_coverage=coverage)


def random_sequence(length: int, seed: int) -> str:
    """Deterministic pseudo random DNA"""
    bases = "ACGT"
    state = seed
    sequence = []
    for _ in range(length):
        state = (state * 1103515245 + 12345) % (2 ** 31)
        sequence.append(bases[(state >> 16) % 4])
    return "".join(sequence)


class GenomePlan:
    """What the fake initial annotation produces for one genome"""

    def __init__(self, library: Sequence[Tuple[str, str]], copies: Dict[str, int],
                 novel: Optional[Sequence[Tuple[str, str]]] = None):
        self.library = list(library)
        self.copies = dict(copies)
        self.novel = list(novel) if novel is not None else None


class FakeToolRunner(ToolRunner):
    """Stands in for EDTA, RepeatMasker and BLAST

    Initial EDTA writes the planned library and annotation of a genome;
    blastn reports every pool member contained in another as a hit (self
    hits included); RepeatMasker writes a .out with a bare DNA class.
    Job names listed in ``fail`` raise ToolExecutionError.
    """

    def __init__(self, plans: Dict[str, GenomePlan], fail: Iterable[str] = ()):
        self.plans = plans
        self.fail = set(fail)
        self.calls: List[Tuple[str, List[str], Optional[str]]] = []

    def job_names(self) -> List[str]:
        return [name for name, _, _ in self.calls]

    def run(self, command: List[str], name: str, cwd: Optional[str] = None) -> ToolResult:
        self.calls.append((name, list(command), cwd))
        if name in self.fail:
            raise ToolExecutionError(f"{name} exited with code 1", {"job": name})

        if name.startswith("edta_initial_"):
            self.materialize(name[len("edta_initial_"):], cwd)
        elif name.startswith("blastn_"):
            query = command[command.index('-query') + 1]
            output = command[command.index('-out') + 1]
            self.align(query, output)
        elif name.startswith("repeatmasker_"):
            target = command[-1]
            with open(f"{target}.out", 'w') as f:
                f.write(RM_HEADER)
                f.write("  300  10.1  0.0  0.0  chr1  1  200  (900) +  TE_00000001  DNA  1  200  (0)  1\n")

        return ToolResult(name=name, command=list(command), return_code=0)

    def materialize(self, genome_name: str, work_dir: str) -> GenomeArtifacts:
        """Write the outputs of an initial annotation"""
        plan = self.plans[genome_name]
        artifacts = GenomeArtifacts(genome_name, work_dir)
        write_fasta(artifacts.raw_library, plan.library)
        if plan.novel is not None:
            write_fasta(artifacts.novel_library, plan.novel)
        write_rm_out(artifacts.repeatmasker_out, full_length_lines(plan.copies))
        write_fasta(artifacts.masked_input, [("chr1", "ACGT" * 50)])
        with open(artifacts.summary, 'w') as f:
            f.write(f"Summary of {genome_name}\n")
        return artifacts

    @staticmethod
    def align(fasta_path: str, output_path: str) -> None:
        records = [(parse_te_header(header)[0], header.split()[0], sequence)
                   for header, sequence in read_fasta_records(fasta_path)]
        with open(output_path, 'w') as f:
            for _, query, query_seq in records:
                for _, subject, subject_seq in records:
                    if query_seq in subject_seq:
                        f.write(blast_row(query, subject, 100.0, len(query_seq), 1,
                                          len(query_seq), len(query_seq), len(subject_seq)))


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files"""
    temp_path = tempfile.mkdtemp(prefix="panedta_test_")
    yield temp_path
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep PANEDTA_* variables of the calling shell out of the tests"""
    for key in list(os.environ):
        if key.startswith("PANEDTA_"):
            monkeypatch.delenv(key, raising=False)

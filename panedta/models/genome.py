#!/usr/bin/env python3
"""
Genome records and the artifact layout EDTA produces for each genome
"""
import os
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from panedta.exceptions import ConfigError
from panedta.utils.file import check_input_file

logger = logging.getLogger("panedta.models.genome")


@dataclass
class GenomeArtifacts:
    """File names EDTA and RepeatMasker write for one genome

    All names are derived from the genome file's base name inside the
    working directory, matching the tools' own conventions.
    """
    genome_name: str
    work_dir: str = "."

    def _path(self, suffix: str) -> str:
        return os.path.join(self.work_dir, f"{self.genome_name}{suffix}")

    @property
    def stats(self) -> str:
        return self._path(".stats")

    @property
    def summary(self) -> str:
        """Annotation summary; its presence marks a finished initial annotation"""
        return self._path(".mod.EDTA.TEanno.sum")

    @property
    def repeatmasker_out(self) -> str:
        return os.path.join(self.work_dir, f"{self.genome_name}.mod.EDTA.anno",
                            f"{self.genome_name}.mod.EDTA.RM.out")

    @property
    def raw_library(self) -> str:
        return self._path(".mod.EDTA.TElib.fa")

    @property
    def novel_library(self) -> str:
        return self._path(".mod.EDTA.TElib.novel.fa")

    @property
    def keep_list(self) -> str:
        return self._path(".mod.EDTA.TElib.fa.keep.list")

    @property
    def kept_sequences(self) -> str:
        return self._path(".mod.EDTA.TElib.fa.keep.ori")

    @property
    def masked_input(self) -> str:
        """Genome copy EDTA prepares; RepeatMasker re-annotation runs on it"""
        return self._path(".mod")

    @property
    def reannotation_out(self) -> str:
        return self._path(".mod.out")


@dataclass
class Genome:
    """A genome of the pan-genome and its optional coding sequences"""
    path: str
    cds: Optional[str] = None
    annotation: Optional[GenomeArtifacts] = None

    @property
    def name(self) -> str:
        return os.path.basename(self.path)

    def artifacts(self, work_dir: str = ".") -> GenomeArtifacts:
        """Get (and remember) the artifact layout in a working directory"""
        if self.annotation is None or self.annotation.work_dir != work_dir:
            self.annotation = GenomeArtifacts(self.name, work_dir)
        return self.annotation


def read_genome_list(list_path: str, default_cds: Optional[str] = None,
                     check_files: bool = True) -> List[Genome]:
    """Read a one- or two-column genome list

    Each non-empty line names a genome file, optionally followed by the
    coding sequence file for that genome. Genomes without their own CDS
    inherit ``default_cds``.

    Args:
        list_path: Path to the genome list
        default_cds: Global coding sequence fallback
        check_files: Require every listed genome and CDS file to be non-empty

    Returns:
        Genomes in list order

    Raises:
        ConfigError: If the list is missing, empty, or names missing files
    """
    check_input_file(list_path, "genome list")

    genomes: List[Genome] = []
    seen = set()
    with open(list_path, 'r') as f:
        for line_number, line in enumerate(f, 1):
            fields = line.split()
            if not fields or fields[0].startswith('#'):
                continue

            genome_path = fields[0]
            cds = fields[1] if len(fields) > 1 else default_cds

            if os.path.basename(genome_path) in seen:
                raise ConfigError(f"Genome {genome_path} is listed more than once in {list_path}",
                                  {"file_path": list_path, "line": line_number})
            seen.add(os.path.basename(genome_path))

            if check_files:
                check_input_file(genome_path, "genome")
                if cds:
                    check_input_file(cds, "cds")

            genomes.append(Genome(path=genome_path, cds=cds))

    if not genomes:
        raise ConfigError(f"The genome list {list_path} does not name any genome",
                          {"file_path": list_path})

    logger.debug(f"Read {len(genomes)} genomes from {list_path}")
    return genomes

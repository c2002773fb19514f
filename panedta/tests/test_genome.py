#!/usr/bin/env python3
"""
Tests for genome lists and artifact naming
"""

import os

import pytest

from panedta.exceptions import ConfigError
from panedta.models.genome import Genome, GenomeArtifacts, read_genome_list
from .conftest import write_fasta


class TestGenomeArtifacts:

    def test_file_names(self):
        artifacts = GenomeArtifacts("maize.fa", "/work")

        assert artifacts.summary == "/work/maize.fa.mod.EDTA.TEanno.sum"
        assert artifacts.repeatmasker_out == "/work/maize.fa.mod.EDTA.anno/maize.fa.mod.EDTA.RM.out"
        assert artifacts.raw_library == "/work/maize.fa.mod.EDTA.TElib.fa"
        assert artifacts.novel_library == "/work/maize.fa.mod.EDTA.TElib.novel.fa"
        assert artifacts.keep_list == "/work/maize.fa.mod.EDTA.TElib.fa.keep.list"
        assert artifacts.kept_sequences == "/work/maize.fa.mod.EDTA.TElib.fa.keep.ori"
        assert artifacts.reannotation_out == "/work/maize.fa.mod.out"
        assert artifacts.stats == "/work/maize.fa.stats"

    def test_genome_name_is_base_name(self):
        assert Genome("/data/genomes/b73.fa").name == "b73.fa"


class TestReadGenomeList:

    @pytest.fixture
    def genome_files(self, temp_dir):
        g1 = write_fasta(os.path.join(temp_dir, "g1.fa"), [("chr1", "ACGT")])
        g2 = write_fasta(os.path.join(temp_dir, "g2.fa"), [("chr1", "ACGT")])
        cds = write_fasta(os.path.join(temp_dir, "g2.cds"), [("gene1", "ATG")])
        shared = write_fasta(os.path.join(temp_dir, "shared.cds"), [("gene0", "ATG")])
        return g1, g2, cds, shared

    def test_one_and_two_column_lines(self, temp_dir, genome_files):
        g1, g2, cds, shared = genome_files
        list_path = os.path.join(temp_dir, "genomes.txt")
        with open(list_path, 'w') as f:
            f.write(f"# pan-genome\n{g1}\n\n{g2} {cds}\n")

        genomes = read_genome_list(list_path, default_cds=shared)

        assert [(g.name, g.cds) for g in genomes] == [("g1.fa", shared), ("g2.fa", cds)]

    def test_empty_list(self, temp_dir):
        list_path = os.path.join(temp_dir, "genomes.txt")
        with open(list_path, 'w') as f:
            f.write("# nothing here\n")

        with pytest.raises(ConfigError):
            read_genome_list(list_path)

    def test_missing_genome_file(self, temp_dir):
        list_path = os.path.join(temp_dir, "genomes.txt")
        with open(list_path, 'w') as f:
            f.write(os.path.join(temp_dir, "absent.fa") + "\n")

        with pytest.raises(ConfigError) as excinfo:
            read_genome_list(list_path)

        assert "absent.fa" in excinfo.value.message

    def test_duplicate_genome(self, temp_dir, genome_files):
        g1 = genome_files[0]
        list_path = os.path.join(temp_dir, "genomes.txt")
        with open(list_path, 'w') as f:
            f.write(f"{g1}\n{g1}\n")

        with pytest.raises(ConfigError):
            read_genome_list(list_path)

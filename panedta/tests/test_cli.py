#!/usr/bin/env python3
"""
Tests for the panedta command line interface
"""

import json
import logging
import os

import pytest

from panedta.cli.main import build_parser, config_overrides, main
from panedta.utils.fasta import read_fasta_records
from .conftest import blast_row, write_blast, write_fasta


@pytest.fixture(autouse=True)
def restore_logging():
    """LoggingManager replaces the root handlers; put them back afterwards"""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def pool(temp_dir):
    fasta = write_fasta(os.path.join(temp_dir, "pool.fa"), [
        ("TE_00000001#LTR/Copia", "A" * 1000),
        ("TE_00000002#LTR/Copia", "A" * 900),
        ("TE_00000003#DNA/DTA", "C" * 500),
    ])
    hits = write_blast(os.path.join(temp_dir, "pool.tsv"), [
        blast_row("TE_00000002#LTR/Copia", "TE_00000001#LTR/Copia", 99.0, 900, 1, 900, 900),
        blast_row("TE_00000002#LTR/Copia", "TE_00000002#LTR/Copia", 100.0, 900, 1, 900, 900),
    ])
    return fasta, hits


class TestReduceCommand:

    def test_reduce(self, pool, temp_dir, capsys):
        fasta, hits = pool
        output = os.path.join(temp_dir, "reduced.fa")

        assert main(["reduce", "--fasta", fasta, "--hits", hits, "--output", output]) == 0

        assert [header for header, _ in read_fasta_records(output)] == [
            "TE_00000001#LTR/Copia", "TE_00000003#DNA/DTA"]
        assert "Wrote 2 sequences" in capsys.readouterr().out

    def test_reduce_thresholds_and_json(self, pool, temp_dir, capsys):
        fasta, hits = pool
        output = os.path.join(temp_dir, "reduced.fa")

        code = main(["--json", "reduce", "--fasta", fasta, "--hits", hits, "--output", output,
                     "--miniden", "99.5"])

        assert code == 0
        summary = json.loads(capsys.readouterr().out)
        assert summary['total'] == 3

    def test_reduce_with_curated_library(self, pool, temp_dir):
        fasta, hits = pool
        curated = write_fasta(os.path.join(temp_dir, "curated.fa"), [("TE3#LTR/Gypsy", "GGGG")])
        output = os.path.join(temp_dir, "reduced.fa")

        main(["reduce", "--fasta", fasta, "--hits", hits, "--output", output, "-l", curated])

        assert read_fasta_records(output)[-1] == ("TE3#LTR/Gypsy", "GGGG")

    def test_missing_hits_keep_everything(self, pool, temp_dir):
        fasta, _ = pool
        output = os.path.join(temp_dir, "reduced.fa")

        main(["reduce", "--fasta", fasta, "--hits", os.path.join(temp_dir, "absent.tsv"),
              "--output", output])

        assert len(read_fasta_records(output)) == 3

    def test_missing_pool_exits_with_error(self, temp_dir, capsys):
        with pytest.raises(SystemExit) as excinfo:
            main(["reduce", "--fasta", os.path.join(temp_dir, "absent.fa"),
                  "--hits", "x.tsv", "--output", "y.fa"])

        assert excinfo.value.code == 1
        assert "candidate pool" in capsys.readouterr().err


class TestRunArguments:

    def test_flags_become_overrides(self):
        args = build_parser().parse_args(["run", "-g", "genomes.txt", "-c", "cds.fa", "-f", "4",
                                          "-t", "20", "--dry-run"])

        overrides = config_overrides(args)

        assert overrides['inputs']['genome_list'] == "genomes.txt"
        assert overrides['inputs']['coding_sequences'] == "cds.fa"
        assert overrides['library']['min_full_length_copies'] == 4
        assert overrides['pipeline']['worker_count'] == 20
        assert overrides['pipeline']['dry_run'] is True

    def test_run_without_genome_list_fails(self, temp_dir, capsys):
        with pytest.raises(SystemExit) as excinfo:
            main(["run", "--work-dir", temp_dir])

        assert excinfo.value.code == 1
        assert "genome list" in capsys.readouterr().err

    def test_dry_run(self, temp_dir, capsys):
        genome = write_fasta(os.path.join(temp_dir, "g1.fa"), [("chr1", "ACGT")])
        list_path = os.path.join(temp_dir, "genomes.txt")
        with open(list_path, 'w') as f:
            f.write(genome + "\n")

        code = main(["--json", "run", "-g", list_path, "--work-dir", os.path.join(temp_dir, "work"),
                     "--dry-run"])

        assert code == 0
        summary = json.loads(capsys.readouterr().out)
        assert summary['genomes'][0]['state'] == "initially_annotated"

    def test_status(self, temp_dir, capsys):
        genome = write_fasta(os.path.join(temp_dir, "g1.fa"), [("chr1", "ACGT")])
        list_path = os.path.join(temp_dir, "genomes.txt")
        with open(list_path, 'w') as f:
            f.write(genome + "\n")

        assert main(["status", "-g", list_path, "--work-dir", temp_dir]) == 0

        assert "unannotated" in capsys.readouterr().out

    def test_no_command_prints_help(self, capsys):
        assert main([]) == 1
        assert "usage" in capsys.readouterr().out

#!/usr/bin/env python3
"""
Tests for the RepeatMasker, BLAST and FASTA readers
"""

import os

import pytest

from panedta.exceptions import AlignmentDataError, MissingAnnotationError
from panedta.models.library import CandidateSequence
from panedta.parsers.alignment import STANDARD_COLUMNS, blast_outfmt, parse_blast_tabular
from panedta.parsers.repeatmasker import (
    is_full_length, parse_repeatmasker_line, parse_repeatmasker_out
)
from panedta.utils.fasta import (
    format_te_header, parse_te_header, read_fasta_records, sequence_lengths, write_fasta_records
)
from .conftest import blast_row, rm_line, write_blast, write_rm_out


class TestRepeatMaskerParser:

    def test_forward_strand(self):
        hit = parse_repeatmasker_line(rm_line("TE_00000001", "LTR/Copia", consensus=1000, covered=960))

        assert hit.family == "TE_00000001"
        assert hit.classification == "LTR/Copia"
        assert hit.strand == '+'
        assert (hit.repeat_start, hit.repeat_end, hit.repeat_left) == (1, 960, 40)
        assert hit.repeat_length == 1000
        assert is_full_length(hit)

    def test_complement_strand(self):
        hit = parse_repeatmasker_line(rm_line("TE_00000001", consensus=1000, covered=900, strand='C'))

        assert hit.strand == '-'
        assert (hit.repeat_start, hit.repeat_end, hit.repeat_left) == (1, 900, 100)
        assert not is_full_length(hit)

    def test_trailing_asterisk(self):
        line = rm_line("TE_00000001").rstrip('\n') + " *\n"

        assert parse_repeatmasker_line(line) is not None

    def test_header_and_blank_lines(self, temp_dir):
        out_path = write_rm_out(os.path.join(temp_dir, "g.out"), [rm_line("a"), "\n", rm_line("b")])

        assert [hit.family for hit in parse_repeatmasker_out(out_path)] == ["a", "b"]

    def test_missing_file(self, temp_dir):
        with pytest.raises(MissingAnnotationError):
            parse_repeatmasker_out(os.path.join(temp_dir, "none.out"), "g1.fa")


class TestBlastParser:

    def test_outfmt_value(self):
        assert blast_outfmt().startswith("6 qseqid sseqid pident length qstart qend")

    def test_query_coverage_and_class_stripping(self, temp_dir):
        path = write_blast(os.path.join(temp_dir, "hits.tsv"), [
            blast_row("TE_00000003#LTR/Copia", "TE_00000001#LTR/Copia", 95.0, 950, 1, 950, 950),
            blast_row("TE_00000001#LTR/Copia", "TE_00000003#LTR/Copia", 95.0, 950, 51, 1000, 1000),
        ])

        hits = parse_blast_tabular(path)

        assert hits[0].query_id == "TE_00000003"
        assert hits[0].target_id == "TE_00000001"
        assert hits[0].query_coverage == pytest.approx(1.0)
        assert hits[1].query_coverage == pytest.approx(0.95)

    def test_reverse_query_coordinates(self, temp_dir):
        path = write_blast(os.path.join(temp_dir, "hits.tsv"),
                           [blast_row("a", "b", 90.0, 100, 100, 1, 200)])

        assert parse_blast_tabular(path)[0].query_coverage == pytest.approx(0.5)

    def test_malformed_rows_are_skipped(self, temp_dir):
        path = write_blast(os.path.join(temp_dir, "hits.tsv"), [
            "only\tthree\tcolumns\n",
            blast_row("a", "b", 90.0, 100, 1, 100, 100).replace("90.00", "n/a"),
            blast_row("a", "b", 90.0, 100, 1, 100, 100),
        ])

        assert len(parse_blast_tabular(path)) == 1

    def test_standard_columns_use_supplied_lengths(self, temp_dir):
        row = "a\tb\t99.0\t100\t0\t0\t1\t100\t1\t100\t1e-50\t180\n"
        path = write_blast(os.path.join(temp_dir, "std.tsv"), [row])

        hits = parse_blast_tabular(path, {"a": 200}, STANDARD_COLUMNS)

        assert hits[0].query_coverage == pytest.approx(0.5)

    def test_missing_file(self, temp_dir):
        with pytest.raises(AlignmentDataError):
            parse_blast_tabular(os.path.join(temp_dir, "absent.tsv"))


class TestFasta:

    def test_header_round_trip_is_verbatim(self, temp_dir):
        path = os.path.join(temp_dir, "lib.fa")
        records = [("TE1#LTR/Copia some free text", "ACGTN"), ("plain", "gg")]

        write_fasta_records(path, records)

        assert read_fasta_records(path) == records

    def test_parse_te_header(self):
        assert parse_te_header("TE_1#DNA/DTA desc") == ("TE_1", "DNA/DTA")
        assert parse_te_header("TE_2") == ("TE_2", "Unknown")
        assert parse_te_header("TE_3#") == ("TE_3", "Unknown")
        assert format_te_header("TE_4", "") == "TE_4#Unknown"

    def test_candidate_header_uses_te_convention(self):
        unclassified = CandidateSequence(id=5, name="TE_00000005", genome="g1.fa",
                                         sequence="ACGT", classification="")

        assert unclassified.header == "TE_00000005#Unknown"
        assert parse_te_header(unclassified.header) == ("TE_00000005", "Unknown")

    def test_sequence_lengths(self):
        assert sequence_lengths([("a#LTR", "ACGT"), ("b", "AC")]) == {"a": 4, "b": 2}

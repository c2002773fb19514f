#!/usr/bin/env python3
"""
Tests for the copy-count filter
"""

import os

import pytest

from panedta.exceptions import MissingAnnotationError
from panedta.library.copy_count import CopyCountFilter
from panedta.parsers.repeatmasker import parse_repeatmasker_line, parse_repeatmasker_out
from .conftest import full_length_lines, rm_line, write_rm_out


class TestCopyCountFilter:
    """Full-length copy counting per family"""

    def test_threshold_boundary(self, temp_dir):
        """Exactly min_copies is kept, one fewer is dropped"""
        out_path = write_rm_out(os.path.join(temp_dir, "g1.out"),
                                full_length_lines({"TE_00000010": 3, "TE_00000020": 2}))

        kept = CopyCountFilter(min_copies=3).filter_annotation(out_path, "g1.fa")

        assert kept == ["TE_00000010"]

    def test_partial_copies_do_not_count(self, temp_dir):
        lines = full_length_lines({"TE_00000001": 2})
        lines.append(rm_line("TE_00000001", covered=400))
        out_path = write_rm_out(os.path.join(temp_dir, "g1.out"), lines)

        assert CopyCountFilter(min_copies=3).filter_annotation(out_path) == []

    def test_complement_strand_copies_count(self, temp_dir):
        lines = [rm_line("TE_00000005", strand='C', start=i * 3000 + 1) for i in range(3)]
        out_path = write_rm_out(os.path.join(temp_dir, "g1.out"), lines)

        counts = CopyCountFilter().count_copies(parse_repeatmasker_out(out_path))

        assert counts["TE_00000005"] == 3

    def test_keep_list_uses_exact_tokens(self, temp_dir):
        out_path = write_rm_out(os.path.join(temp_dir, "g1.out"),
                                full_length_lines({"TE_00000001": 4, "TE_000000010": 5}))
        keep_path = os.path.join(temp_dir, "g1.keep.list")

        CopyCountFilter(min_copies=3).filter_annotation(out_path, "g1.fa", keep_list_path=keep_path)

        with open(keep_path) as f:
            assert f.read().splitlines() == ["TE_00000001#", "TE_000000010#"]

    def test_missing_annotation_raises(self, temp_dir):
        missing = os.path.join(temp_dir, "absent.out")

        with pytest.raises(MissingAnnotationError) as excinfo:
            CopyCountFilter().filter_annotation(missing, "g2.fa")

        assert excinfo.value.details["genome"] == "g2.fa"
        assert excinfo.value.details["file_path"] == missing

    def test_invalid_threshold(self):
        with pytest.raises(ValueError):
            CopyCountFilter(min_copies=0)

    def test_filter_hits_without_files(self):
        hits = [parse_repeatmasker_line(rm_line("TE_00000042", start=i * 2000 + 1)) for i in range(4)]
        hits.append(parse_repeatmasker_line(rm_line("TE_00000043")))

        assert CopyCountFilter(min_copies=4).filter_hits(hits) == ["TE_00000042"]

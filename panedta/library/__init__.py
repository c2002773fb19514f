#!/usr/bin/env python3
"""
Pan-genome TE library construction
"""
from .copy_count import CopyCountFilter
from .extractor import CandidateExtractor, extract_candidates, source_library
from .namespace import NamespaceMerger, MergeResult, candidates_from_records
from .reducer import RedundancyReducer, ReductionThresholds, ReductionResult
from .composer import compose_library, load_curated_library, write_library

__all__ = [
    'CopyCountFilter',
    'CandidateExtractor',
    'extract_candidates',
    'source_library',
    'NamespaceMerger',
    'MergeResult',
    'candidates_from_records',
    'RedundancyReducer',
    'ReductionThresholds',
    'ReductionResult',
    'compose_library',
    'load_curated_library',
    'write_library',
]

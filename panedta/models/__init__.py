#!/usr/bin/env python3
"""
Data models for the panEDTA pipeline
"""
from .library import (
    AnnotationHit,
    CandidateFamily,
    CandidateSequence,
    AlignmentHit,
    CuratedEntry,
    FinalLibraryEntry,
    PanLibrary,
)
from .genome import Genome, GenomeArtifacts, read_genome_list

__all__ = [
    'AnnotationHit',
    'CandidateFamily',
    'CandidateSequence',
    'AlignmentHit',
    'CuratedEntry',
    'FinalLibraryEntry',
    'PanLibrary',
    'Genome',
    'GenomeArtifacts',
    'read_genome_list',
]

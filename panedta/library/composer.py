#!/usr/bin/env python3
"""
Library composer

Builds the pan-genome library from the reduced pool and an optional
curated library. Representatives come first in ascending ID order, then
curated records exactly as supplied. The file is written atomically, so a
run that stops early leaves no partial library behind.
"""
import logging
from typing import Iterable, List, Optional

from panedta.exceptions import ValidationError
from panedta.models.library import CandidateSequence, CuratedEntry, FinalLibraryEntry, PanLibrary
from panedta.utils.fasta import read_fasta_records, write_fasta_records

logger = logging.getLogger("panedta.library.composer")


def load_curated_library(file_path: str) -> List[CuratedEntry]:
    """Read a curated library without altering headers or sequences"""
    entries = [CuratedEntry(header=header, sequence=sequence)
               for header, sequence in read_fasta_records(file_path)]
    logger.info(f"Loaded {len(entries)} curated entries from {file_path}")
    return entries


def compose_library(representatives: Iterable[CandidateSequence],
                    curated: Optional[Iterable[CuratedEntry]] = None) -> PanLibrary:
    """Concatenate representatives and curated entries

    Args:
        representatives: Pool members kept by the reducer
        curated: Curated entries, appended in their original order

    Returns:
        PanLibrary with representative count + curated count entries

    Raises:
        ValidationError: If two entries share an identifier
    """
    library = PanLibrary()
    for candidate in sorted(representatives, key=lambda c: c.id):
        library.entries.append(FinalLibraryEntry.from_candidate(candidate))
    for entry in curated or []:
        library.entries.append(FinalLibraryEntry.from_curated(entry))

    duplicates = library.duplicate_identifiers()
    if duplicates:
        raise ValidationError(
            f"Pan-genome library has {len(duplicates)} colliding identifiers, e.g. {duplicates[0]}",
            {"duplicates": duplicates}
        )

    logger.info(f"Composed pan-genome library: {library.representative_count} representatives, "
                f"{library.curated_count} curated entries")
    return library


def write_library(library: PanLibrary, output_path: str) -> str:
    """Write the library to disk in one atomic step"""
    write_fasta_records(output_path, ((entry.header, entry.sequence) for entry in library))
    logger.info(f"Wrote {len(library)} entries to {output_path}")
    return output_path

#!/usr/bin/env python3
"""
panEDTA: pan-genome transposable element annotation

Builds a non-redundant TE library from the EDTA annotations of many
genomes and re-annotates every genome with it.
"""

__version__ = '0.1.0'
__license__ = 'MIT'

from .exceptions import PanEDTAError
from .error_handlers import handle_exceptions

__all__ = ['PanEDTAError', 'handle_exceptions']

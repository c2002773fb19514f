#!/usr/bin/env python3
"""
Exception hierarchy for the panEDTA pipeline.
All custom exceptions should inherit from PanEDTAError.
"""
from typing import Dict, Any, Optional


class PanEDTAError(Exception):
    """Base exception for all panEDTA-related errors"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        """Initialize with error message and optional details

        Args:
            message: Error message
            details: Optional details dictionary with context
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ConfigError(PanEDTAError):
    """Missing or empty required input, or invalid configuration"""
    pass


class FileOperationError(PanEDTAError):
    """Error during file operations"""
    pass


class ValidationError(PanEDTAError):
    """Data validation error"""
    pass


class PipelineError(PanEDTAError):
    """Error in pipeline processing"""
    pass


class MissingAnnotationError(PipelineError):
    """A genome's annotation artifact is absent when copy counting needs it"""
    pass


class AlignmentDataError(PanEDTAError):
    """Malformed or absent pairwise alignment data"""
    pass


class AnnotationError(PipelineError):
    """Initial per-genome annotation failed"""
    pass


class ReannotationError(PanEDTAError):
    """Re-annotation of a single genome with the pan-genome library failed"""
    pass


class ToolExecutionError(PanEDTAError):
    """An external tool could not be started or exited with an error"""
    pass

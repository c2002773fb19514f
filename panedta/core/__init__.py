#!/usr/bin/env python3
"""
Core services shared across the panEDTA package
"""
from .logging_config import LoggingManager

__all__ = ['LoggingManager']

#!/usr/bin/env python3
"""
Utility modules for the panEDTA pipeline
"""

#!/usr/bin/env python3
"""
Command line interface for panEDTA
"""

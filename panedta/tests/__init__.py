#!/usr/bin/env python3
"""
Tests for the panEDTA package
"""

"""
Test suite for decimal-stats

Contains:
- tests/unit/          : Unit and property-based tests for individual modules
"""

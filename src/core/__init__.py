"""
Core configuration, computation context and decimal math.

This module contains the foundational building blocks of decimal-stats:
pure functions with no I/O and no mutable shared state.
"""

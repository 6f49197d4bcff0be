"""
Domain models and value objects.

Contains the computation context shared by all decimal operations.
"""

from src.core.domain.context import MathContext, get_context

__all__ = [
    "MathContext",
    "get_context",
]

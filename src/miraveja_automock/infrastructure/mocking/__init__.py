"""
Mocking engine module.

Adapts ``unittest.mock`` to the mocking engine boundary used by auto-mock sources.
"""

from .engine import Expectation, UnittestMockEngine

__all__ = [
    "UnittestMockEngine",
    "Expectation",
]

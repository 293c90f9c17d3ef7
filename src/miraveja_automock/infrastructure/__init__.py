"""
Infrastructure layer - External integrations.

This layer contains the ``unittest.mock`` integration and the helpers test
suites call. It depends on both Application and Domain layers.
"""

from . import mocking, testing

__all__ = [
    "mocking",
    "testing",
]

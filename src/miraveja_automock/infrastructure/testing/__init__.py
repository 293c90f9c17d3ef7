"""
Testing utilities module.

Auto-mocking helpers for test suites, wired to the ``unittest.mock`` engine.
"""

from .utilities import (
    AutoMockContainer,
    AutoMockScope,
    arrange,
    assert_all_mocks,
    assert_mocks,
    default_binding,
    default_engine,
    enable_mocking,
    get_mock_source,
    resolve_with_mocks,
)

__all__ = [
    "AutoMockContainer",
    "AutoMockScope",
    "arrange",
    "assert_mocks",
    "assert_all_mocks",
    "default_binding",
    "default_engine",
    "enable_mocking",
    "get_mock_source",
    "resolve_with_mocks",
]

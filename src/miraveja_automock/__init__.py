"""
miraveja-automock: Auto-mocking resolution for a type-hint based DI container.

Unregistered services resolve to ``unittest.mock`` mocks, so a test can build
a real object graph around the system under test while arranging only the
collaborators it cares about.

Public API exports for the miraveja-automock package.
"""

# Application exports
from miraveja_automock.application import AutoMockSource, ContainerBinding, DIContainer

# Domain exports
from miraveja_automock.domain.enums import Lifetime, RequestKind, VerificationMode
from miraveja_automock.domain.exceptions import (
    CircularDependencyError,
    DIException,
    LifetimeError,
    ScopeError,
    UnresolvableError,
    VerificationError,
)
from miraveja_automock.domain.interfaces import IStartable
from miraveja_automock.domain.models import AutoMockSettings

# Infrastructure exports
from miraveja_automock.infrastructure.mocking import UnittestMockEngine
from miraveja_automock.infrastructure.testing import (
    AutoMockContainer,
    AutoMockScope,
    arrange,
    assert_all_mocks,
    assert_mocks,
    enable_mocking,
    get_mock_source,
    resolve_with_mocks,
)

__version__ = "0.1.0"

__all__ = [
    # Container
    "DIContainer",
    "IStartable",
    # Auto-mocking
    "AutoMockSource",
    "ContainerBinding",
    "AutoMockSettings",
    "UnittestMockEngine",
    "AutoMockContainer",
    "AutoMockScope",
    "enable_mocking",
    "get_mock_source",
    "resolve_with_mocks",
    "assert_mocks",
    "assert_all_mocks",
    "arrange",
    # Enums
    "Lifetime",
    "RequestKind",
    "VerificationMode",
    # Exceptions
    "DIException",
    "CircularDependencyError",
    "UnresolvableError",
    "LifetimeError",
    "ScopeError",
    "VerificationError",
]

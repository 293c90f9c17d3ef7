"""
Domain layer - Core business logic and models.

This layer contains the fundamental rules and models for dependency injection
and auto-mocking. It has no dependencies on other layers.
"""

from .enums import Lifetime, RequestKind, VerificationMode
from .exceptions import (
    CircularDependencyError,
    DIException,
    LifetimeError,
    ScopeError,
    UnresolvableError,
    VerificationError,
    type_name,
)
from .interfaces import (
    IContainer,
    ILifetimeManager,
    IMockingEngine,
    IResolutionParticipant,
    IResolutionPipeline,
    IResolver,
    IStartable,
    RegistrationAccessor,
)
from .models import AutoMockSettings, DependencyMetadata, MockHandle, Registration, ServiceRequest

__all__ = [
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
    "type_name",
    # Interfaces
    "IContainer",
    "IResolver",
    "ILifetimeManager",
    "IResolutionParticipant",
    "IResolutionPipeline",
    "IStartable",
    "IMockingEngine",
    "RegistrationAccessor",
    # Models
    "Registration",
    "DependencyMetadata",
    "ServiceRequest",
    "MockHandle",
    "AutoMockSettings",
]

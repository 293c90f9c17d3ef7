"""
Application layer - Use cases and orchestration.

This layer contains the container engine, its resolution pipeline and the
auto-mocking participant. It depends only on the Domain layer.
"""

from .auto_mock_source import AutoMockSource
from .binding import ContainerBinding
from .circular_detector import CircularDependencyDetector
from .concrete_source import ConcreteTypeSource
from .container import DIContainer
from .lifetime_manager import LifetimeManager
from .pipeline import ResolutionPipeline
from .resolver import DependencyResolver

__all__ = [
    "DIContainer",
    "DependencyResolver",
    "LifetimeManager",
    "CircularDependencyDetector",
    "ResolutionPipeline",
    "ConcreteTypeSource",
    "AutoMockSource",
    "ContainerBinding",
]

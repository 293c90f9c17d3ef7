from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Type, TypeVar

from miraveja_automock.domain.enums import VerificationMode

if TYPE_CHECKING:
    from miraveja_automock.domain.models import DependencyMetadata, Registration, ServiceRequest

T = TypeVar("T")

RegistrationAccessor = Callable[[Any], List["Registration"]]


class IContainer(ABC):
    """Abstract interface for dependency injection container operations."""

    @abstractmethod
    def register_singletons(self, dependencies: Dict[Type, Callable[["IContainer"], Any]]) -> None:
        """Register multiple singleton dependencies at once.

        Args:
            dependencies: A dictionary mapping types to their builder functions.
        """

    @abstractmethod
    def register_transients(self, dependencies: Dict[Type, Callable[["IContainer"], Any]]) -> None:
        """Register multiple transient dependencies at once.

        Args:
            dependencies: A dictionary mapping types to their builder functions.
        """

    @abstractmethod
    def register_scoped(self, dependencies: Dict[Type, Callable[["IContainer"], Any]]) -> None:
        """Register multiple scoped dependencies at once.

        Args:
            dependencies: A dictionary mapping types to their builder functions.
        """

    @abstractmethod
    def resolve(self, dependency_type: Type[T]) -> T:
        """Resolve and return an instance of the requested class type.

        Args:
            dependency_type: The type to resolve.
        """

    @abstractmethod
    def create_scope(self) -> "IContainer":
        """Create and return a new scoped container instance."""

    @abstractmethod
    def clear(self) -> None:
        """Clear all registrations and instances from the container."""

    @abstractmethod
    def get_registry_copy(self) -> Dict[Type, "DependencyMetadata"]:
        """Get a copy of the current registry of dependencies."""

    @property
    @abstractmethod
    def pipeline(self) -> "IResolutionPipeline":
        """The resolution pipeline consulted for unregistered services."""


class IResolver(ABC):
    """Abstract interface for dependency resolution operations."""

    @abstractmethod
    def resolve_dependencies(
        self,
        dependency_type: Type,
        container: IContainer,
    ) -> Any:
        """Resolve all constructor dependencies and create instance.

        Args:
            dependency_type: The type to resolve.
            container: The DI container to use for resolving dependencies.

        Returns:
            Instance with all dependencies injected.

        Raises:
            UnresolvableError: If a dependency cannot be resolved.
        """


class ILifetimeManager(ABC):
    """Abstract interface for managing dependency lifetimes."""

    @abstractmethod
    def get_or_create(
        self,
        metadata: "DependencyMetadata",
        factory: Callable[[], Any],
    ) -> Any:
        """Get existing instance or create a new one based on lifetime.

        Args:
            metadata: The dependency metadata containing registration info.
            factory: A callable to create a new instance if needed.
        """

    @abstractmethod
    def clear_cache(self) -> None:
        """Clear any cached instances managed by this lifetime manager."""

    @abstractmethod
    def clear_scoped_cache(self) -> None:
        """Clear only the scoped instances cache."""


class IResolutionParticipant(ABC):
    """A pluggable strategy consulted when no registration satisfies a request."""

    @abstractmethod
    def registrations_for(
        self,
        request: "ServiceRequest",
        registration_accessor: RegistrationAccessor,
    ) -> List["Registration"]:
        """Offer registrations able to satisfy the request.

        Args:
            request: Descriptor of the requested service.
            registration_accessor: Returns the explicit registrations for another service token.

        Returns:
            Zero or more registrations. An empty list declines the request.
        """


class IResolutionPipeline(ABC):
    """Ordered set of participants shared by a root container and its scopes."""

    @abstractmethod
    def add_participant(self, participant: IResolutionParticipant) -> None:
        """Attach a participant after the ones already attached."""

    @property
    @abstractmethod
    def participants(self) -> List[IResolutionParticipant]:
        """Snapshot of the attached participants, in consultation order."""

    @abstractmethod
    def registrations_for(
        self,
        request: "ServiceRequest",
        registration_accessor: RegistrationAccessor,
    ) -> List["Registration"]:
        """Ask each participant in turn and return the first non-empty answer."""


class IStartable(ABC):
    """A component started eagerly when its container is started."""

    @abstractmethod
    def start(self) -> None:
        """Start the component."""


class IMockingEngine(ABC):
    """Boundary to the mocking framework that creates and verifies mocks."""

    @abstractmethod
    def create(self, service_type: Type[T]) -> T:
        """Create a mock standing in for ``service_type``."""

    @abstractmethod
    def verify(self, instance: Any, mode: VerificationMode) -> None:
        """Verify expectations on a mock created by this engine.

        Raises:
            VerificationError: If any expectation checked by ``mode`` is unmet.
        """

import inspect
import logging
from typing import Any, Callable, Dict, List, Optional, Type, TypeVar, get_origin

from miraveja_automock.application.circular_detector import CircularDependencyDetector
from miraveja_automock.application.lifetime_manager import LifetimeManager
from miraveja_automock.application.pipeline import ResolutionPipeline
from miraveja_automock.application.resolver import DependencyResolver
from miraveja_automock.domain import (
    DependencyMetadata,
    IContainer,
    ILifetimeManager,
    IResolutionPipeline,
    IResolver,
    IStartable,
    Lifetime,
    LifetimeError,
    Registration,
    RequestKind,
    ServiceRequest,
    UnresolvableError,
    type_name,
)

T = TypeVar("T")

logger = logging.getLogger(__name__)


class DIContainer(IContainer):
    """Main dependency injection container.

    Orchestrates registration and resolution of dependencies using domain objects.
    Supports singleton, transient, and scoped lifetimes with auto-wiring, and a
    resolution pipeline of participants consulted for unregistered services.

    Attributes:
        _registry: Dictionary mapping dependency types to their metadata.
        _resolver: Component responsible for auto-wiring dependencies.
        _lifetime_manager: Component managing instance lifetimes.
        _circular_detector: Component detecting circular dependencies.
        _pipeline: Participants shared with every scope of this container.
        _parent: The container this scope was created from, if any.
    """

    def __init__(self, parent: Optional["DIContainer"] = None) -> None:
        """Initialize the DI container.

        Args:
            parent: Container to create a scope of. Scopes inherit a copy of the parent's
                registrations and share its pipeline, singleton cache and cycle detection.
        """
        self._parent = parent
        self._resolver: IResolver = DependencyResolver()
        if parent is None:
            self._registry: Dict[Any, DependencyMetadata] = {}
            self._lifetime_manager: ILifetimeManager = LifetimeManager()
            self._circular_detector = CircularDependencyDetector()
            self._pipeline: IResolutionPipeline = ResolutionPipeline()
        else:
            self._registry = parent.get_registry_copy()
            self._lifetime_manager = LifetimeManager(parent._lifetime_manager.get_singleton_cache())
            self._circular_detector = parent._circular_detector
            self._pipeline = parent.pipeline

    @property
    def pipeline(self) -> IResolutionPipeline:
        return self._pipeline

    @property
    def parent(self) -> Optional["DIContainer"]:
        return self._parent

    def _register(
        self,
        dependency_type: Type,
        builder: Callable[[IContainer], Any],
        lifetime: Lifetime,
    ) -> None:
        """Internal registration method with validation.

        Raises:
            LifetimeError: If already registered with a different lifetime.
        """
        if dependency_type in self._registry:
            existing = self._registry[dependency_type]
            if existing.registration.lifetime != lifetime:
                raise LifetimeError(
                    f"Dependency {type_name(dependency_type)} is already registered "
                    f"with lifetime {existing.registration.lifetime.value}, "
                    f"cannot re-register with {lifetime.value}"
                )
            return

        registration = Registration(
            dependency_type=dependency_type,
            builder=builder,
            lifetime=lifetime,
        )
        self._registry[dependency_type] = DependencyMetadata(registration=registration)

    def register_singletons(self, dependencies: Dict[Type, Callable[[IContainer], Any]]) -> None:
        """Register multiple singleton dependencies at once.

        Singleton dependencies are created once and shared by this container and its scopes.

        Args:
            dependencies: Dictionary mapping dependency types to builder functions.
                         Each builder receives the container and returns an instance.

        Raises:
            LifetimeError: If a dependency is already registered with a different lifetime.

        Example:
            >>> container.register_singletons({
            ...     DatabaseConfig: lambda c: DatabaseConfig.from_env(),
            ...     DatabaseConnection: lambda c: DatabaseConnection(c.resolve(DatabaseConfig)),
            ... })
        """
        for dependency_type, builder in dependencies.items():
            self._register(dependency_type, builder, Lifetime.SINGLETON)

    def register_transients(self, dependencies: Dict[Type, Callable[[IContainer], Any]]) -> None:
        """Register multiple transient dependencies at once.

        Transient dependencies are created fresh on each resolution.

        Raises:
            LifetimeError: If a dependency is already registered with a different lifetime.
        """
        for dependency_type, builder in dependencies.items():
            self._register(dependency_type, builder, Lifetime.TRANSIENT)

    def register_scoped(self, dependencies: Dict[Type, Callable[[IContainer], Any]]) -> None:
        """Register multiple scoped dependencies at once.

        Scoped dependencies are created once per scope. The root container counts
        as a scope of its own.

        Raises:
            LifetimeError: If a dependency is already registered with a different lifetime.

        Example:
            >>> container.register_scoped({RequestContext: lambda c: RequestContext()})
            >>> with container.create_scope() as scope:
            ...     assert scope.resolve(RequestContext) is scope.resolve(RequestContext)
        """
        for dependency_type, builder in dependencies.items():
            self._register(dependency_type, builder, Lifetime.SCOPED)

    def resolve(self, dependency_type: type[T]) -> T:
        """Resolve and return an instance of the specified type.

        Resolution order:
        1. Explicit registrations.
        2. Pipeline participants, in attachment order.
        3. Collections of every registered implementation for ``Sequence[T]``-like requests.
        4. Constructor auto-wiring for concrete classes.

        Raises:
            UnresolvableError: If the dependency cannot be resolved.
            CircularDependencyError: If a circular dependency is detected.

        Example:
            >>> user_service = container.resolve(UserService)
        """
        with self._circular_detector.track(dependency_type):
            if dependency_type in self._registry:
                metadata = self._registry[dependency_type]
                instance = self._activate(metadata.registration)
                metadata.resolution_count += 1
                return instance

            request = ServiceRequest.describe(dependency_type)

            registrations = self._pipeline.registrations_for(request, self._registrations_for_token)
            if registrations:
                return self._activate(registrations[0])

            if request.is_collection:
                return self._resolve_collection(request)

            if request.kind in (RequestKind.PLAIN_TYPE, RequestKind.EAGER_STARTABLE):
                return self._resolver.resolve_dependencies(request.service_class, self)

            raise UnresolvableError(dependency_type, "No registration or pipeline participant can supply it.")

    def _activate(self, registration: Registration) -> Any:
        return self._lifetime_manager.get_or_create(
            DependencyMetadata(registration=registration),
            lambda: registration.builder(self),
        )

    def _registrations_for_token(self, token: Any) -> List[Registration]:
        metadata = self._registry.get(token)
        return [metadata.registration] if metadata else []

    def _resolve_collection(self, request: ServiceRequest) -> Any:
        """Resolve every registered type implementing the element type, in registration order."""
        element_type = request.element_type
        items = [self.resolve(registered) for registered in list(self._registry) if _implements(registered, element_type)]
        logger.debug("Resolved %d item(s) for %s", len(items), type_name(request.token))
        if get_origin(request.token) is tuple:
            return tuple(items)
        return items

    def start(self) -> None:
        """Resolve and start every registered ``IStartable`` component.

        Example:
            >>> container.register_singletons({MessagePump: lambda c: MessagePump()})
            >>> container.start()  # MessagePump.start() has been called
        """
        for dependency_type in list(self._registry):
            if inspect.isclass(dependency_type) and issubclass(dependency_type, IStartable):
                logger.debug("Starting %s", type_name(dependency_type))
                self.resolve(dependency_type).start()

    def get_registry_copy(self) -> Dict[Any, DependencyMetadata]:
        """Get a copy of the registry for scope inheritance."""
        return self._registry.copy()

    def set_registry(self, registry: Dict[Any, DependencyMetadata]) -> None:
        """Replace the registry, e.g. with one inherited from another container."""
        self._registry = registry

    def create_scope(self) -> "DIContainer":
        """Create a child container for scoped lifetime.

        Scoped containers inherit parent registrations, share the parent's
        pipeline and singletons, and keep their own scoped instances.

        Example:
            >>> with container.create_scope() as scoped:
            ...     # Same instance within this scope
            ...     ctx1 = scoped.resolve(RequestContext)
            ...     ctx2 = scoped.resolve(RequestContext)
            ...     assert ctx1 is ctx2
        """
        return DIContainer(parent=self)

    def clear(self) -> None:
        """Clear all registrations and cached instances.

        Attached pipeline participants are kept. A scope only drops its own
        scoped instances, leaving the singletons and the resolution stack it
        shares with its parent.
        """
        self._registry.clear()
        if self._parent is None:
            self._lifetime_manager.clear_cache()
            self._circular_detector.clear()
        else:
            self._lifetime_manager.clear_scoped_cache()

    def __enter__(self) -> "DIContainer":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> bool:
        """Release this container's scoped instances."""
        self._lifetime_manager.clear_scoped_cache()
        return False


def _implements(candidate: Any, element_type: Any) -> bool:
    if candidate is element_type:
        return True
    if not (inspect.isclass(candidate) and inspect.isclass(element_type)):
        return False
    try:
        return issubclass(candidate, element_type)
    except TypeError:
        # Non runtime-checkable protocols refuse issubclass
        return False

from typing import Any, Callable, Dict, Optional

from miraveja_automock.domain import (
    DependencyMetadata,
    DIException,
    ILifetimeManager,
    Lifetime,
    UnresolvableError,
)


class LifetimeManager(ILifetimeManager):
    """Manages instance lifetimes for singleton, transient, and scoped dependencies.

    A root container owns the singleton cache; every scope created from it
    shares that cache and keeps a scoped cache of its own. The root container
    is itself a scope, so scoped registrations resolved from it are cached too.

    Attributes:
        _singleton_cache: Cache for singleton instances, shared with child scopes.
        _scoped_cache: Cache for scoped instances of this scope only.
    """

    def __init__(self, parent_singleton_cache: Optional[Dict[Any, Any]] = None) -> None:
        """Initialize the lifetime manager.

        Args:
            parent_singleton_cache: Singleton cache of the parent container, for scopes.
        """
        self._singleton_cache: Dict[Any, Any] = parent_singleton_cache if parent_singleton_cache is not None else {}
        self._scoped_cache: Dict[Any, Any] = {}

    def get_or_create(self, metadata: DependencyMetadata, factory: Callable[[], Any]) -> Any:
        """Get existing instance or create new one based on lifetime.

        Args:
            metadata: Registration metadata containing lifetime info.
            factory: Function to create new instance if needed.

        Returns:
            Instance according to lifetime rules:
            - Singleton: cached once for the root container and all its scopes
            - Scoped: cached once per scope
            - Transient: always a new instance

        Raises:
            UnresolvableError: If the factory fails with a non-DI error.
        """
        lifetime = metadata.registration.lifetime
        dependency_type = metadata.registration.dependency_type

        if lifetime == Lifetime.SINGLETON:
            return self._get_or_create_cached(self._singleton_cache, dependency_type, factory)

        if lifetime == Lifetime.SCOPED:
            return self._get_or_create_cached(self._scoped_cache, dependency_type, factory)

        return self._create(dependency_type, factory)

    def _get_or_create_cached(self, cache: Dict[Any, Any], dependency_type: Any, factory: Callable[[], Any]) -> Any:
        if dependency_type not in cache:
            cache[dependency_type] = self._create(dependency_type, factory)
        return cache[dependency_type]

    @staticmethod
    def _create(dependency_type: Any, factory: Callable[[], Any]) -> Any:
        try:
            return factory()
        except DIException:
            raise
        except Exception as e:
            raise UnresolvableError(dependency_type, f"Failed to create instance: {str(e)}") from e

    def clear_cache(self) -> None:
        """Clear all cached instances (singletons and scoped)."""
        self._singleton_cache.clear()
        self._scoped_cache.clear()

    def clear_scoped_cache(self) -> None:
        """Clear only the scoped instance cache.

        Called when a scope ends.
        """
        self._scoped_cache.clear()

    def get_singleton_cache(self) -> Dict[Any, Any]:
        """Get reference to singleton cache for scope inheritance."""
        return self._singleton_cache

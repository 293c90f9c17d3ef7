import inspect
import logging
from typing import Any, Dict, Type, get_type_hints

from miraveja_automock.domain import DIException, IContainer, IResolver, UnresolvableError, type_name

logger = logging.getLogger(__name__)


class DependencyResolver(IResolver):
    """Builds instances through their constructors, resolving parameters by type hint.

    Parameters with defaults and ``*args``/``**kwargs`` are left alone. Every
    other parameter must be annotated and is resolved through the container,
    so auto-mocking participants get a chance at each of them.
    """

    def resolve_dependencies(self, dependency_type: Type, container: IContainer) -> Any:
        """Resolve all constructor dependencies and create instance.

        Args:
            dependency_type: The type to instantiate.
            container: The container to resolve dependencies from.

        Returns:
            Instance with all dependencies injected.

        Raises:
            UnresolvableError: If the type is abstract, a parameter lacks a type hint,
                or the constructor itself fails.
            DIException: Errors raised while resolving a parameter propagate unchanged.

        Example:
            >>> class UserService:
            ...     def __init__(self, db: DatabaseConnection, logger: Logger):
            ...         self.db = db
            ...         self.logger = logger
            >>>
            >>> resolver = DependencyResolver()
            >>> instance = resolver.resolve_dependencies(UserService, container)
        """
        if not inspect.isclass(dependency_type):
            raise UnresolvableError(dependency_type, "Only classes can be constructed.")

        if inspect.isabstract(dependency_type):
            raise UnresolvableError(dependency_type, "Abstract classes cannot be instantiated.")

        kwargs = self._resolve_parameters(dependency_type, container)
        logger.debug("Constructing %s with %s", type_name(dependency_type), sorted(kwargs))

        try:
            return dependency_type(**kwargs)
        except DIException:
            raise
        except Exception as e:
            raise UnresolvableError(
                dependency_type,
                f"Failed to auto-wire constructor for {type_name(dependency_type)}: {e}",
            ) from e

    @staticmethod
    def _resolve_parameters(dependency_type: Type, container: IContainer) -> Dict[str, Any]:
        try:
            signature = inspect.signature(dependency_type.__init__)
            type_hints = get_type_hints(dependency_type.__init__)
        except (NameError, TypeError, ValueError) as e:
            raise UnresolvableError(dependency_type, f"Cannot inspect constructor: {e}") from e

        kwargs: Dict[str, Any] = {}
        for param_name, param in signature.parameters.items():
            if param_name == "self":
                continue

            if param.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD):
                continue

            if param.default is not inspect.Parameter.empty:
                continue

            if param_name not in type_hints:
                raise UnresolvableError(
                    dependency_type,
                    f"Parameter '{param_name}' lacks type hint and has no default value.",
                )

            kwargs[param_name] = container.resolve(type_hints[param_name])

        return kwargs

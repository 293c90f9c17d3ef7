from typing import Any, List, Optional


def type_name(cls: Any) -> str:
    """Readable name for a class or a typing construct such as ``list[Plugin]``."""
    name = getattr(cls, "__name__", None)
    if name is None or getattr(cls, "__args__", None):
        return repr(cls).replace("typing.", "")
    return name


class DIException(Exception):
    """Base exception for DI-related errors."""


class CircularDependencyError(DIException):
    """Raised when a circular dependency is detected.

    Attributes:
        dependency_chain: List of types involved in the circular dependency.
    """

    def __init__(self, dependency_chain: List[Any]) -> None:
        self.dependency_chain = dependency_chain
        message = f"Circular dependency detected: {' -> '.join([type_name(cls) for cls in dependency_chain])}"
        super().__init__(message)


class UnresolvableError(DIException):
    """Raised when a dependency cannot be resolved.

    This occurs when:
    - No registration exists and no pipeline participant accepts the request.
    - The requested class cannot be constructed (abstract, no usable constructor).
    - Constructor parameters lack type hints.
    - A nested dependency fails to resolve.

    Attributes:
        cls: The type that could not be resolved.
        reason: Optional reason for the failure.
    """

    def __init__(self, cls: Any, reason: Optional[str] = None) -> None:
        self.cls = cls
        self.reason = reason
        message = f"Cannot resolve dependency for type: {type_name(cls)}"
        if reason:
            message += f". Reason: {reason}"
        super().__init__(message)


class LifetimeError(DIException):
    """Raised for invalid lifetime configurations.

    This occurs when:
    - Registering the same type with conflicting lifetimes.
    - Invalid lifetime value provided.
    """


class ScopeError(DIException):
    """Raised for invalid scope operations.

    This occurs when:
    - Creating a scope from a container that is not a DIContainer.
    - Attaching a participant to a pipeline it already belongs to.
    """


class VerificationError(DIException, AssertionError):
    """Raised when one or more mocks have unmet or mismatched expectations.

    Subclasses ``AssertionError`` so test runners report it as a failed assertion.

    Attributes:
        failures: One entry per failing mock expectation.
    """

    def __init__(self, failures: List[str]) -> None:
        self.failures = list(failures)
        lines = "\n".join(f"  - {failure}" for failure in self.failures)
        super().__init__(f"Mock verification failed ({len(self.failures)} failure(s)):\n{lines}")

"""Application layer - Circular dependency detection."""

import threading
from contextlib import contextmanager
from typing import Any, Iterator, List

from miraveja_automock.domain import CircularDependencyError


class CircularDependencyDetector:
    """Detects circular dependencies during resolution.

    Each thread tracks its own stack of tokens being resolved. A token that
    shows up twice on the stack is a cycle. Root containers and their scopes
    share one detector so a cycle crossing a scope boundary is still caught.

    Attributes:
        _local: Thread-local storage for resolution stacks.
    """

    def __init__(self) -> None:
        self._local = threading.local()

    def _get_stack(self) -> List[Any]:
        if not hasattr(self._local, "stack"):
            self._local.stack = []
        return self._local.stack

    @contextmanager
    def track(self, dependency_type: Any) -> Iterator[None]:
        """Keep ``dependency_type`` on the stack for the duration of the block.

        Raises:
            CircularDependencyError: If the type is already being resolved.

        Example:
            >>> with detector.track(ServiceA):
            ...     with detector.track(ServiceA):  # Raises CircularDependencyError
            ...         pass
        """
        stack = self._get_stack()
        if dependency_type in stack:
            cycle = stack[stack.index(dependency_type) :] + [dependency_type]
            raise CircularDependencyError(cycle)

        stack.append(dependency_type)
        try:
            yield
        finally:
            if stack:
                stack.pop()

    @property
    def depth(self) -> int:
        """Number of resolutions in progress on the current thread."""
        return len(self._get_stack())

    def clear(self) -> None:
        """Clear the current thread's resolution stack."""
        self._get_stack().clear()

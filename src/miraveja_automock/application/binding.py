"""Application layer - One auto-mock source per container."""

import logging
import threading
import weakref
from typing import Callable, Optional, Type, TypeVar

from miraveja_automock.application.auto_mock_source import AutoMockSource
from miraveja_automock.domain import AutoMockSettings, IContainer, IMockingEngine, type_name

T = TypeVar("T")
C = TypeVar("C", bound=IContainer)

logger = logging.getLogger(__name__)


class ContainerBinding:
    """Attaches at most one ``AutoMockSource`` to each container.

    Sources are memoized per resolution pipeline. A root container and all
    scopes created from it share one pipeline, so they share one source and
    one record of created mocks.

    Attributes:
        _engine_factory: Builds the mocking engine for a new source.
        _settings: Settings handed to every source this binding creates.
        _sources: Source attached to each pipeline, dropped with the pipeline.
        _lock: Serializes attachment.
    """

    def __init__(
        self,
        engine_factory: Callable[[], IMockingEngine],
        settings: Optional[AutoMockSettings] = None,
    ) -> None:
        self._engine_factory = engine_factory
        self._settings = settings or AutoMockSettings()
        self._sources: "weakref.WeakKeyDictionary" = weakref.WeakKeyDictionary()
        self._lock = threading.Lock()

    def ensure_attached(self, container: IContainer) -> AutoMockSource:
        """Return the container's auto-mock source, attaching one on first use.

        A source that was attached to the pipeline by hand is adopted rather
        than duplicated.
        """
        pipeline = container.pipeline
        with self._lock:
            source = self._sources.get(pipeline)
            if source is not None:
                return source

            source = next((p for p in pipeline.participants if isinstance(p, AutoMockSource)), None)
            if source is None:
                source = AutoMockSource(self._engine_factory(), self._settings)
                pipeline.add_participant(source)
                logger.debug("Attached auto-mock source to %s", type(container).__name__)

            self._sources[pipeline] = source
            return source

    def enable_mocking(self, container: C) -> C:
        """Turn ``container`` into an auto-mocking container and return it.

        Example:
            >>> container = binding.enable_mocking(DIContainer())
            >>> logger = container.resolve(ILogger)  # a mock
        """
        self.ensure_attached(container)
        return container

    def resolve_with_mocks(self, container: IContainer, dependency_type: Type[T]) -> T:
        """Build ``dependency_type`` for real, with every missing dependency mocked.

        ``dependency_type`` needs no registration of its own.

        Raises:
            UnresolvableError: If the type cannot be constructed.
        """
        source = self.ensure_attached(container)
        logger.debug("Resolving %s with mocks", type_name(dependency_type))
        with source.resolving(dependency_type):
            return container.resolve(dependency_type)

    def assert_mocks(self, container: IContainer) -> None:
        """Verify explicit expectations on every mock the container handed out.

        Raises:
            VerificationError: If any expectation is unmet.
        """
        self.ensure_attached(container).assert_mocks()

    def assert_all_mocks(self, container: IContainer) -> None:
        """Verify all expectations on every mock the container handed out.

        Raises:
            VerificationError: If any expectation is unmet.
        """
        self.ensure_attached(container).assert_all_mocks()

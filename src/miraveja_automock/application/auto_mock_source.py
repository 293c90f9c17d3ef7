"""Application layer - Auto-mocking resolution pipeline participant."""

import logging
import threading
from contextlib import contextmanager
from typing import Any, Iterator, List, Optional

from miraveja_automock.application.concrete_source import ConcreteTypeSource
from miraveja_automock.domain import (
    AutoMockSettings,
    IContainer,
    IMockingEngine,
    IResolutionParticipant,
    Lifetime,
    MockHandle,
    Registration,
    RegistrationAccessor,
    RequestKind,
    ServiceRequest,
    VerificationError,
    VerificationMode,
    type_name,
)

logger = logging.getLogger(__name__)


class AutoMockSource(IResolutionParticipant):
    """Supplies mocks for services the container cannot otherwise provide.

    Plain type requests are answered with a scoped registration whose builder
    asks the mocking engine for a mock and records it. The type currently
    being resolved as the root under test is built for real instead, through
    its constructor, so only its collaborators end up mocked.

    Collection requests and ``IStartable`` components are declined and left
    to the container.

    Attributes:
        _engine: Creates and verifies mocks.
        _settings: Verification behavior.
        _concretes: Real construction for the root under test.
        _local: Per-thread root under test.
        _created_mocks: Every mock handed out, in creation order.
        _mocks_lock: Guards appends to ``_created_mocks``.
    """

    def __init__(self, engine: IMockingEngine, settings: Optional[AutoMockSettings] = None) -> None:
        self._engine = engine
        self._settings = settings or AutoMockSettings()
        self._concretes = ConcreteTypeSource()
        self._local = threading.local()
        self._created_mocks: List[MockHandle] = []
        self._mocks_lock = threading.Lock()

    @property
    def root_under_test(self) -> Optional[Any]:
        """The type resolved for real on the current thread, if any."""
        return getattr(self._local, "root", None)

    @property
    def created_mocks(self) -> List[MockHandle]:
        """Snapshot of every mock created so far, oldest first."""
        with self._mocks_lock:
            return list(self._created_mocks)

    @contextmanager
    def resolving(self, root: Any) -> Iterator["AutoMockSource"]:
        """Treat ``root`` as the root under test for the duration of the block.

        The previous root is restored on exit, whether the block returns or raises.

        Example:
            >>> with source.resolving(Greeter):
            ...     greeter = container.resolve(Greeter)
        """
        previous = self.root_under_test
        self._local.root = root
        try:
            yield self
        finally:
            self._local.root = previous

    def registrations_for(
        self,
        request: ServiceRequest,
        registration_accessor: RegistrationAccessor,
    ) -> List[Registration]:
        """Decide how a request without an explicit registration is satisfied.

        Returns:
            An empty list for collections, startables and non-class tokens; the
            concrete-construction registration for the root under test; otherwise
            exactly one scoped registration producing a mock.
        """
        if request.kind != RequestKind.PLAIN_TYPE:
            return []

        service_type = request.token
        if service_type == self.root_under_test:
            logger.debug("Constructing root under test %s", type_name(service_type))
            return self._concretes.registrations_for(request, registration_accessor)

        def create_mock(container: IContainer) -> Any:
            return self._create_mock(service_type)

        return [
            Registration(
                dependency_type=service_type,
                builder=create_mock,
                lifetime=Lifetime.SCOPED,
            )
        ]

    def _create_mock(self, service_type: Any) -> Any:
        mock = self._engine.create(service_type)
        with self._mocks_lock:
            self._created_mocks.append(MockHandle(instance=mock, service_type=service_type, engine=self._engine))
            count = len(self._created_mocks)
        logger.debug("Created mock #%d for %s", count, type_name(service_type))
        return mock

    def assert_mocks(self) -> None:
        """Verify the explicit expectations of every mock created so far.

        Raises:
            VerificationError: If any mock has an unmet explicit expectation.
        """
        self._verify(VerificationMode.EXPLICIT)

    def assert_all_mocks(self) -> None:
        """Verify every arranged expectation of every mock created so far.

        Raises:
            VerificationError: If any mock has an unmet expectation.
        """
        self._verify(VerificationMode.ALL)

    def _verify(self, mode: VerificationMode) -> None:
        failures: List[str] = []
        for handle in self.created_mocks:
            try:
                handle.verify(mode)
            except VerificationError as e:
                if not self._settings.aggregate_failures:
                    raise
                failures.extend(e.failures)

        if failures:
            raise VerificationError(failures)

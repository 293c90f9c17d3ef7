"""Unit tests for testing utilities."""

from abc import ABC, abstractmethod

import pytest

from miraveja_automock.application import AutoMockSource, ContainerBinding, DIContainer
from miraveja_automock.domain import VerificationError
from miraveja_automock.infrastructure.mocking import UnittestMockEngine
from miraveja_automock.infrastructure.testing import (
    AutoMockContainer,
    AutoMockScope,
    arrange,
    assert_all_mocks,
    assert_mocks,
    default_binding,
    enable_mocking,
    get_mock_source,
    resolve_with_mocks,
)


class IClock(ABC):
    @abstractmethod
    def now(self) -> int: ...


class IAudit(ABC):
    @abstractmethod
    def record(self, event: str) -> None: ...


class Session:
    def __init__(self, clock: IClock, audit: IAudit):
        self.clock = clock
        self.audit = audit

    def open(self) -> int:
        started = self.clock.now()
        self.audit.record(f"opened at {started}")
        return started


class TestModuleHelpers:
    """Test cases for the module-level helpers."""

    def test_enable_mocking_attaches_default_source(self):
        """Test that enable_mocking attaches through the default binding."""
        container = DIContainer()

        assert enable_mocking(container) is container
        assert get_mock_source(container) is default_binding.ensure_attached(container)
        assert isinstance(get_mock_source(container), AutoMockSource)

    def test_resolve_with_mocks_and_assert(self):
        """Test the arrange, act, assert flow with module helpers."""
        container = DIContainer()
        clock = enable_mocking(container).resolve(IClock)
        arrange(clock, "now", returns=1700, occurs=1)
        arrange(container.resolve(IAudit), "record", "opened at 1700")

        with pytest.raises(VerificationError):
            assert_mocks(container)

        session = resolve_with_mocks(container, Session)
        assert session.open() == 1700

        assert_mocks(container)
        assert_all_mocks(container)

    def test_assert_all_mocks_catches_unused_arrangement(self):
        """Test that arrangements without occurs are checked by assert_all_mocks only."""
        container = enable_mocking(DIContainer())
        arrange(container.resolve(IAudit), "record", "never")

        assert_mocks(container)
        with pytest.raises(VerificationError):
            assert_all_mocks(container)


class TestAutoMockContainer:
    """Test cases for AutoMockContainer."""

    def test_container_is_auto_mocking(self):
        """Test that unregistered services resolve to mocks right away."""
        container = AutoMockContainer()

        assert isinstance(container, DIContainer)
        assert isinstance(container.resolve(IClock), IClock)
        assert len(container.mocks) == 1

    def test_inherits_parent_registrations(self):
        """Test that parent registrations are used instead of mocks."""
        parent = DIContainer()

        class FixedClock(IClock):
            def now(self) -> int:
                return 7

        parent.register_singletons({IClock: lambda c: FixedClock()})
        container = AutoMockContainer(parent)

        session = container.resolve_with_mocks(Session)

        assert session.open() == 7
        assert [handle.service_type for handle in container.mocks] == [IAudit]
        assert parent.pipeline.participants == []

    def test_assertions(self):
        """Test assert_mocks and assert_all_mocks on the container."""
        container = AutoMockContainer()
        arrange(container.resolve(IClock), "now", returns=5)

        container.assert_mocks()
        with pytest.raises(VerificationError):
            container.assert_all_mocks()

        container.resolve_with_mocks(Session).open()
        container.assert_all_mocks()

    def test_custom_binding(self):
        """Test that a container can use its own binding and engine."""
        engine = UnittestMockEngine()
        binding = ContainerBinding(lambda: engine)
        container = AutoMockContainer(binding=binding)

        clock = container.resolve(IClock)
        engine.arrange(clock, "now", returns=3)

        assert container.source is binding.ensure_attached(container)
        assert clock.now() == 3

    def test_context_manager_clears(self):
        """Test that leaving the block drops registrations."""
        with AutoMockContainer() as container:
            container.register_singletons({IClock: lambda c: None})

        assert container._registry == {}


class TestAutoMockScope:
    """Test cases for AutoMockScope."""

    def test_scope_gets_its_own_mocks(self):
        """Test that scoped mocks differ from the parent's but are recorded on one source."""
        container = DIContainer()
        root_clock = enable_mocking(container).resolve(IClock)

        with AutoMockScope(container) as scope:
            scoped_clock = scope.resolve(IClock)
            assert scoped_clock is not root_clock
            assert scope.resolve(IClock) is scoped_clock

        handles = get_mock_source(container).created_mocks
        assert [handle.instance for handle in handles] == [root_clock, scoped_clock]

    def test_scope_attaches_mocking_to_parent(self):
        """Test that entering a scope enables mocking on the parent."""
        container = DIContainer()

        with AutoMockScope(container) as scope:
            session = resolve_with_mocks(scope, Session)
            assert session.clock is scope.resolve(IClock)

        assert len(container.pipeline.participants) == 1

    def test_scope_released_on_exit(self):
        """Test that the scope's instances are dropped when the block ends."""
        container = DIContainer()
        mock_scope = AutoMockScope(container)

        with mock_scope as scope:
            scope.resolve(IClock)

        assert mock_scope._scoped_container is None
        assert scope._lifetime_manager._scoped_cache == {}

    def test_scope_exit_keeps_outer_resolution_stack(self):
        """Test that leaving a scope inside an outer resolution keeps the shared stack."""
        container = enable_mocking(DIContainer())
        depths = []

        def build_session(c):
            with AutoMockScope(c) as scope:
                scope.resolve(IClock)
            depths.append(c._circular_detector.depth)
            return Session(c.resolve(IClock), c.resolve(IAudit))

        container.register_transients({Session: build_session})

        assert isinstance(container.resolve(Session), Session)
        assert depths == [1]

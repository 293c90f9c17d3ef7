"""Unit tests for domain models."""

import collections.abc
from typing import Any, Generic, Iterable, List, Optional, Sequence, Tuple, TypeVar

import pytest
from pydantic import ValidationError

from miraveja_automock.domain.enums import Lifetime, RequestKind, VerificationMode
from miraveja_automock.domain.interfaces import IMockingEngine, IStartable
from miraveja_automock.domain.models import (
    AutoMockSettings,
    DependencyMetadata,
    MockHandle,
    Registration,
    ServiceRequest,
)

T = TypeVar("T")


class Plugin:
    pass


class Pump(IStartable):
    def start(self) -> None:
        pass


class IRepository(Generic[T]):
    def get(self, key: str) -> T: ...


class RecordingEngine(IMockingEngine):
    def __init__(self):
        self.verified = []

    def create(self, service_type):
        return object()

    def verify(self, instance, mode):
        self.verified.append((instance, mode))


class TestRegistration:
    """Test cases for the Registration model."""

    def test_registration_creation_with_valid_data(self):
        """Test creating a Registration with valid data."""
        builder = lambda c: Plugin()
        registration = Registration(dependency_type=Plugin, builder=builder, lifetime=Lifetime.SCOPED)

        assert registration.dependency_type is Plugin
        assert registration.builder == builder
        assert registration.lifetime == Lifetime.SCOPED

    def test_registration_is_frozen(self):
        """Test that Registration is immutable (frozen)."""
        registration = Registration(dependency_type=Plugin, builder=lambda c: Plugin(), lifetime=Lifetime.SINGLETON)

        with pytest.raises(ValidationError):
            registration.lifetime = Lifetime.TRANSIENT

    def test_registration_rejects_unknown_lifetime(self):
        """Test that the lifetime is validated."""
        with pytest.raises(ValidationError):
            Registration(dependency_type=Plugin, builder=lambda c: Plugin(), lifetime="forever")


class TestDependencyMetadata:
    """Test cases for the DependencyMetadata model."""

    def test_resolution_count_defaults_to_zero(self):
        """Test that metadata starts unresolved."""
        registration = Registration(dependency_type=Plugin, builder=lambda c: Plugin(), lifetime=Lifetime.TRANSIENT)
        metadata = DependencyMetadata(registration=registration)

        assert metadata.resolution_count == 0
        metadata.resolution_count += 1
        assert metadata.resolution_count == 1


class TestServiceRequestDescribe:
    """Test cases for ServiceRequest.describe."""

    def test_plain_class(self):
        """Test that a class is a plain type request."""
        request = ServiceRequest.describe(Plugin)

        assert request.kind == RequestKind.PLAIN_TYPE
        assert request.token is Plugin
        assert request.element_type is None
        assert not request.is_collection

    def test_parameterized_generic_is_plain_type(self):
        """Test that a parameterized generic service is a plain type request."""
        request = ServiceRequest.describe(IRepository[Plugin])

        assert request.kind == RequestKind.PLAIN_TYPE
        assert request.token == IRepository[Plugin]
        assert request.service_class is IRepository
        assert not request.is_collection

    def test_service_class_of_plain_and_opaque_requests(self):
        """Test that service_class is the class itself, or None for opaque tokens."""
        assert ServiceRequest.describe(Plugin).service_class is Plugin
        assert ServiceRequest.describe("plugin").service_class is None

    def test_startable_class(self):
        """Test that IStartable implementations are eager startables."""
        assert ServiceRequest.describe(Pump).kind == RequestKind.EAGER_STARTABLE

    @pytest.mark.parametrize("token", [list[Plugin], List[Plugin], tuple[Plugin, ...], Tuple[Plugin, ...]])
    def test_array_requests(self, token):
        """Test that lists and homogeneous tuples are array requests."""
        request = ServiceRequest.describe(token)

        assert request.kind == RequestKind.ARRAY_OF
        assert request.element_type is Plugin
        assert request.is_collection

    @pytest.mark.parametrize(
        "token",
        [Sequence[Plugin], Iterable[Plugin], collections.abc.Collection[Plugin], collections.abc.Sequence[Plugin]],
    )
    def test_sequence_requests(self, token):
        """Test that abstract collections are sequence requests."""
        request = ServiceRequest.describe(token)

        assert request.kind == RequestKind.SEQUENCE_OF
        assert request.element_type is Plugin
        assert request.is_collection

    @pytest.mark.parametrize("token", ["plugin", Optional[Plugin], Plugin | None, Tuple[Plugin, int], Any, List, type[Plugin]])
    def test_opaque_requests(self, token):
        """Test that non-class tokens are opaque."""
        assert ServiceRequest.describe(token).kind == RequestKind.OPAQUE

    def test_request_is_frozen(self):
        """Test that ServiceRequest is immutable."""
        request = ServiceRequest.describe(Plugin)

        with pytest.raises(ValidationError):
            request.kind = RequestKind.OPAQUE


class TestMockHandle:
    """Test cases for the MockHandle model."""

    def test_verify_delegates_to_engine(self):
        """Test that a handle verifies its instance through its engine."""
        engine = RecordingEngine()
        instance = object()
        handle = MockHandle(instance=instance, service_type=Plugin, engine=engine)

        handle.verify(VerificationMode.ALL)

        assert engine.verified == [(instance, VerificationMode.ALL)]

    def test_engine_must_implement_interface(self):
        """Test that the engine is validated."""
        with pytest.raises(ValidationError):
            MockHandle(instance=object(), service_type=Plugin, engine=object())


class TestAutoMockSettings:
    """Test cases for AutoMockSettings."""

    def test_defaults(self):
        """Test default settings."""
        settings = AutoMockSettings()

        assert settings.strict_spec is False
        assert settings.aggregate_failures is True

    def test_settings_are_frozen(self):
        """Test that settings are immutable."""
        settings = AutoMockSettings(strict_spec=True)

        with pytest.raises(ValidationError):
            settings.strict_spec = False

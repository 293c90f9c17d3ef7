import collections.abc
import inspect
import types
import typing
from typing import Any, Callable, Optional, get_args, get_origin

from pydantic import BaseModel, ConfigDict, Field

from miraveja_automock.domain.enums import Lifetime, RequestKind, VerificationMode
from miraveja_automock.domain.interfaces import IContainer, IMockingEngine, IStartable

_SEQUENCE_ORIGINS = (
    collections.abc.Iterable,
    collections.abc.Collection,
    collections.abc.Sequence,
    collections.abc.MutableSequence,
)
_ARRAY_ORIGINS = (list, tuple)
_NON_SERVICE_ORIGINS = (type, types.UnionType) + _ARRAY_ORIGINS + _SEQUENCE_ORIGINS


def _is_parameterized_service(origin: Any) -> bool:
    return inspect.isclass(origin) and origin not in _NON_SERVICE_ORIGINS


class Registration(BaseModel):
    """Value object representing a dependency registration.

    Attributes:
        dependency_type: The type being registered.
        builder: Factory function that receives container and returns instance.
        lifetime: How long the instance should live.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    dependency_type: Any = Field(..., description="The dependency type to be registered.")
    builder: Callable[[IContainer], Any] = Field(
        ..., description="The builder function to create an instance of the class."
    )
    lifetime: Lifetime = Field(..., description="The lifetime of the registered dependency.")


class DependencyMetadata(BaseModel):
    """Tracks registration details and resolution statistics.

    Attributes:
        registration: The original registration configuration.
        resolution_count: Number of times this dependency has been resolved.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    registration: Registration = Field(..., description="The registration details of the dependency.")
    resolution_count: int = Field(
        default=0,
        description="Number of times this dependency has been resolved.",
    )


class ServiceRequest(BaseModel):
    """Tagged descriptor of a requested service.

    Built once at the container boundary so pipeline participants dispatch on
    ``kind`` instead of inspecting the token themselves.

    Attributes:
        token: The token passed to ``resolve``.
        kind: Shape of the request.
        element_type: Element type for ``SEQUENCE_OF`` and ``ARRAY_OF`` requests.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    token: Any = Field(..., description="The requested service token.")
    kind: RequestKind = Field(..., description="The shape of the request.")
    element_type: Optional[Any] = Field(
        default=None,
        description="Element type of a collection request.",
    )

    @classmethod
    def describe(cls, token: Any) -> "ServiceRequest":
        """Classify a service token.

        Example:
            >>> ServiceRequest.describe(list[Plugin]).kind
            <RequestKind.ARRAY_OF: 'array_of'>
        """
        origin = get_origin(token)
        args = get_args(token)

        if origin in _ARRAY_ORIGINS:
            if origin is tuple:
                # Only the homogeneous form tuple[T, ...] is a collection request
                if len(args) == 2 and args[1] is Ellipsis:
                    return cls(token=token, kind=RequestKind.ARRAY_OF, element_type=args[0])
                return cls(token=token, kind=RequestKind.OPAQUE)
            if len(args) == 1:
                return cls(token=token, kind=RequestKind.ARRAY_OF, element_type=args[0])

        if origin in _SEQUENCE_ORIGINS and len(args) == 1:
            return cls(token=token, kind=RequestKind.SEQUENCE_OF, element_type=args[0])

        if origin is None and inspect.isclass(token) and token is not typing.Any:
            service_class = token
        elif _is_parameterized_service(origin):
            # IRepository[User] is a service in its own right
            service_class = origin
        else:
            return cls(token=token, kind=RequestKind.OPAQUE)

        if issubclass(service_class, IStartable):
            return cls(token=token, kind=RequestKind.EAGER_STARTABLE)
        return cls(token=token, kind=RequestKind.PLAIN_TYPE)

    @property
    def service_class(self) -> Optional[type]:
        """The class behind the token, unwrapping parameterized generics."""
        if self.kind not in (RequestKind.PLAIN_TYPE, RequestKind.EAGER_STARTABLE):
            return None
        return get_origin(self.token) or self.token

    @property
    def is_collection(self) -> bool:
        return self.kind in (RequestKind.SEQUENCE_OF, RequestKind.ARRAY_OF)


class MockHandle(BaseModel):
    """A mock instance together with the engine able to verify it.

    Attributes:
        instance: The mock object handed out to the container.
        service_type: The type the mock stands in for.
        engine: The mocking engine that created the mock.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    instance: Any = Field(..., description="The mock instance.")
    service_type: Any = Field(..., description="The mocked service type or generic alias.")
    engine: IMockingEngine = Field(..., description="The engine that created the mock.")

    def verify(self, mode: VerificationMode) -> None:
        """Verify this mock's expectations through its engine.

        Raises:
            VerificationError: If any expectation checked by ``mode`` is unmet.
        """
        self.engine.verify(self.instance, mode)


class AutoMockSettings(BaseModel):
    """Behavior switches for auto-mocking.

    Attributes:
        strict_spec: Create mocks with ``spec_set`` so unknown attributes cannot be assigned.
        aggregate_failures: Verify every mock before raising, reporting all failures together.
    """

    model_config = ConfigDict(frozen=True)

    strict_spec: bool = Field(default=False, description="Forbid setting attributes missing from the spec.")
    aggregate_failures: bool = Field(
        default=True,
        description="Collect failures across all mocks instead of stopping at the first.",
    )

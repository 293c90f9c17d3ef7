from enum import Enum


class Lifetime(str, Enum):
    """Defines the lifetime of a dependency instance.

    Attributes:
        SINGLETON: Single instance shared across the root container and its scopes.
        TRANSIENT: New instance created on each resolution.
        SCOPED: Single instance per scope. The root container acts as its own scope.
    """

    TRANSIENT = "transient"
    SCOPED = "scoped"
    SINGLETON = "singleton"

    def __str__(self) -> str:
        return self.value


class RequestKind(str, Enum):
    """Shape of a service request as seen by resolution pipeline participants.

    Attributes:
        PLAIN_TYPE: A class requested directly.
        SEQUENCE_OF: An abstract homogeneous collection, e.g. ``Sequence[T]``.
        ARRAY_OF: A concrete homogeneous collection, e.g. ``list[T]`` or ``tuple[T, ...]``.
        EAGER_STARTABLE: A class implementing ``IStartable``.
        OPAQUE: Anything else (string keys, unions, ``Optional[...]``).
    """

    PLAIN_TYPE = "plain_type"
    SEQUENCE_OF = "sequence_of"
    ARRAY_OF = "array_of"
    EAGER_STARTABLE = "eager_startable"
    OPAQUE = "opaque"

    def __str__(self) -> str:
        return self.value


class VerificationMode(str, Enum):
    """Which expectations a mocking engine checks when verifying a mock.

    Attributes:
        EXPLICIT: Only expectations declared with an occurrence constraint.
        ALL: Every arranged expectation, including ones that were only expected to be observed.
    """

    EXPLICIT = "explicit"
    ALL = "all"

    def __str__(self) -> str:
        return self.value

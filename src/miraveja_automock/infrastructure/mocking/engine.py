import inspect
import logging
import weakref
from typing import Any, Dict, FrozenSet, List, Optional, Tuple, Type, TypeVar, get_origin
from unittest.mock import DEFAULT, MagicMock, PropertyMock, call

from pydantic import BaseModel, ConfigDict, Field

from miraveja_automock.domain import (
    AutoMockSettings,
    IMockingEngine,
    VerificationError,
    VerificationMode,
    type_name,
)

T = TypeVar("T")

logger = logging.getLogger(__name__)


class Expectation(BaseModel):
    """An arrangement made on a mock, checked later by ``verify``.

    Attributes:
        attribute: Name of the method or property arranged.
        args: Positional arguments the call must match.
        kwargs: Keyword arguments the call must match.
        returns: Value returned by matching calls.
        occurs: Exact number of matching calls required, if any.
        is_property: Whether ``attribute`` is a property on the mocked type.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    attribute: str = Field(..., description="The arranged method or property.")
    args: Tuple[Any, ...] = Field(default=(), description="Expected positional arguments.")
    kwargs: Dict[str, Any] = Field(default_factory=dict, description="Expected keyword arguments.")
    returns: Any = Field(default=None, description="Value returned by matching calls.")
    occurs: Optional[int] = Field(default=None, ge=0, description="Required number of matching calls.")
    is_property: bool = Field(default=False, description="Whether the attribute is a property.")

    @property
    def expected_call(self) -> Any:
        # Property reads are recorded by PropertyMock as call()
        return call(*self.args, **self.kwargs)

    def describe(self, service_type: Any) -> str:
        target = f"{type_name(service_type)}.{self.attribute}"
        if self.is_property:
            return target
        arguments = [repr(arg) for arg in self.args] + [f"{key}={value!r}" for key, value in self.kwargs.items()]
        return f"{target}({', '.join(arguments)})"


class _MockRecord:
    def __init__(self, service_type: Any, spec_class: Any, annotated: FrozenSet[str]) -> None:
        self.service_type = service_type
        self.spec_class = spec_class
        self.annotated = annotated
        self.expectations: List[Expectation] = []

    def is_property(self, attribute: str) -> bool:
        if attribute in self.annotated:
            return True
        return isinstance(inspect.getattr_static(self.spec_class, attribute, None), property)


def _annotation_only_members(spec_class: Any) -> FrozenSet[str]:
    """Names declared only as annotations, e.g. ``message: str`` on a Protocol.

    ``dir()`` does not list them, so a plain ``spec`` mock would reject them.
    """
    names = set()
    for klass in getattr(spec_class, "__mro__", ()):
        if klass is object:
            continue
        try:
            names.update(inspect.get_annotations(klass))
        except NameError:
            continue
    return frozenset(name for name in names - set(dir(spec_class)) if not name.startswith("__"))


class UnittestMockEngine(IMockingEngine):
    """Mocking engine built on ``unittest.mock``.

    Mocks are ``MagicMock`` objects specced on the requested type, so they pass
    ``isinstance`` checks and reject attributes the type does not have.
    Expectations arranged through :meth:`arrange` are what :meth:`verify`
    checks; plain ``assert_called_with`` style assertions keep working on the
    mocks as usual.

    Attributes:
        _settings: Controls ``spec`` versus ``spec_set`` mocks.
        _records: Mocked type and expectations per mock, dropped with the mock.
    """

    def __init__(self, settings: Optional[AutoMockSettings] = None) -> None:
        self._settings = settings or AutoMockSettings()
        self._records: "weakref.WeakKeyDictionary[Any, _MockRecord]" = weakref.WeakKeyDictionary()

    def create(self, service_type: Type[T]) -> T:
        # IRepository[User] is specced on IRepository
        spec_class = get_origin(service_type) or service_type
        if self._settings.strict_spec:
            mock = MagicMock(spec_set=spec_class)
        else:
            mock = MagicMock(spec=spec_class)

        annotated = _annotation_only_members(spec_class)
        for attribute in annotated:
            self._property_mock(mock, attribute, create=True)

        self._records[mock] = _MockRecord(service_type, spec_class, annotated)
        return mock

    def arrange(
        self,
        instance: Any,
        attribute: str,
        *args: Any,
        returns: Any = None,
        occurs: Optional[int] = None,
        **kwargs: Any,
    ) -> Expectation:
        """Arrange a method call or property read on a mock.

        Calls matching ``args``/``kwargs`` (``unittest.mock.ANY`` is accepted)
        return ``returns``. With ``occurs`` set, the expectation is explicit and
        checked by every verification mode; otherwise only ``VerificationMode.ALL``
        requires it to have happened at least once.

        Raises:
            ValueError: If ``instance`` was not created by this engine.
            AttributeError: If the mocked type has no such attribute.

        Example:
            >>> engine.arrange(counter, "next", returns=5)
            >>> engine.arrange(logger, "log", "5: yay", occurs=1)
        """
        record = self._record_for(instance)
        is_property = record.is_property(attribute)
        expectation = Expectation(
            attribute=attribute,
            args=args,
            kwargs=kwargs,
            returns=returns,
            occurs=occurs,
            is_property=is_property,
        )

        if is_property:
            if args or kwargs:
                raise ValueError(f"Property {attribute!r} cannot be arranged with arguments.")
            self._property_mock(instance, attribute, create=True).return_value = returns
        else:
            getattr(instance, attribute).side_effect = self._dispatcher(record, attribute)

        record.expectations.append(expectation)
        logger.debug("Arranged %s", expectation.describe(record.service_type))
        return expectation

    def verify(self, instance: Any, mode: VerificationMode) -> None:
        record = self._record_for(instance)
        failures: List[str] = []

        for expectation in record.expectations:
            observed = self._count_calls(instance, expectation)
            description = expectation.describe(record.service_type)
            if expectation.occurs is not None:
                if observed != expectation.occurs:
                    failures.append(
                        f"{description} expected to occur {expectation.occurs} time(s), occurred {observed} time(s)"
                    )
            elif mode == VerificationMode.ALL and observed == 0:
                failures.append(f"{description} was arranged but never called")

        if failures:
            raise VerificationError(failures)

    def _record_for(self, instance: Any) -> _MockRecord:
        try:
            return self._records[instance]
        except (KeyError, TypeError):
            raise ValueError(f"{instance!r} was not created by this mocking engine.") from None

    @staticmethod
    def _dispatcher(record: _MockRecord, attribute: str):
        def side_effect(*args: Any, **kwargs: Any) -> Any:
            actual = call(*args, **kwargs)
            for expectation in reversed(record.expectations):
                if expectation.attribute == attribute and expectation.expected_call == actual:
                    return expectation.returns
            return DEFAULT

        return side_effect

    @staticmethod
    def _property_mock(instance: Any, attribute: str, create: bool = False) -> Optional[PropertyMock]:
        # Each mock has its own class, so a PropertyMock set there only affects this mock
        mock_class = type(instance)
        existing = vars(mock_class).get(attribute)
        if isinstance(existing, PropertyMock) or not create:
            return existing
        prop = PropertyMock()
        setattr(mock_class, attribute, prop)
        return prop

    def _count_calls(self, instance: Any, expectation: Expectation) -> int:
        if expectation.is_property:
            target = self._property_mock(instance, expectation.attribute)
            if target is None:
                return 0
        else:
            target = getattr(instance, expectation.attribute)
        return sum(1 for recorded in target.call_args_list if recorded == expectation.expected_call)

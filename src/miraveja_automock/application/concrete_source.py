"""Application layer - Construction of unregistered concrete classes."""

import inspect
from typing import List, Optional

from miraveja_automock.application.resolver import DependencyResolver
from miraveja_automock.domain import (
    IResolutionParticipant,
    IResolver,
    Lifetime,
    Registration,
    RegistrationAccessor,
    RequestKind,
    ServiceRequest,
)


class ConcreteTypeSource(IResolutionParticipant):
    """Offers a transient registration for any concrete class without one.

    The registration builds the class through its real constructor, with every
    parameter resolved through the requesting container.

    Attributes:
        _resolver: Constructor auto-wiring strategy.
    """

    def __init__(self, resolver: Optional[IResolver] = None) -> None:
        self._resolver = resolver or DependencyResolver()

    def registrations_for(
        self,
        request: ServiceRequest,
        registration_accessor: RegistrationAccessor,
    ) -> List[Registration]:
        if request.kind not in (RequestKind.PLAIN_TYPE, RequestKind.EAGER_STARTABLE):
            return []

        service_type = request.token
        service_class = request.service_class
        if inspect.isabstract(service_class) or registration_accessor(service_type):
            return []

        resolver = self._resolver
        return [
            Registration(
                dependency_type=service_type,
                builder=lambda container: resolver.resolve_dependencies(service_class, container),
                lifetime=Lifetime.TRANSIENT,
            )
        ]

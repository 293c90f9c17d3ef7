"""Application layer - Resolution pipeline shared by a container and its scopes."""

import threading
from typing import List

from miraveja_automock.domain import (
    IResolutionParticipant,
    IResolutionPipeline,
    Registration,
    RegistrationAccessor,
    ScopeError,
    ServiceRequest,
)


class ResolutionPipeline(IResolutionPipeline):
    """Ordered participants consulted when a request has no explicit registration.

    Participants are asked in attachment order; the first one offering any
    registrations answers the request.

    Attributes:
        _participants: Attached participants, in consultation order.
        _lock: Guards attachment against concurrent callers.
    """

    def __init__(self) -> None:
        self._participants: List[IResolutionParticipant] = []
        self._lock = threading.Lock()

    def add_participant(self, participant: IResolutionParticipant) -> None:
        """Attach a participant.

        Raises:
            ScopeError: If the participant is already attached to this pipeline.
        """
        with self._lock:
            if any(existing is participant for existing in self._participants):
                raise ScopeError(f"{type(participant).__name__} is already attached to this pipeline.")
            self._participants.append(participant)

    @property
    def participants(self) -> List[IResolutionParticipant]:
        with self._lock:
            return list(self._participants)

    def registrations_for(
        self,
        request: ServiceRequest,
        registration_accessor: RegistrationAccessor,
    ) -> List[Registration]:
        for participant in self.participants:
            registrations = list(participant.registrations_for(request, registration_accessor))
            if registrations:
                return registrations
        return []

from abc import ABC, abstractmethod

from portal.domain.entities.booking import Booking
from portal.domain.entities.extension_session import ExtensionSession


class ExtensionSessionStorePort(ABC):
    @abstractmethod
    def create(self, booking: Booking, session: ExtensionSession) -> str:
        """Store a new extension session. Returns its id."""
        raise NotImplementedError

    @abstractmethod
    def get(self, session_id: str) -> tuple[Booking, ExtensionSession] | None:
        raise NotImplementedError

    @abstractmethod
    def save(self, session_id: str, session: ExtensionSession) -> None:
        raise NotImplementedError

    @abstractmethod
    def delete(self, session_id: str) -> None:
        """Drop the session; results of requests still in flight are discarded."""
        raise NotImplementedError

"""Abstract base classes for connectors and the sessions they open."""

from abc import ABC, abstractmethod

from core.models import CollectedMetrics, ConnectionMode, Credential, ProbeSettings, Target


class Session(ABC):
    """A transient remote session, used for one collection pass."""

    mode: ConnectionMode

    def __init__(self, target: Target):
        self.target = target
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @abstractmethod
    def collect(self, settings: ProbeSettings) -> CollectedMetrics:
        """Gather the database and drive metrics from the target.

        Raises:
            ProbeError: The target answered but the data was missing or unusable.
            Exception: Any transport error, with its message untouched.
        """
        ...

    @abstractmethod
    def _release(self) -> None:
        """Tear down the underlying transport."""
        ...

    def close(self) -> None:
        """Release the session. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        self._release()


class Connector(ABC):
    """Base class both connectivity modes must inherit from."""

    name: str = ""
    mode: ConnectionMode
    default_port: int = 0

    @abstractmethod
    def open(self, target: Target, credential: Credential, settings: ProbeSettings) -> Session:
        """Open a session to the target. No retry; transport errors propagate as-is."""
        ...

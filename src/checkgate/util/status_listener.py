from abc import ABC, abstractmethod
from typing import Protocol, runtime_checkable

from checkgate.model.enum.check_status_enum import CheckStatus


@runtime_checkable
class StatusChangeListener(Protocol):
    def on_status_changed(self, status: CheckStatus) -> None: ...


class StatusChangeSource(ABC):
    """Stream of check statuses that listeners can attach to and detach from."""

    @abstractmethod
    def add_status_listener(self, listener: StatusChangeListener) -> None: ...

    @abstractmethod
    def remove_status_listener(self, listener: StatusChangeListener) -> None: ...

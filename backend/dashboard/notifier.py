"""Change notification sinks for the dashboard poller.

The poller only decides *when* data changed; a Notifier decides what the
user sees. A push-based source can drive the same Notifier later.
"""

from abc import ABC, abstractmethod
from typing import Callable


class Notifier(ABC):
    @abstractmethod
    def on_new_data(self, record: dict) -> None:
        """Called once per genuine change of the relay record."""
        ...


class CallbackNotifier(Notifier):
    """Adapts a plain callable."""

    def __init__(self, callback: Callable[[dict], None]):
        self._callback = callback

    def on_new_data(self, record: dict) -> None:
        self._callback(record)


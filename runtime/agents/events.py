"""Typed event channel between the session engine and its consumers.

The rendering layer, notification layer and text-to-speech boundary are not
part of this package. They subscribe to an EventChannel and receive plain
dataclass events instead of being called back directly.
"""

import logging
from dataclasses import dataclass
from typing import Callable, List, Union

from core.alerts.models import Alert, AlertAction
from core.interpreter.models import View

from ..models.session_models import ParkingSession


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NavigationRequested:
    view: View


@dataclass(frozen=True)
class ResponseReady:
    """Plain-text reply for the text-to-speech boundary."""

    text: str


@dataclass(frozen=True)
class AlertRaised:
    alert: Alert


@dataclass(frozen=True)
class AlertResolved:
    alert: Alert
    action: AlertAction


@dataclass(frozen=True)
class SessionStarted:
    session: ParkingSession


@dataclass(frozen=True)
class SessionEnded:
    session: ParkingSession


Event = Union[
    NavigationRequested,
    ResponseReady,
    AlertRaised,
    AlertResolved,
    SessionStarted,
    SessionEnded,
]

Listener = Callable[[Event], None]


class EventChannel:
    """Synchronous fan-out of events to subscribed listeners."""

    def __init__(self) -> None:
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener and return a function that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def publish(self, event: Event) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                # Listener errors are logged, not propagated.
                logger.exception(
                    "[EVENTS] Listener %r failed on %s", listener, type(event).__name__
                )

"""AlertStore: bounded, newest-first history of alerts for the active session.

The store is purely in-memory. It keeps at most `capacity` alerts; adding
a new alert pushes it to the front and drops the oldest ones past the cap.

State changes go through `transition()`, which enforces the alert state
machine: only a PENDING alert can move, and only once.
"""

from typing import Iterable, List, Optional

from core.alerts.models import ALERT_TRANSITIONS, Alert, AlertAction, AlertState
from exceptions.exceptions import InvalidActionException


class AlertStore:
    """In-memory alert history.

    Parameters
    ----------
    capacity:
        Maximum number of alerts retained. Older alerts are evicted first.
    """

    def __init__(self, capacity: int = 5) -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be at least 1, got {capacity}")
        self.capacity = capacity
        # Newest first.
        self._alerts: List[Alert] = []

    def __len__(self) -> int:
        return len(self._alerts)

    def add(self, alert: Alert) -> None:
        """Prepend one alert, evicting the oldest past capacity."""
        self._alerts.insert(0, alert)
        del self._alerts[self.capacity:]

    def extend(self, alerts: Iterable[Alert]) -> None:
        """Prepend alerts in the order they were created."""
        for alert in alerts:
            self.add(alert)

    def clear(self) -> None:
        self._alerts.clear()

    def all(self) -> List[Alert]:
        """Return a snapshot of the alerts, newest first."""
        return list(self._alerts)

    def get(self, alert_id: str) -> Optional[Alert]:
        for alert in self._alerts:
            if alert.id == alert_id:
                return alert
        return None

    def latest(self) -> Optional[Alert]:
        return self._alerts[0] if self._alerts else None

    def current_pending(self) -> Optional[Alert]:
        """Return the most recently created alert still awaiting action."""
        for alert in self._alerts:
            if alert.state is AlertState.PENDING:
                return alert
        return None

    def transition(self, alert_id: str, action: AlertAction) -> Alert:
        """Apply a user action to a pending alert.

        Raises
        ------
        InvalidActionException
            If the alert is not in the store or is already terminal. The
            alert is left untouched.
        """
        alert = self.get(alert_id)
        if alert is None:
            raise InvalidActionException(alert_id, action.value)
        if alert.state is not AlertState.PENDING:
            raise InvalidActionException(
                alert_id,
                action.value,
                reason=f"Alert is already {alert.state.value}.",
            )

        alert.state = ALERT_TRANSITIONS[action]
        return alert

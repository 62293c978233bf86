"""
Alert models for the session alert engine.

These describe:
- an Alert raised against a parking session
- AlertKind / AlertSeverity / AlertState enums
- AlertAction, the user responses that move an alert out of PENDING
"""

from datetime import datetime, timezone
from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, Field


class AlertKind(str, Enum):
    MOVEMENT = "movement"
    TAMPER = "tamper"
    EMERGENCY = "emergency"


class AlertSeverity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class AlertState(str, Enum):
    PENDING = "pending"
    ACKNOWLEDGED = "acknowledged"
    ESCALATED = "escalated"
    DISMISSED = "dismissed"


class AlertAction(str, Enum):
    CONFIRM = "confirm"
    EMERGENCY = "emergency"
    DISMISS = "dismiss"


# PENDING is the only state an action can leave; every target is terminal.
ALERT_TRANSITIONS = {
    AlertAction.CONFIRM: AlertState.ACKNOWLEDGED,
    AlertAction.EMERGENCY: AlertState.ESCALATED,
    AlertAction.DISMISS: AlertState.DISMISSED,
}

TERMINAL_STATES = frozenset(ALERT_TRANSITIONS.values())


def new_alert_id() -> str:
    return f"alert_{uuid4().hex}"


class Alert(BaseModel):
    id: str = Field(default_factory=new_alert_id)
    session_id: str
    kind: AlertKind
    severity: AlertSeverity
    message: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    state: AlertState = AlertState.PENDING

    @property
    def is_terminal(self) -> bool:
        return self.state in TERMINAL_STATES

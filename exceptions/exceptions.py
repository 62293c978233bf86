"""
Custom exceptions for the ParkGuard session engine and command interpreter.

These exceptions are intentionally simple and descriptive.
They are used across:

  - core/interpreter/
  - runtime/controller/ and runtime/agents/
  - runtime/api/

Placing them at the project root (exceptions/) avoids circular imports
and keeps exception types consistent across modules. None of them is
fatal: callers report the failure and carry on.
"""


class InvalidActionException(Exception):
    """
    Raised when an alert action (confirm, emergency, dismiss) targets an
    alert that does not exist in the store or is already in a terminal
    state. The alert is never mutated when this is raised.
    """

    def __init__(self, alert_id, action, reason=None):
        self.alert_id = alert_id
        self.action = action
        self.reason = reason or "Alert not found."
        msg = f"Cannot apply action '{action}' to alert {alert_id}: {self.reason}"
        super().__init__(msg)


class NoActiveSessionException(Exception):
    """
    Raised when an operation needs an active parking session and there is
    none. Alert ticks never raise this; a tick without a session is a no-op.
    """

    def __init__(self, operation):
        self.operation = operation
        super().__init__(f"No active parking session for operation: {operation}")


class UnsupportedCapabilityException(Exception):
    """
    Raised at the speech boundary when speech capture or synthesis is not
    available. The command interpreter itself keeps working on text input.
    """

    def __init__(self, capability):
        self.capability = capability
        super().__init__(f"Capability not supported: {capability}")


class SlotNotFoundException(Exception):
    """
    Raised when a booking references a slot id unknown to the catalog.
    """

    def __init__(self, slot_id):
        self.slot_id = slot_id
        super().__init__(f"Parking slot not found: {slot_id}")


class SlotCatalogFormatException(Exception):
    """
    Raised when a slot catalog file cannot be parsed into slot records.

    Example:
        [{"id": "p1", "name": "Central Mall Parking", ...}]  ← expected
        {"slots": "not-a-list"}                                ← raises this exception
    """

    def __init__(self, path, details=None):
        self.path = path
        self.details = details or "Invalid slot catalog format."
        msg = f"Slot catalog error in {path}\nDetails: {self.details}"
        super().__init__(msg)

"""
alerts/alert_generator.py

Probabilistic security-event generator for an active parking session.

Every tick evaluates three independent Bernoulli trials, one per AlertKind,
in a fixed order (movement, tamper, emergency). Any subset may fire in the
same tick. Severity is attached to the kind, never drawn, so an alert's
meaning is fully determined by which trial fired.

Randomness comes from a `RandomSource`: anything with a `random()` method
returning a float in [0, 1). `random.Random(seed)` satisfies it; tests pass
a scripted source to force firing or non-firing.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
import random
from typing import Dict, List, Mapping, Optional, Protocol, Tuple

from .models import Alert, AlertKind, AlertSeverity, AlertState


class RandomSource(Protocol):
    def random(self) -> float:
        ...


@dataclass(frozen=True)
class AlertScenario:
    """One kind of security event the generator can raise."""

    kind: AlertKind
    severity: AlertSeverity
    message: str


SCENARIOS: Tuple[AlertScenario, ...] = (
    AlertScenario(
        AlertKind.MOVEMENT,
        AlertSeverity.MEDIUM,
        "Unauthorized vehicle movement detected",
    ),
    AlertScenario(
        AlertKind.TAMPER,
        AlertSeverity.HIGH,
        "Vehicle tampering attempt detected",
    ),
    AlertScenario(
        AlertKind.EMERGENCY,
        AlertSeverity.HIGH,
        "Emergency button pressed in parking area",
    ),
)

DEFAULT_PROBABILITIES: Dict[AlertKind, float] = {
    AlertKind.MOVEMENT: 0.02,
    AlertKind.TAMPER: 0.01,
    AlertKind.EMERGENCY: 0.005,
}


def parse_probabilities(raw: Mapping) -> Dict[AlertKind, float]:
    """Normalize a {kind: probability} mapping keyed by AlertKind or its value.

    Kinds missing from `raw` keep their default probability.

    Raises
    ------
    ValueError
        If a probability is outside [0, 1] or a key is not a known kind.
    """
    probabilities = dict(DEFAULT_PROBABILITIES)
    for key, value in raw.items():
        kind = AlertKind(key)
        value = float(value)
        if not 0.0 <= value <= 1.0:
            raise ValueError(
                f"Probability for {kind.value} must be between 0 and 1, got {value}"
            )
        probabilities[kind] = value
    return probabilities


def confirmation_message(vehicle_tag: str, slot_name: str) -> str:
    return f"Vehicle {vehicle_tag} successfully parked in {slot_name}"


class AlertGenerator:
    """Proposes candidate alerts for one tick of an active session.

    Parameters
    ----------
    probabilities:
        Per-kind occurrence probability for a single tick. Keys may be
        AlertKind members or their string values.
    rng:
        Random source; defaults to an unseeded `random.Random`.
    """

    def __init__(
        self,
        probabilities: Optional[Mapping] = None,
        rng: Optional[RandomSource] = None,
    ) -> None:
        self.probabilities = parse_probabilities(probabilities or {})
        self.rng: RandomSource = rng if rng is not None else random.Random()

    def evaluate(
        self,
        session_id: str,
        vehicle_tag: str,
        slot_name: str,
        now: Optional[datetime] = None,
    ) -> List[Alert]:
        """Run one tick's trials and return the alerts that fired, in order."""
        now = now or datetime.now(timezone.utc)
        fired: List[Alert] = []
        for scenario in SCENARIOS:
            if self.rng.random() < self.probabilities[scenario.kind]:
                fired.append(
                    Alert(
                        session_id=session_id,
                        kind=scenario.kind,
                        severity=scenario.severity,
                        message=(
                            f"{scenario.message} for vehicle {vehicle_tag} "
                            f"in {slot_name}"
                        ),
                        created_at=now,
                        state=AlertState.PENDING,
                    )
                )
        return fired

    def confirmation(
        self,
        session_id: str,
        vehicle_tag: str,
        slot_name: str,
        now: Optional[datetime] = None,
    ) -> Alert:
        """Build the low-severity "session started" alert.

        It is created already ACKNOWLEDGED so a fresh booking never opens
        the alert-action prompt.
        """
        return Alert(
            id=f"confirm_{session_id}",
            session_id=session_id,
            kind=AlertKind.MOVEMENT,
            severity=AlertSeverity.LOW,
            message=confirmation_message(vehicle_tag, slot_name),
            created_at=now or datetime.now(timezone.utc),
            state=AlertState.ACKNOWLEDGED,
        )

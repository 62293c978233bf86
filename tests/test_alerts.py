"""Tests for the alert generator, alert store and alert state machine."""

from datetime import datetime, timezone

import pytest

from core.alerts.alert_generator import (
    DEFAULT_PROBABILITIES,
    AlertGenerator,
    parse_probabilities,
)
from core.alerts.models import (
    Alert,
    AlertAction,
    AlertKind,
    AlertSeverity,
    AlertState,
)
from exceptions.exceptions import InvalidActionException
from runtime.store.alert_store import AlertStore

from conftest import ALWAYS, NEVER, FixedRandom, ScriptedRandom


NOW = datetime(2026, 3, 2, 14, 0, tzinfo=timezone.utc)


def _evaluate(generator: AlertGenerator):
    return generator.evaluate(
        session_id="s1",
        vehicle_tag="ABC-1234",
        slot_name="Central Mall Parking",
        now=NOW,
    )


def _alert(alert_id: str, state: AlertState = AlertState.PENDING) -> Alert:
    return Alert(
        id=alert_id,
        session_id="s1",
        kind=AlertKind.MOVEMENT,
        severity=AlertSeverity.MEDIUM,
        message="test",
        state=state,
    )


# ══════════════════════════════════════════════════════════════════════
# AlertGenerator
# ══════════════════════════════════════════════════════════════════════


class TestAlertGenerator:
    def test_all_kinds_fire_in_fixed_order(self) -> None:
        alerts = _evaluate(AlertGenerator(ALWAYS, rng=FixedRandom(0.0)))

        assert [a.kind for a in alerts] == [
            AlertKind.MOVEMENT,
            AlertKind.TAMPER,
            AlertKind.EMERGENCY,
        ]
        assert [a.severity for a in alerts] == [
            AlertSeverity.MEDIUM,
            AlertSeverity.HIGH,
            AlertSeverity.HIGH,
        ]
        assert all(a.state is AlertState.PENDING for a in alerts)
        assert all(a.session_id == "s1" for a in alerts)
        assert all(a.created_at == NOW for a in alerts)
        assert len({a.id for a in alerts}) == 3

    def test_nothing_fires_at_zero_probability(self) -> None:
        assert _evaluate(AlertGenerator(NEVER, rng=FixedRandom(0.0))) == []

    def test_trials_are_independent(self) -> None:
        # One draw per kind: movement fires, tamper does not, emergency fires.
        rng = ScriptedRandom([0.001, 0.9, 0.001])
        alerts = _evaluate(AlertGenerator(rng=rng))
        assert [a.kind for a in alerts] == [AlertKind.MOVEMENT, AlertKind.EMERGENCY]

    def test_draw_equal_to_probability_does_not_fire(self) -> None:
        rng = FixedRandom(DEFAULT_PROBABILITIES[AlertKind.MOVEMENT])
        alerts = _evaluate(AlertGenerator({"tamper": 0.0, "emergency": 0.0}, rng=rng))
        assert alerts == []

    def test_message_names_vehicle_and_slot(self) -> None:
        alerts = _evaluate(AlertGenerator(ALWAYS, rng=FixedRandom(0.0)))
        assert alerts[0].message == (
            "Unauthorized vehicle movement detected for vehicle ABC-1234 "
            "in Central Mall Parking"
        )
        assert alerts[1].message.startswith("Vehicle tampering attempt detected")
        assert alerts[2].message.startswith("Emergency button pressed in parking area")

    def test_default_probabilities_reflect_rarity(self) -> None:
        generator = AlertGenerator()
        p = generator.probabilities
        assert p[AlertKind.EMERGENCY] < p[AlertKind.TAMPER] < p[AlertKind.MOVEMENT]

    def test_confirmation_is_low_and_acknowledged(self) -> None:
        alert = AlertGenerator().confirmation("s1", "ABC-1234", "City Center Plaza", now=NOW)
        assert alert.severity is AlertSeverity.LOW
        assert alert.state is AlertState.ACKNOWLEDGED
        assert alert.message == "Vehicle ABC-1234 successfully parked in City Center Plaza"


class TestParseProbabilities:
    def test_accepts_enum_and_string_keys(self) -> None:
        parsed = parse_probabilities({AlertKind.TAMPER: 0.5, "emergency": "0.25"})
        assert parsed[AlertKind.TAMPER] == 0.5
        assert parsed[AlertKind.EMERGENCY] == 0.25
        assert parsed[AlertKind.MOVEMENT] == DEFAULT_PROBABILITIES[AlertKind.MOVEMENT]

    @pytest.mark.parametrize("value", [-0.1, 1.5])
    def test_rejects_out_of_range(self, value: float) -> None:
        with pytest.raises(ValueError):
            parse_probabilities({"movement": value})

    def test_rejects_unknown_kind(self) -> None:
        with pytest.raises(ValueError):
            parse_probabilities({"fire": 0.5})


# ══════════════════════════════════════════════════════════════════════
# AlertStore
# ══════════════════════════════════════════════════════════════════════


class TestAlertStore:
    def test_newest_first_and_capped(self) -> None:
        store = AlertStore(capacity=3)
        for i in range(5):
            store.add(_alert(f"a{i}"))

        assert [a.id for a in store.all()] == ["a4", "a3", "a2"]
        assert len(store) == 3
        assert store.get("a0") is None

    def test_extend_keeps_creation_order(self) -> None:
        store = AlertStore(capacity=5)
        store.extend([_alert("m"), _alert("t"), _alert("e")])
        assert [a.id for a in store.all()] == ["e", "t", "m"]
        assert store.latest().id == "e"

    def test_current_pending_skips_terminal(self) -> None:
        store = AlertStore()
        store.add(_alert("old"))
        store.add(_alert("new", state=AlertState.DISMISSED))
        assert store.current_pending().id == "old"

    def test_current_pending_empty(self) -> None:
        assert AlertStore().current_pending() is None

    @pytest.mark.parametrize(
        "action, state",
        [
            (AlertAction.CONFIRM, AlertState.ACKNOWLEDGED),
            (AlertAction.EMERGENCY, AlertState.ESCALATED),
            (AlertAction.DISMISS, AlertState.DISMISSED),
        ],
    )
    def test_transition_from_pending(self, action: AlertAction, state: AlertState) -> None:
        store = AlertStore()
        store.add(_alert("a1"))
        assert store.transition("a1", action).state is state
        assert store.get("a1").is_terminal

    @pytest.mark.parametrize(
        "state", [AlertState.ACKNOWLEDGED, AlertState.ESCALATED, AlertState.DISMISSED]
    )
    def test_terminal_alert_is_never_remutated(self, state: AlertState) -> None:
        store = AlertStore()
        store.add(_alert("a1", state=state))
        with pytest.raises(InvalidActionException):
            store.transition("a1", AlertAction.CONFIRM)
        assert store.get("a1").state is state

    def test_unknown_alert(self) -> None:
        with pytest.raises(InvalidActionException) as exc_info:
            AlertStore().transition("missing", AlertAction.DISMISS)
        assert exc_info.value.alert_id == "missing"

    def test_clear(self) -> None:
        store = AlertStore()
        store.add(_alert("a1"))
        store.clear()
        assert store.all() == []

    def test_capacity_must_be_positive(self) -> None:
        with pytest.raises(ValueError):
            AlertStore(capacity=0)

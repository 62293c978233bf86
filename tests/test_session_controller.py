"""Tests for SessionController: lifecycle, seeding, tick gating and freshness."""

import pytest

from core.alerts.alert_generator import AlertGenerator
from core.alerts.models import AlertAction, AlertKind, AlertSeverity, AlertState
from exceptions.exceptions import NoActiveSessionException
from runtime.agents.events import AlertRaised, SessionEnded, SessionStarted
from runtime.controller.session_controller import SessionController
from runtime.models.session_models import SecurityStatus
from runtime.store.alert_store import AlertStore

from conftest import ALWAYS, FixedRandom


class TestStartSession:
    def test_seeds_single_acknowledged_low_alert(self, controller, slot) -> None:
        session = controller.start_session(slot, "ABC-1234")

        alerts = controller.alerts()
        assert len(alerts) == 1
        seed = alerts[0]
        assert seed.severity is AlertSeverity.LOW
        assert seed.state is AlertState.ACKNOWLEDGED
        assert seed.session_id == session.id
        assert seed.message == "Vehicle ABC-1234 successfully parked in Central Mall Parking"

    def test_session_fields(self, controller, slot) -> None:
        session = controller.start_session(slot, "ABC-1234")
        assert session.active
        assert session.vehicle_tag == "ABC-1234"
        assert session.slot_id == "p1"
        assert session.slot_name == "Central Mall Parking"
        assert controller.active_session is session

    def test_starts_a_scheduler(self, controller, slot, schedulers) -> None:
        controller.start_session(slot, "ABC-1234")
        assert len(schedulers) == 1
        assert schedulers[0].started

    def test_new_booking_supersedes_old_session(self, controller, catalog, schedulers) -> None:
        first = controller.start_session(catalog.get("p1"), "ABC-1234")
        controller.tick()
        second = controller.start_session(catalog.get("p2"), "ABC-1234")

        assert not first.active
        assert first.ended_at is not None
        assert second.id != first.id
        assert schedulers[0].stopped
        # Prior alerts are gone; only the new seed remains.
        assert [a.session_id for a in controller.alerts()] == [second.id]

    def test_without_scheduler_factory(self, slot) -> None:
        controller = SessionController(
            alert_store=AlertStore(),
            generator=AlertGenerator(ALWAYS, rng=FixedRandom(0.0)),
        )
        controller.start_session(slot, "ABC-1234")
        assert len(controller.tick()) == 3


class TestEndSession:
    def test_marks_inactive_and_clears_alerts(self, controller, slot, schedulers) -> None:
        controller.start_session(slot, "ABC-1234")
        controller.tick()
        ended = controller.end_session()

        assert not ended.active
        assert controller.active_session is None
        assert controller.alerts() == []
        assert schedulers[0].stopped

    def test_without_session_raises(self, controller) -> None:
        with pytest.raises(NoActiveSessionException):
            controller.end_session()

    def test_in_flight_tick_after_end_adds_nothing(self, controller, slot, schedulers) -> None:
        controller.start_session(slot, "ABC-1234")
        in_flight = schedulers[0]
        controller.end_session()

        assert in_flight.fire() == []
        assert controller.alerts() == []

    def test_stale_tick_from_superseded_session_is_ignored(
        self, controller, catalog, schedulers
    ) -> None:
        controller.start_session(catalog.get("p1"), "ABC-1234")
        controller.start_session(catalog.get("p2"), "ABC-1234")

        assert schedulers[0].fire() == []
        assert len(controller.alerts()) == 1
        assert len(schedulers[1].fire()) == 3


class TestTick:
    def test_no_session_is_noop(self, controller) -> None:
        assert controller.tick() == []
        assert controller.alerts() == []

    def test_all_kinds_fire_on_top_of_seed(self, controller, slot) -> None:
        controller.start_session(slot, "ABC-1234")
        fired = controller.tick()

        assert [a.severity for a in fired] == [
            AlertSeverity.MEDIUM,
            AlertSeverity.HIGH,
            AlertSeverity.HIGH,
        ]
        alerts = controller.alerts()
        assert len(alerts) == 4
        assert [a.kind for a in alerts[:3]] == [
            AlertKind.EMERGENCY,
            AlertKind.TAMPER,
            AlertKind.MOVEMENT,
        ]
        assert alerts[3].severity is AlertSeverity.LOW

    def test_store_truncates_to_capacity(self, controller, slot) -> None:
        controller.start_session(slot, "ABC-1234")
        controller.tick()
        controller.tick()
        controller.tick()

        alerts = controller.alerts()
        assert len(alerts) == 5
        assert all(a.severity is not AlertSeverity.LOW for a in alerts)

    def test_small_capacity_evicts_seed(self, slot, scheduler_factory) -> None:
        controller = SessionController(
            alert_store=AlertStore(capacity=3),
            generator=AlertGenerator(ALWAYS, rng=FixedRandom(0.0)),
            scheduler_factory=scheduler_factory,
        )
        controller.start_session(slot, "ABC-1234")
        controller.tick()
        assert [a.severity for a in controller.alerts()] == [
            AlertSeverity.HIGH,
            AlertSeverity.HIGH,
            AlertSeverity.MEDIUM,
        ]

    def test_quiet_tick_adds_nothing(self, quiet_controller, slot) -> None:
        quiet_controller.start_session(slot, "ABC-1234")
        assert quiet_controller.tick() == []
        assert len(quiet_controller.alerts()) == 1
        assert quiet_controller.last_movement is None

    def test_last_movement_tracks_latest_alert(self, controller, slot) -> None:
        controller.start_session(slot, "ABC-1234")
        assert controller.last_movement is None
        fired = controller.tick()
        assert controller.last_movement == fired[0].created_at


class TestViews:
    def test_current_alert_is_newest_pending(self, controller, slot) -> None:
        controller.start_session(slot, "ABC-1234")
        assert controller.current_alert() is None

        fired = controller.tick()
        assert controller.current_alert().id == fired[-1].id

        controller.alert_store.transition(fired[-1].id, AlertAction.CONFIRM)
        assert controller.current_alert().id == fired[1].id

    def test_security_status(self, controller, slot) -> None:
        assert controller.security_status() is SecurityStatus.IDLE
        controller.start_session(slot, "ABC-1234")
        assert controller.security_status() is SecurityStatus.SECURE
        controller.tick()
        assert controller.security_status() is SecurityStatus.ALERT
        controller.end_session()
        assert controller.security_status() is SecurityStatus.IDLE

    def test_no_current_alert_without_session(self, controller) -> None:
        assert controller.current_alert() is None


class TestEventsAndLogging:
    def test_publishes_lifecycle_and_alert_events(self, controller, slot, received) -> None:
        controller.start_session(slot, "ABC-1234")
        controller.tick()
        controller.end_session()

        kinds = [type(event) for event in received]
        assert kinds == [SessionStarted, AlertRaised, AlertRaised, AlertRaised, SessionEnded]

    def test_logs_events(self, controller, slot, log_store) -> None:
        controller.start_session(slot, "ABC-1234")
        controller.tick()
        controller.end_session()

        event_types = [event_type for event_type, _ in log_store.events]
        assert event_types == [
            "session_started",
            "alert_raised",
            "alert_raised",
            "alert_raised",
            "session_ended",
        ]

    def test_log_failure_does_not_break_session(self, slot) -> None:
        class BrokenLogStore:
            def log_event(self, event_type, payload):
                raise OSError("disk full")

        controller = SessionController(
            alert_store=AlertStore(),
            generator=AlertGenerator(ALWAYS, rng=FixedRandom(0.0)),
            log_store=BrokenLogStore(),
        )
        controller.start_session(slot, "ABC-1234")
        assert len(controller.tick()) == 3

    def test_broken_listener_does_not_stop_others(self, controller, slot, events) -> None:
        seen = []

        def broken(event) -> None:
            raise RuntimeError("render failed")

        events.subscribe(broken)
        unsubscribe = events.subscribe(seen.append)
        controller.start_session(slot, "ABC-1234")
        assert len(seen) == 1

        unsubscribe()
        controller.tick()
        assert len(seen) == 1

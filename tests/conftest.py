"""
Shared fixtures for the ParkGuard test suite.

Randomness and timers are replaced with deterministic stand-ins:
- FixedRandom / ScriptedRandom drive the alert generator's Bernoulli trials
- FakeScheduler records start/stop and fires ticks on demand
"""

from typing import List

import pytest

from core.alerts.alert_generator import AlertGenerator
from runtime.agents.dispatcher import Dispatcher
from runtime.agents.events import EventChannel
from runtime.controller.session_controller import SessionController
from runtime.store.alert_store import AlertStore
from runtime.store.conversation_log import ConversationLog
from runtime.store.slot_catalog import SlotCatalog

ALWAYS = {"movement": 1.0, "tamper": 1.0, "emergency": 1.0}
NEVER = {"movement": 0.0, "tamper": 0.0, "emergency": 0.0}


# ── Deterministic stand-ins ────────────────────────────────────────────


class FixedRandom:
    """Random source that always returns the same draw."""

    def __init__(self, value: float) -> None:
        self.value = value

    def random(self) -> float:
        return self.value


class ScriptedRandom:
    """Random source that replays a fixed sequence of draws."""

    def __init__(self, values: List[float]) -> None:
        self._values = iter(values)

    def random(self) -> float:
        return next(self._values)


class FakeScheduler:
    """Stands in for AlertScheduler; ticks only when fire() is called."""

    def __init__(self, on_tick) -> None:
        self.on_tick = on_tick
        self.started = False
        self.stopped = False

    def start(self) -> None:
        self.started = True

    def stop(self) -> None:
        self.stopped = True

    def fire(self):
        return self.on_tick()


class RecordingLogStore:
    def __init__(self) -> None:
        self.events = []

    def log_event(self, event_type: str, payload: dict) -> None:
        self.events.append((event_type, payload))


# ── Fixtures ───────────────────────────────────────────────────────────


@pytest.fixture
def catalog() -> SlotCatalog:
    return SlotCatalog()


@pytest.fixture
def slot(catalog):
    return catalog.get("p1")


@pytest.fixture
def schedulers() -> List[FakeScheduler]:
    return []


@pytest.fixture
def scheduler_factory(schedulers):
    def factory(on_tick):
        scheduler = FakeScheduler(on_tick)
        schedulers.append(scheduler)
        return scheduler

    return factory


@pytest.fixture
def events() -> EventChannel:
    return EventChannel()


@pytest.fixture
def received(events) -> list:
    """Every event published on the shared channel, in order."""
    seen: list = []
    events.subscribe(seen.append)
    return seen


@pytest.fixture
def log_store() -> RecordingLogStore:
    return RecordingLogStore()


@pytest.fixture
def controller(scheduler_factory, events, log_store) -> SessionController:
    """Controller whose every tick fires movement, tamper and emergency."""
    return SessionController(
        alert_store=AlertStore(capacity=5),
        generator=AlertGenerator(ALWAYS, rng=FixedRandom(0.5)),
        scheduler_factory=scheduler_factory,
        events=events,
        log_store=log_store,
    )


@pytest.fixture
def quiet_controller(scheduler_factory, events) -> SessionController:
    """Controller whose ticks never fire."""
    return SessionController(
        alert_store=AlertStore(capacity=5),
        generator=AlertGenerator(NEVER, rng=FixedRandom(0.5)),
        scheduler_factory=scheduler_factory,
        events=events,
    )


@pytest.fixture
def dispatcher(controller, log_store) -> Dispatcher:
    return Dispatcher(
        controller=controller,
        conversation_log=ConversationLog(capacity=5),
        log_store=log_store,
    )

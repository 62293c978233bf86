"""SessionController implementation.

Responsible for:
- owning the single active ParkingSession (or none)
- resetting and seeding the AlertStore when a booking is confirmed
- owning the AlertScheduler that drives the AlertGenerator while a session
  is active, and tearing it down when the session ends

Lifecycle:

    NoSession --start_session--> Active --end_session--> NoSession

Starting a new session while one is active ends the old one first (its
alerts are cleared and its scheduler stopped) before the new one begins.

Every tick is guarded by a freshness check: it only produces alerts if a
session is active and, when the tick is bound to a session id, that id is
still the current session. A tick that was already in flight when
`end_session()` ran therefore adds nothing.
"""

import logging
from datetime import datetime, timezone
from functools import partial
from typing import Any, Callable, Dict, List, Optional

from core.alerts.alert_generator import AlertGenerator
from core.alerts.alert_scheduler import AlertScheduler
from core.alerts.models import Alert, AlertSeverity
from exceptions.exceptions import NoActiveSessionException

from ..agents.events import AlertRaised, EventChannel, SessionEnded, SessionStarted
from ..models.session_models import ParkingSession, ParkingSlot, SecurityStatus
from ..store.alert_store import AlertStore


logger = logging.getLogger(__name__)

SchedulerFactory = Callable[[Callable[[], Any]], AlertScheduler]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SessionController:
    """Parking session lifecycle + alert generation gate.

    Parameters
    ----------
    alert_store:
        Store holding the alerts of the active session.
    generator:
        AlertGenerator evaluated on every tick.
    scheduler_factory:
        Optional callable building an AlertScheduler for a tick callback.
        When omitted, ticks only happen when `tick()` is called directly
        (CLI simulation and tests).
    events:
        Event channel for SessionStarted / SessionEnded / AlertRaised.
    log_store:
        Store used to log high-level events (optional).
    clock:
        Returns the current time; injectable for deterministic tests.
    """

    def __init__(
        self,
        alert_store: AlertStore,
        generator: AlertGenerator,
        scheduler_factory: Optional[SchedulerFactory] = None,
        events: Optional[EventChannel] = None,
        log_store=None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.alert_store = alert_store
        self.generator = generator
        self.scheduler_factory = scheduler_factory
        self.events = events or EventChannel()
        self.log_store = log_store
        self.clock = clock

        self._session: Optional[ParkingSession] = None
        self._scheduler: Optional[AlertScheduler] = None
        self.last_movement: Optional[datetime] = None

    # ------------------------------------------------------------------
    # Session lifecycle
    # ------------------------------------------------------------------

    @property
    def active_session(self) -> Optional[ParkingSession]:
        if self._session is not None and self._session.active:
            return self._session
        return None

    def require_active_session(self, operation: str) -> ParkingSession:
        session = self.active_session
        if session is None:
            raise NoActiveSessionException(operation)
        return session

    def start_session(self, slot: ParkingSlot, vehicle_tag: str) -> ParkingSession:
        """Confirm a booking: start monitoring `vehicle_tag` parked in `slot`."""
        if self.active_session is not None:
            logger.info(
                "[SESSION] Superseding session %s with a new booking",
                self._session.id,
            )
            self._end_current(reason="superseded")

        now = self.clock()
        session = ParkingSession(
            vehicle_tag=vehicle_tag,
            slot_id=slot.id,
            slot_name=slot.name,
            started_at=now,
        )
        self._session = session
        self.last_movement = None

        self.alert_store.clear()
        self.alert_store.add(
            self.generator.confirmation(
                session_id=session.id,
                vehicle_tag=vehicle_tag,
                slot_name=slot.name,
                now=now,
            )
        )

        if self.scheduler_factory is not None:
            self._scheduler = self.scheduler_factory(partial(self.tick, session.id))
            self._scheduler.start()

        logger.info(
            "[SESSION] Started session %s for vehicle %s in %s",
            session.id,
            vehicle_tag,
            slot.name,
        )
        self.events.publish(SessionStarted(session))
        self._log_event(
            "session_started",
            {
                "session_id": session.id,
                "vehicle_tag": vehicle_tag,
                "slot_id": slot.id,
            },
        )
        return session

    def end_session(self) -> ParkingSession:
        """End the active session, stop its ticks and drop its alerts.

        Raises
        ------
        NoActiveSessionException
            If no session is active.
        """
        self.require_active_session("end_session")
        return self._end_current(reason="ended")

    def _end_current(self, reason: str) -> ParkingSession:
        session = self._session
        session.active = False
        session.ended_at = self.clock()

        if self._scheduler is not None:
            self._scheduler.stop()
            self._scheduler = None

        self.alert_store.clear()
        self._session = None

        logger.info("[SESSION] Session %s %s", session.id, reason)
        self.events.publish(SessionEnded(session))
        self._log_event(
            "session_ended",
            {"session_id": session.id, "reason": reason},
        )
        return session

    # ------------------------------------------------------------------
    # Alert generation
    # ------------------------------------------------------------------

    def tick(self, session_id: Optional[str] = None) -> List[Alert]:
        """Run one alert-generator evaluation for the active session.

        Returns the alerts that fired. A tick with no active session, or
        bound to a session that is no longer current, is a no-op.
        """
        session = self.active_session
        if session is None:
            return []
        if session_id is not None and session_id != session.id:
            logger.debug("[SESSION] Ignoring stale tick for session %s", session_id)
            return []

        now = self.clock()
        alerts = self.generator.evaluate(
            session_id=session.id,
            vehicle_tag=session.vehicle_tag,
            slot_name=session.slot_name,
            now=now,
        )
        if not alerts:
            return []

        self.alert_store.extend(alerts)
        self.last_movement = now
        for alert in alerts:
            logger.warning(
                "[ALERT] %s %s alert for session %s: %s",
                alert.severity.value.upper(),
                alert.kind.value,
                session.id,
                alert.message,
            )
            self.events.publish(AlertRaised(alert))
            self._log_event(
                "alert_raised",
                {
                    "session_id": session.id,
                    "alert_id": alert.id,
                    "kind": alert.kind.value,
                    "severity": alert.severity.value,
                },
            )
        return alerts

    # ------------------------------------------------------------------
    # Read-only views for the notification layer
    # ------------------------------------------------------------------

    def alerts(self) -> List[Alert]:
        return self.alert_store.all()

    def current_alert(self) -> Optional[Alert]:
        """The one alert surfaced for user action: newest PENDING alert."""
        if self.active_session is None:
            return None
        return self.alert_store.current_pending()

    def security_status(self) -> SecurityStatus:
        if self.active_session is None:
            return SecurityStatus.IDLE
        latest = self.alert_store.latest()
        if latest is not None and latest.severity is not AlertSeverity.LOW:
            return SecurityStatus.ALERT
        return SecurityStatus.SECURE

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _log_event(self, event_type: str, payload: Dict[str, Any]) -> None:
        if self.log_store is None:
            return
        try:
            self.log_store.log_event(event_type=event_type, payload=payload)
        except Exception:
            # Logging failures should not affect main flow.
            logger.warning("[SESSION] Failed to log event %s", event_type, exc_info=True)

"""Dispatcher implementation.

Responsible for:
- taking a transcribed utterance and classifying it into an Intent
- turning navigation intents (show_nearby / show_search / show_map) into a
  View selector for the rendering layer
- recording every exchange in the ConversationLog
- handing the spoken response to the text-to-speech boundary through the
  EventChannel
- applying user actions (confirm / emergency / dismiss) to alerts of the
  active session

Current behavior:
- every intent, navigation or not, produces exactly one ConversationEntry
- alert actions only apply to PENDING alerts; anything else raises
  InvalidActionException and leaves the alert untouched
- speech capture is switched off after each processed utterance
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional, Union

from core.alerts.models import Alert, AlertAction
from core.interpreter.models import NAVIGATION_TARGETS, ClassificationResult, Intent, View
from core.interpreter.utterance_classifier import classify, normalize_utterance, response_for
from exceptions.exceptions import InvalidActionException, UnsupportedCapabilityException

from ..controller.session_controller import SessionController
from ..models.session_models import ConversationEntry
from ..store.conversation_log import ConversationLog
from .events import AlertResolved, NavigationRequested, ResponseReady


logger = logging.getLogger(__name__)

ACTIVATION_MESSAGE = "Voice assistant activated. How can I help you with parking today?"

VOICE_TEST_MESSAGE = (
    "Voice assistant is working perfectly! Try saying 'show nearby slots', "
    "'search parking', 'open map', or 'help me book a spot'."
)

ACTION_MESSAGES: Dict[AlertAction, str] = {
    AlertAction.CONFIRM: "Vehicle movement has been authorized.",
    AlertAction.EMERGENCY: "Local security and emergency services have been notified.",
    AlertAction.DISMISS: "Security alert has been dismissed.",
}


@dataclass(frozen=True)
class DispatchResult:
    intent: Intent
    response: str
    view: Optional[View] = None


@dataclass(frozen=True)
class AlertActionResult:
    alert: Alert
    message: str


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Dispatcher:
    """Routes classified intents and alert actions.

    Parameters
    ----------
    controller:
        SessionController whose alerts the user acts on. Its event channel
        is shared with the dispatcher.
    conversation_log:
        Bounded history of (utterance, response) exchanges.
    log_store:
        Store used to log high-level events (optional).
    speech_recognition / speech_synthesis:
        Capability flags reported by the speech boundary.
    classifier:
        Utterance classifier; defaults to the keyword classifier.
    """

    def __init__(
        self,
        controller: SessionController,
        conversation_log: ConversationLog,
        log_store=None,
        speech_recognition: bool = True,
        speech_synthesis: bool = True,
        classifier: Callable[[str], ClassificationResult] = classify,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.controller = controller
        self.conversation_log = conversation_log
        self.events = controller.events
        self.log_store = log_store
        self.speech_recognition = speech_recognition
        self.speech_synthesis = speech_synthesis
        self.classifier = classifier
        self.clock = clock

        self.current_view: View = View.NEARBY
        self.listening = False

    # ------------------------------------------------------------------
    # Utterances + intents
    # ------------------------------------------------------------------

    def handle_utterance(self, utterance: str) -> DispatchResult:
        """Classify one utterance and dispatch the resulting intent."""
        text = normalize_utterance(utterance)
        result = self.classifier(text)
        logger.info("[DISPATCH] %r -> %s", text, result.intent.value)

        view = self.handle_intent(result.intent, utterance=text, response=result.response)

        # Capture stops once a command has been processed.
        self.listening = False
        return DispatchResult(intent=result.intent, response=result.response, view=view)

    def handle_intent(
        self,
        intent: Intent,
        utterance: str = "",
        response: Optional[str] = None,
    ) -> Optional[View]:
        """Apply an intent: switch view if it navigates, always log the exchange."""
        if response is None:
            response = response_for(intent)

        view = NAVIGATION_TARGETS.get(intent)
        if view is not None:
            self.current_view = view
            self.events.publish(NavigationRequested(view))

        self.conversation_log.record(
            ConversationEntry(
                utterance=utterance,
                response=response,
                timestamp=self.clock(),
            )
        )
        self._speak(response)

        self._log_event(
            "intent_handled",
            {
                "intent": intent.value,
                "utterance": utterance,
                "view": view.value if view is not None else None,
            },
        )
        return view

    # ------------------------------------------------------------------
    # Alert actions
    # ------------------------------------------------------------------

    def handle_alert_action(
        self,
        alert_id: str,
        action: Union[AlertAction, str],
    ) -> AlertActionResult:
        """Confirm, escalate or dismiss a pending alert.

        Raises
        ------
        InvalidActionException
            If the action is unknown, or the alert is missing or terminal.
        """
        try:
            action = AlertAction(action)
        except ValueError:
            raise InvalidActionException(
                alert_id, str(action), reason="Unknown alert action."
            ) from None

        try:
            alert = self.controller.alert_store.transition(alert_id, action)
        except InvalidActionException as exc:
            logger.warning("[DISPATCH] Rejected alert action: %s", exc)
            raise

        logger.info(
            "[DISPATCH] Alert %s %s (%s)", alert.id, alert.state.value, action.value
        )
        self.events.publish(AlertResolved(alert=alert, action=action))
        self._log_event(
            "alert_resolved",
            {
                "alert_id": alert.id,
                "session_id": alert.session_id,
                "action": action.value,
                "state": alert.state.value,
            },
        )
        return AlertActionResult(alert=alert, message=ACTION_MESSAGES[action])

    # ------------------------------------------------------------------
    # Speech boundary
    # ------------------------------------------------------------------

    def capabilities(self) -> Dict[str, bool]:
        return {
            "speech_recognition": self.speech_recognition,
            "speech_synthesis": self.speech_synthesis,
            "listening": self.listening,
        }

    def set_listening(self, listening: bool) -> Optional[str]:
        """Toggle speech capture. Returns the activation phrase when starting.

        Raises
        ------
        UnsupportedCapabilityException
            If capture is requested but speech recognition is unavailable.
        """
        if listening and not self.speech_recognition:
            raise UnsupportedCapabilityException("speech_recognition")

        self.listening = listening
        if not listening:
            return None

        self._speak(ACTIVATION_MESSAGE)
        return ACTIVATION_MESSAGE

    def voice_test_message(self) -> str:
        self._speak(VOICE_TEST_MESSAGE)
        return VOICE_TEST_MESSAGE

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _speak(self, text: str) -> None:
        if self.speech_synthesis:
            self.events.publish(ResponseReady(text))

    def _log_event(self, event_type: str, payload: Dict[str, Any]) -> None:
        if self.log_store is None:
            return
        try:
            self.log_store.log_event(event_type=event_type, payload=payload)
        except Exception:
            # Logging failures should not affect main flow.
            logger.warning("[DISPATCH] Failed to log event %s", event_type, exc_info=True)

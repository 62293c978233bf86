"""
HTTP request/response models for the ParkGuard runtime API.
"""

from pydantic import BaseModel, Field
from typing import List, Optional

from core.alerts.models import Alert, AlertAction, AlertState
from core.interpreter.models import Intent, View

from .session_models import ConversationEntry, ParkingSession, SecurityStatus


class StartSessionRequest(BaseModel):
    slot_id: str
    vehicle_tag: str = Field(min_length=1)


class SessionResponse(BaseModel):
    session: Optional[ParkingSession] = None
    security_status: SecurityStatus
    current_alert: Optional[Alert] = None


class AlertListResponse(BaseModel):
    alerts: List[Alert]


class AlertActionRequest(BaseModel):
    action: AlertAction


class AlertActionResponse(BaseModel):
    alert_id: str
    state: AlertState
    message: str


class UtteranceRequest(BaseModel):
    text: str


class UtteranceResponse(BaseModel):
    """
    Result of dispatching one utterance:

    - intent: the classified Intent
    - response: plain text for the text-to-speech boundary
    - view: screen to switch to, only for navigation intents
    """
    intent: Intent
    response: str
    view: Optional[View] = None


class ConversationResponse(BaseModel):
    entries: List[ConversationEntry]


class CapabilitiesResponse(BaseModel):
    speech_recognition: bool
    speech_synthesis: bool
    listening: bool


class ListeningRequest(BaseModel):
    listening: bool


class ListeningResponse(BaseModel):
    listening: bool
    message: Optional[str] = None


class DirectionsResponse(BaseModel):
    slot_id: str
    url: str

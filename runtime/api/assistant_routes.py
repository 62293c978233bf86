"""HTTP routes for the voice assistant.

- POST /assistant/utterance    -> classify + dispatch one transcribed command
- GET  /assistant/conversation -> recent exchanges, newest first
- GET  /assistant/capabilities -> speech boundary flags
- POST /assistant/listening    -> start / stop speech capture
"""

import logging

from fastapi import APIRouter, HTTPException
from typing import Optional

from exceptions.exceptions import UnsupportedCapabilityException

from ..agents.dispatcher import Dispatcher
from ..models.api_models import (
    CapabilitiesResponse,
    ConversationResponse,
    ListeningRequest,
    ListeningResponse,
    UtteranceRequest,
    UtteranceResponse,
)


logger = logging.getLogger(__name__)

router = APIRouter()

_DISPATCHER: Optional[Dispatcher] = None


def init_routes(dispatcher: Dispatcher) -> None:
    """Initialize module-level references used by the route handlers."""
    global _DISPATCHER
    _DISPATCHER = dispatcher


def _require_dispatcher() -> Dispatcher:
    if _DISPATCHER is None:
        raise HTTPException(
            status_code=500,
            detail="Dispatcher is not configured on the server.",
        )
    return _DISPATCHER


@router.post("/utterance", response_model=UtteranceResponse)
async def handle_utterance(request: UtteranceRequest) -> UtteranceResponse:
    """Classify a transcribed utterance and apply its intent."""
    try:
        result = _require_dispatcher().handle_utterance(request.text)
    except Exception:
        logger.exception("[ASSISTANT] Unexpected error for text=%r", request.text)
        raise

    return UtteranceResponse(
        intent=result.intent,
        response=result.response,
        view=result.view,
    )


@router.get("/conversation", response_model=ConversationResponse)
async def conversation() -> ConversationResponse:
    return ConversationResponse(entries=_require_dispatcher().conversation_log.entries())


@router.get("/capabilities", response_model=CapabilitiesResponse)
async def capabilities() -> CapabilitiesResponse:
    return CapabilitiesResponse(**_require_dispatcher().capabilities())


@router.post("/listening", response_model=ListeningResponse)
async def set_listening(request: ListeningRequest) -> ListeningResponse:
    dispatcher = _require_dispatcher()
    try:
        message = dispatcher.set_listening(request.listening)
    except UnsupportedCapabilityException as e:
        logger.warning("[ASSISTANT] HTTP 503: %s", e)
        raise HTTPException(status_code=503, detail=str(e))
    return ListeningResponse(listening=dispatcher.listening, message=message)

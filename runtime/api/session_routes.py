"""HTTP routes for parking sessions and their security alerts.

Exposes endpoints like:

- GET    /parking/slots                      -> slot catalog (optional ?q= search)
- GET    /parking/slots/{slot_id}/directions -> Google Maps directions URL
- POST   /parking/sessions                   -> confirm a booking, start monitoring
- GET    /parking/sessions/current           -> active session + security status
- DELETE /parking/sessions/current           -> end monitoring
- GET    /parking/alerts                     -> alert history, newest first
- GET    /parking/alerts/current             -> the pending alert awaiting action
- POST   /parking/alerts/{alert_id}/action   -> confirm / emergency / dismiss
"""

import logging

from fastapi import APIRouter, HTTPException
from typing import List, Optional

from core.alerts.models import Alert
from exceptions.exceptions import InvalidActionException, NoActiveSessionException

from ..agents.dispatcher import Dispatcher
from ..controller.session_controller import SessionController
from ..models.api_models import (
    AlertActionRequest,
    AlertActionResponse,
    AlertListResponse,
    DirectionsResponse,
    SessionResponse,
    StartSessionRequest,
)
from ..models.session_models import ParkingSlot
from ..store.slot_catalog import SlotCatalog


logger = logging.getLogger(__name__)

# Router for all parking-related endpoints
router = APIRouter()


# Module-level references, to be initialized by the server.
_SLOT_CATALOG: Optional[SlotCatalog] = None
_SESSION_CONTROLLER: Optional[SessionController] = None
_DISPATCHER: Optional[Dispatcher] = None


def init_routes(
    slot_catalog: SlotCatalog,
    session_controller: SessionController,
    dispatcher: Dispatcher,
) -> None:
    """Initialize module-level references used by the route handlers."""
    global _SLOT_CATALOG, _SESSION_CONTROLLER, _DISPATCHER
    _SLOT_CATALOG = slot_catalog
    _SESSION_CONTROLLER = session_controller
    _DISPATCHER = dispatcher


def _require_slot_catalog() -> SlotCatalog:
    if _SLOT_CATALOG is None:
        raise HTTPException(
            status_code=500,
            detail="SlotCatalog is not configured on the server.",
        )
    return _SLOT_CATALOG


def _require_session_controller() -> SessionController:
    if _SESSION_CONTROLLER is None:
        raise HTTPException(
            status_code=500,
            detail="SessionController is not configured on the server.",
        )
    return _SESSION_CONTROLLER


def _require_dispatcher() -> Dispatcher:
    if _DISPATCHER is None:
        raise HTTPException(
            status_code=500,
            detail="Dispatcher is not configured on the server.",
        )
    return _DISPATCHER


def _require_slot(slot_id: str) -> ParkingSlot:
    slot = _require_slot_catalog().get(slot_id)
    if slot is None:
        raise HTTPException(status_code=404, detail=f"Parking slot not found: {slot_id}")
    return slot


def _session_snapshot(controller: SessionController) -> SessionResponse:
    return SessionResponse(
        session=controller.active_session,
        security_status=controller.security_status(),
        current_alert=controller.current_alert(),
    )


# --------------------------------------------------------
# Slot catalog
# --------------------------------------------------------

@router.get("/slots", response_model=List[ParkingSlot])
def list_slots(q: Optional[str] = None) -> List[ParkingSlot]:
    """Return every slot, or those whose name or features match `q`."""
    catalog = _require_slot_catalog()
    return catalog.search(q) if q else catalog.all()


@router.get("/slots/{slot_id}/directions", response_model=DirectionsResponse)
def slot_directions(slot_id: str) -> DirectionsResponse:
    slot = _require_slot(slot_id)
    return DirectionsResponse(slot_id=slot.id, url=SlotCatalog.directions_url(slot))


# --------------------------------------------------------
# Sessions
# --------------------------------------------------------

@router.post("/sessions", response_model=SessionResponse, status_code=201)
async def start_session(request: StartSessionRequest) -> SessionResponse:
    """Confirm a booking and start security monitoring for the vehicle.

    Any session already active is ended first. Async because the controller
    attaches its alert scheduler to the running event loop.
    """
    try:
        controller = _require_session_controller()
        slot = _require_slot(request.slot_id)
        controller.start_session(slot, request.vehicle_tag)
        return _session_snapshot(controller)

    except HTTPException as e:
        logger.warning(
            "[PARKING] HTTP %s for slot_id=%s vehicle_tag=%s reason=%r",
            e.status_code,
            request.slot_id,
            request.vehicle_tag,
            e.detail,
        )
        raise


@router.get("/sessions/current", response_model=SessionResponse)
async def current_session() -> SessionResponse:
    return _session_snapshot(_require_session_controller())


@router.delete("/sessions/current", response_model=SessionResponse)
async def end_session() -> SessionResponse:
    controller = _require_session_controller()
    try:
        controller.end_session()
    except NoActiveSessionException as e:
        logger.warning("[PARKING] HTTP 404 ending session: %s", e)
        raise HTTPException(status_code=404, detail=str(e))
    return _session_snapshot(controller)


# --------------------------------------------------------
# Alerts
# --------------------------------------------------------

@router.get("/alerts", response_model=AlertListResponse)
async def list_alerts() -> AlertListResponse:
    return AlertListResponse(alerts=_require_session_controller().alerts())


@router.get("/alerts/current", response_model=Optional[Alert])
async def current_alert() -> Optional[Alert]:
    return _require_session_controller().current_alert()


@router.post("/alerts/{alert_id}/action", response_model=AlertActionResponse)
async def alert_action(alert_id: str, request: AlertActionRequest) -> AlertActionResponse:
    """Apply a user decision to a pending alert.

    Returns 409 when the alert is unknown or was already handled.
    """
    dispatcher = _require_dispatcher()
    try:
        result = dispatcher.handle_alert_action(alert_id, request.action)
    except InvalidActionException as e:
        logger.warning(
            "[PARKING] HTTP 409 for alert_id=%s action=%s reason=%r",
            alert_id,
            request.action.value,
            e.reason,
        )
        raise HTTPException(status_code=409, detail=str(e))

    return AlertActionResponse(
        alert_id=result.alert.id,
        state=result.alert.state,
        message=result.message,
    )

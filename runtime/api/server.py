"""
FastAPI application entry point for the ParkGuard runtime.

Responsibilities:
- create the FastAPI app
- construct shared singletons (SlotCatalog, AlertStore, SessionController, Dispatcher)
- include parking routes under /parking and assistant routes under /assistant

Run with:

    uvicorn runtime.api.server:app --reload
"""

import logging
import random
from contextlib import asynccontextmanager

from fastapi import FastAPI

from configs.settings import settings
from core.alerts.alert_generator import AlertGenerator
from core.alerts.alert_scheduler import AlertScheduler
from runtime.agents.dispatcher import Dispatcher
from runtime.controller.session_controller import SessionController
from runtime.store.alert_store import AlertStore
from runtime.store.conversation_log import ConversationLog
from runtime.store.log_store import ConsoleLogStore, LogStore
from runtime.store.slot_catalog import SlotCatalog
from . import assistant_routes, session_routes


logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Shared singletons
# ---------------------------------------------------------------------------

# Slot catalog: demo slots unless PARKGUARD_SLOT_CATALOG points at a JSON file.
if settings.slot_catalog_path is not None:
    slot_catalog = SlotCatalog.from_file(str(settings.slot_catalog_path))
else:
    slot_catalog = SlotCatalog()

# Event log: JSONL files under runtime/data/logs, or the console.
if settings.event_log_enabled:
    log_store = LogStore(log_dir=str(settings.runtime_data_dir / "logs"))
else:
    log_store = ConsoleLogStore()

alert_generator = AlertGenerator(
    probabilities=settings.alert_probabilities,
    rng=random.Random(settings.random_seed),
)


def _make_scheduler(on_tick) -> AlertScheduler:
    return AlertScheduler(settings.tick_interval_ms, on_tick)


session_controller = SessionController(
    alert_store=AlertStore(capacity=settings.alert_capacity),
    generator=alert_generator,
    scheduler_factory=_make_scheduler,
    log_store=log_store,
)

dispatcher = Dispatcher(
    controller=session_controller,
    conversation_log=ConversationLog(capacity=settings.conversation_capacity),
    log_store=log_store,
    speech_recognition=settings.speech_recognition,
    speech_synthesis=settings.speech_synthesis,
)

# ---------------------------------------------------------------------------
# FastAPI app + route registration
# ---------------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI):
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logger.info("[SERVER] ParkGuard runtime started (log_level=%s)", settings.log_level)
    yield
    # Stop the alert scheduler before the event loop goes away.
    if session_controller.active_session is not None:
        session_controller.end_session()
    log_store.close()


app = FastAPI(title="ParkGuard Runtime", lifespan=lifespan)

# Initialize the router modules with our shared objects, then include them.
session_routes.init_routes(
    slot_catalog=slot_catalog,
    session_controller=session_controller,
    dispatcher=dispatcher,
)
assistant_routes.init_routes(dispatcher=dispatcher)
app.include_router(session_routes.router, prefix="/parking")
app.include_router(assistant_routes.router, prefix="/assistant")


# --------------------------------------------------------
# Endpoint: GET /healthz
# --------------------------------------------------------
@app.get("/healthz")
def health_check():
    """
    Simple health check endpoint for uptime monitoring.
    """
    return {"status": "ok"}



#!/usr/bin/env python3
"""
ParkGuard CLI

Command-line entry points for the session alert engine and the voice
command interpreter, mostly for demos and for poking at behavior without
the dashboard.

Commands:

1) serve
   - Start the HTTP runtime (FastAPI under uvicorn).

2) classify
   - Classify one utterance and print the intent, view and spoken response.

3) slots
   - List the slot catalog, optionally filtered by a search query.

4) simulate
   - Book a slot for a vehicle and run N alert ticks without waiting,
     printing every alert raised. Use --seed for a reproducible run.
"""

from __future__ import annotations

import argparse
import random
import sys
from pathlib import Path

# Ensure project root is on sys.path when running as a script
ROOT_DIR = Path(__file__).resolve().parent.parent
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from configs.settings import settings
from core.alerts.alert_generator import AlertGenerator
from core.interpreter.utterance_classifier import classify
from exceptions.exceptions import SlotNotFoundException
from runtime.controller.session_controller import SessionController
from runtime.store.alert_store import AlertStore
from runtime.store.slot_catalog import SlotCatalog


def _load_catalog(catalog_path: str | None) -> SlotCatalog:
    if catalog_path:
        return SlotCatalog.from_file(catalog_path)
    return SlotCatalog()


# ---------------------------------------------------------------------------
# serve
# ---------------------------------------------------------------------------


def cmd_serve(host: str, port: int, reload: bool) -> None:
    """Run the FastAPI runtime under uvicorn."""
    # Lazy import so the other commands work without uvicorn installed.
    import uvicorn

    print(f"[ParkGuard] Starting runtime on http://{host}:{port}")
    uvicorn.run("runtime.api.server:app", host=host, port=port, reload=reload)


# ---------------------------------------------------------------------------
# classify
# ---------------------------------------------------------------------------


def cmd_classify(text: str) -> None:
    result = classify(text)
    view = result.view.value if result.view is not None else "-"
    print(f"[ParkGuard] intent:   {result.intent.value}")
    print(f"[ParkGuard] view:     {view}")
    print(f"[ParkGuard] response: {result.response}")


# ---------------------------------------------------------------------------
# slots
# ---------------------------------------------------------------------------


def cmd_slots(query: str | None, catalog_path: str | None) -> None:
    catalog = _load_catalog(catalog_path)
    slots = catalog.search(query) if query else catalog.all()
    if not slots:
        print(f"[ParkGuard] No slots match {query!r}")
        return

    for slot in slots:
        print(
            f"[ParkGuard] {slot.id:<4} {slot.name:<28} {slot.distance:>4.1f} km  "
            f"{slot.available:>3}/{slot.total:<3} free  ${slot.price:.2f}/h  "
            f"{', '.join(slot.features)}"
        )


# ---------------------------------------------------------------------------
# simulate
# ---------------------------------------------------------------------------


def cmd_simulate(
    slot_id: str,
    vehicle_tag: str,
    ticks: int,
    seed: int | None,
    catalog_path: str | None,
) -> None:
    """
    Book `slot_id` for `vehicle_tag` and run `ticks` alert evaluations
    back-to-back with the configured probabilities.
    """
    catalog = _load_catalog(catalog_path)
    slot = catalog.get(slot_id)
    if slot is None:
        raise SlotNotFoundException(slot_id)

    controller = SessionController(
        alert_store=AlertStore(capacity=settings.alert_capacity),
        generator=AlertGenerator(
            probabilities=settings.alert_probabilities,
            rng=random.Random(seed),
        ),
    )
    session = controller.start_session(slot, vehicle_tag)
    print(f"[ParkGuard] Session {session.id} started for {vehicle_tag} in {slot.name}")

    raised = 0
    for tick in range(1, ticks + 1):
        for alert in controller.tick():
            raised += 1
            print(
                f"[ParkGuard] tick {tick:>4}: {alert.severity.value.upper():<6} "
                f"{alert.kind.value:<9} {alert.message}"
            )

    print(
        f"[ParkGuard] ✓ {raised} alerts over {ticks} ticks "
        f"(status: {controller.security_status().value})"
    )
    controller.end_session()


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="ParkGuard CLI")
    parser.add_argument(
        "--catalog",
        default=str(settings.slot_catalog_path) if settings.slot_catalog_path else None,
        help="Slot catalog JSON (default: PARKGUARD_SLOT_CATALOG or built-in demo slots)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # serve
    p_serve = subparsers.add_parser("serve", help="Start the HTTP runtime")
    p_serve.add_argument("--host", default="127.0.0.1")
    p_serve.add_argument("--port", type=int, default=8000)
    p_serve.add_argument("--reload", action="store_true", help="Auto-reload on code changes")

    # classify
    p_classify = subparsers.add_parser(
        "classify", help="Classify a voice command into an intent"
    )
    p_classify.add_argument("text", help="Transcribed utterance, e.g. 'show nearby slots'")

    # slots
    p_slots = subparsers.add_parser("slots", help="List or search parking slots")
    p_slots.add_argument("--query", "-q", help="Match against slot names and features")

    # simulate
    p_simulate = subparsers.add_parser(
        "simulate", help="Book a slot and run alert ticks without waiting"
    )
    p_simulate.add_argument("slot_id", help="Slot ID from the catalog, e.g. p1")
    p_simulate.add_argument("vehicle_tag", help="Vehicle registration, e.g. ABC-1234")
    p_simulate.add_argument("--ticks", type=int, default=100)
    p_simulate.add_argument("--seed", type=int, default=settings.random_seed)

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    command: str = args.command

    if command == "serve":
        cmd_serve(host=args.host, port=args.port, reload=args.reload)
    elif command == "classify":
        cmd_classify(text=args.text)
    elif command == "slots":
        cmd_slots(query=args.query, catalog_path=args.catalog)
    elif command == "simulate":
        try:
            cmd_simulate(
                slot_id=args.slot_id,
                vehicle_tag=args.vehicle_tag,
                ticks=args.ticks,
                seed=args.seed,
                catalog_path=args.catalog,
            )
        except SlotNotFoundException as e:
            parser.error(str(e))
    else:
        parser.error(f"Unknown command: {command}")


if __name__ == "__main__":
    main()

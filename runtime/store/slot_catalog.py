"""SlotCatalog: read-only parking slot records consumed by the session engine.

Slots come either from the built-in demo set or from a JSON file:

    workspace/slots.json

The JSON structure is assumed to look like either a bare list of slots or:

    {
      "slots": [
        {
          "id": "p1",
          "name": "Central Mall Parking",
          "distance": 0.2,
          "available": 45,
          "total": 100,
          "price": 2.5,
          "location": {"lat": 40.7128, "lng": -74.0060},
          "features": ["Covered", "Security", "EV Charging"]
        },
        ...
      ]
    }

The session engine only ever reads slots; it never updates availability.
"""

import json
from pathlib import Path
from typing import Dict, Iterable, List, Optional
from urllib.parse import urlencode

from pydantic import ValidationError

from exceptions.exceptions import SlotCatalogFormatException

from ..models.session_models import ParkingSlot


DEMO_SLOTS: List[Dict] = [
    {
        "id": "p1",
        "name": "Central Mall Parking",
        "distance": 0.2,
        "available": 45,
        "total": 100,
        "price": 2.5,
        "location": {"lat": 40.7128, "lng": -74.0060},
        "features": ["Covered", "Security", "EV Charging"],
    },
    {
        "id": "p2",
        "name": "City Center Plaza",
        "distance": 0.5,
        "available": 23,
        "total": 80,
        "price": 3.0,
        "location": {"lat": 40.7589, "lng": -73.9851},
        "features": ["24/7 Access", "CCTV", "Valet"],
    },
    {
        "id": "p3",
        "name": "Business District Hub",
        "distance": 0.8,
        "available": 67,
        "total": 150,
        "price": 4.0,
        "location": {"lat": 40.7505, "lng": -73.9934},
        "features": ["Premium", "Wash Service", "Security"],
    },
    {
        "id": "p4",
        "name": "Metro Station Parking",
        "distance": 1.2,
        "available": 12,
        "total": 60,
        "price": 1.5,
        "location": {"lat": 40.7282, "lng": -73.9942},
        "features": ["Budget", "Transit Access"],
    },
]

DIRECTIONS_BASE_URL = "https://www.google.com/maps/dir/"


class SlotCatalog:
    """Read-only lookup over a fixed set of parking slots.

    Parameters
    ----------
    slots:
        Slot records, in display order. Defaults to the demo set.
    """

    def __init__(self, slots: Optional[Iterable[ParkingSlot]] = None) -> None:
        if slots is None:
            slots = [ParkingSlot(**raw) for raw in DEMO_SLOTS]
        self._slots: List[ParkingSlot] = list(slots)
        self._by_id: Dict[str, ParkingSlot] = {slot.id: slot for slot in self._slots}

    @classmethod
    def from_file(cls, path: str) -> "SlotCatalog":
        """Load a catalog from a JSON file.

        Raises
        ------
        FileNotFoundError
            If the file does not exist.
        SlotCatalogFormatException
            If the JSON structure is not a list of slot objects.
        """
        path = Path(path)
        if not path.is_file():
            raise FileNotFoundError(f"Slot catalog not found: {path}")

        with path.open("r", encoding="utf-8") as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as exc:
                raise SlotCatalogFormatException(path, str(exc)) from exc

        if isinstance(data, dict):
            data = data.get("slots")
        if not isinstance(data, list):
            raise SlotCatalogFormatException(
                path, "expected a list of slots or an object with a 'slots' list"
            )

        try:
            slots = [ParkingSlot(**raw) for raw in data]
        except (TypeError, ValidationError) as exc:
            raise SlotCatalogFormatException(path, str(exc)) from exc
        return cls(slots)

    def __len__(self) -> int:
        return len(self._slots)

    def all(self) -> List[ParkingSlot]:
        return list(self._slots)

    def get(self, slot_id: str) -> Optional[ParkingSlot]:
        """Return the slot with this id, or None if it is not in the catalog."""
        return self._by_id.get(slot_id)

    def search(self, query: str) -> List[ParkingSlot]:
        """Case-insensitive match against slot names and feature labels.

        An empty query returns every slot.
        """
        needle = (query or "").strip().lower()
        if not needle:
            return self.all()
        return [
            slot
            for slot in self._slots
            if needle in slot.name.lower()
            or any(needle in feature.lower() for feature in slot.features)
        ]

    @staticmethod
    def directions_url(slot: ParkingSlot) -> str:
        """Google Maps driving directions to the slot."""
        query = urlencode(
            {
                "api": "1",
                "destination": f"{slot.location.lat},{slot.location.lng}",
                "travelmode": "driving",
            }
        )
        return f"{DIRECTIONS_BASE_URL}?{query}"

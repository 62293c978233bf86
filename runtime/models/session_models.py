"""
Session-related models for the ParkGuard runtime.

These describe:
- ParkingSlot / Location records read from the slot catalog
- a ParkingSession bound to one booked slot
- ConversationEntry items kept by the assistant's conversation log
- SecurityStatus enum (IDLE, SECURE, ALERT)
"""

from enum import Enum
from typing import List, Optional
from datetime import datetime, timezone
from uuid import uuid4

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SecurityStatus(str, Enum):
    IDLE = "idle"
    SECURE = "secure"
    ALERT = "alert"


class Location(BaseModel):
    lat: float
    lng: float


class ParkingSlot(BaseModel):
    id: str
    name: str
    distance: float      # km from the user
    available: int
    total: int
    price: float         # per hour
    location: Location
    features: List[str] = Field(default_factory=list)


class ParkingSession(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid4()))
    vehicle_tag: str
    slot_id: str
    slot_name: str
    started_at: datetime = Field(default_factory=_utcnow)
    ended_at: Optional[datetime] = None
    active: bool = True


class ConversationEntry(BaseModel):
    utterance: str
    response: str
    timestamp: datetime = Field(default_factory=_utcnow)

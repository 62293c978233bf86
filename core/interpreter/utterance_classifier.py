"""
interpreter/utterance_classifier.py

Keyword-based utterance → intent classification for the parking assistant.

The classifier is a pure function over already-transcribed text:

    result = classify("show me nearby parking")
    result.intent    -> Intent.SHOW_NEARBY
    result.response  -> "Showing you nearby parking slots with real-time availability"

Matching rules
--------------
- The utterance is lowercased and trimmed before matching.
- Each rule is a list of keywords tested with plain substring containment
  (so "hi" also matches inside "this").
- Rules are evaluated in the order of INTENT_RULES and the first rule with
  a matching keyword wins. "help me book a spot" is therefore BOOK_HELP,
  not HELP, and "what's the cheapest nearby spot" is SHOW_NEARBY, not
  PRICE_INFO.
- Empty input and input with no known keyword map to UNKNOWN.

The only non-determinism is the greeting, whose wording depends on the
local time of day. Pass `now` to pin it.
"""

from __future__ import annotations

from datetime import datetime
from typing import Dict, Optional, Sequence, Tuple

from .models import ClassificationResult, Intent


# Ordered (intent, keywords) pairs. Order is significant: first match wins.
INTENT_RULES: Tuple[Tuple[Intent, Sequence[str]], ...] = (
    (Intent.SHOW_NEARBY, ("nearby", "near", "close")),
    (Intent.SHOW_SEARCH, ("search", "find", "look for")),
    (Intent.SHOW_MAP, ("map", "navigate", "navigation", "directions")),
    (Intent.BOOK_HELP, ("book", "reserve", "slot")),
    (Intent.SECURITY_INFO, ("security", "safe", "monitor")),
    (Intent.HELP, ("help", "what can you do", "commands")),
    (Intent.GREETING, ("hello", "hi", "hey")),
    (Intent.PRICE_INFO, ("price", "cost", "cheap")),
    (Intent.AVAILABILITY_INFO, ("available", "free", "open")),
)

RESPONSES: Dict[Intent, str] = {
    Intent.SHOW_NEARBY: "Showing you nearby parking slots with real-time availability",
    Intent.SHOW_SEARCH: (
        "Opening search interface. You can search by location name or "
        "parking features"
    ),
    Intent.SHOW_MAP: "Opening interactive map view with navigation capabilities",
    Intent.BOOK_HELP: (
        "To book a parking slot, please first select a location from the "
        "available options, then click the book button"
    ),
    Intent.SECURITY_INFO: (
        "Your vehicle security monitoring is active. I'll alert you of any "
        "unauthorized movement or suspicious activity"
    ),
    Intent.HELP: (
        "I can help you with: finding nearby parking slots, searching specific "
        "locations, navigating with maps, booking reservations, and monitoring "
        "your vehicle security. Just speak naturally!"
    ),
    Intent.GREETING: (
        "Hello {greeting}! I'm your intelligent parking assistant. How can I "
        "help you find the perfect parking spot today?"
    ),
    Intent.PRICE_INFO: (
        "I can show you parking options sorted by price. Our rates range from "
        "$1.50 to $4.00 per hour"
    ),
    Intent.AVAILABILITY_INFO: (
        "Let me show you all currently available parking slots with real-time "
        "availability updates"
    ),
    Intent.UNKNOWN: (
        "I understand you're looking for parking assistance. Try saying: "
        "'show nearby slots', 'search parking', 'open map', or 'help with booking'"
    ),
}


def normalize_utterance(utterance: Optional[str]) -> str:
    """Lowercase and trim raw transcribed text."""
    return (utterance or "").strip().lower()


def time_of_day_greeting(now: Optional[datetime] = None) -> str:
    """Return 'Good morning' / 'Good afternoon' / 'Good evening' for `now`."""
    hour = (now or datetime.now()).hour
    if hour < 12:
        return "Good morning"
    if hour < 17:
        return "Good afternoon"
    return "Good evening"


def match_intent(utterance: str) -> Intent:
    """Return the first intent whose keywords occur in the normalized text."""
    text = normalize_utterance(utterance)
    if not text:
        return Intent.UNKNOWN

    for intent, keywords in INTENT_RULES:
        if any(keyword in text for keyword in keywords):
            return intent
    return Intent.UNKNOWN


def response_for(intent: Intent, now: Optional[datetime] = None) -> str:
    """Render the canned response template for an intent."""
    template = RESPONSES[intent]
    if intent is Intent.GREETING:
        return template.format(greeting=time_of_day_greeting(now))
    return template


def classify(utterance: Optional[str], now: Optional[datetime] = None) -> ClassificationResult:
    """Classify one utterance into an Intent plus its spoken response."""
    intent = match_intent(utterance or "")
    return ClassificationResult(intent=intent, response=response_for(intent, now))

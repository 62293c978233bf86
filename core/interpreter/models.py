from dataclasses import dataclass
from enum import Enum


class Intent(str, Enum):
    """Closed set of actions a spoken or typed command can resolve to."""

    SHOW_NEARBY = "show_nearby"
    SHOW_SEARCH = "show_search"
    SHOW_MAP = "show_map"
    BOOK_HELP = "book_help"
    SECURITY_INFO = "security_info"
    HELP = "help"
    GREETING = "greeting"
    PRICE_INFO = "price_info"
    AVAILABILITY_INFO = "availability_info"
    UNKNOWN = "unknown"


class View(str, Enum):
    """Screen selector consumed by the rendering layer."""

    NEARBY = "nearby"
    SEARCH = "search"
    MAP = "map"


# Navigation-class intents map 1:1 onto a view.
NAVIGATION_TARGETS = {
    Intent.SHOW_NEARBY: View.NEARBY,
    Intent.SHOW_SEARCH: View.SEARCH,
    Intent.SHOW_MAP: View.MAP,
}


@dataclass(frozen=True)
class ClassificationResult:
    """One classified utterance: the intent plus the text to speak back."""

    intent: Intent
    response: str

    @property
    def view(self):
        return NAVIGATION_TARGETS.get(self.intent)

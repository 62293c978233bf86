"""ConversationLog: the assistant's short-term memory of recent exchanges."""

from typing import List

from ..models.session_models import ConversationEntry


class ConversationLog:
    """Most-recent-first ring of ConversationEntry items, capped at `capacity`."""

    def __init__(self, capacity: int = 5) -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be at least 1, got {capacity}")
        self.capacity = capacity
        self._entries: List[ConversationEntry] = []

    def __len__(self) -> int:
        return len(self._entries)

    def record(self, entry: ConversationEntry) -> None:
        self._entries.insert(0, entry)
        del self._entries[self.capacity:]

    def entries(self) -> List[ConversationEntry]:
        return list(self._entries)

    def clear(self) -> None:
        self._entries.clear()

"""
Storage abstractions for the ParkGuard runtime.

Includes:
- AlertStore: bounded newest-first alert history for the active session
- ConversationLog: bounded history of assistant exchanges
- SlotCatalog: read-only access to parking slot records
- LogStore: append-only JSONL event logging
"""

"""
Pydantic / datamodels used by the ParkGuard runtime.

Split into:
- session_models: ParkingSlot + ParkingSession + ConversationEntry + SecurityStatus
- api_models: HTTP request/response schemas
"""

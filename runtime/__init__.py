"""
Runtime package for the ParkGuard local server.

This package contains:
- API layer (FastAPI server + routes)
- Controller (parking session lifecycle + alert generation gate)
- Agents (intent dispatch + event channel)
- Stores (alerts, conversation log, slot catalog, event logs)
- Models (Pydantic models for requests, sessions and slots)
"""

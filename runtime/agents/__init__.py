"""
Agents used by the ParkGuard runtime.

- Dispatcher: routes classified intents to navigation targets and applies
  user actions to alerts
- events: typed EventChannel decoupling the engine from UI / speech layers
"""

"""
Session control for the ParkGuard runtime.

The SessionController owns the active parking session and gates the alert
generator: alerts are only produced while a session is active.
"""

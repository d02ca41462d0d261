"""Cache adapters.

The throttle talks to its key-value store only through ``AbstractCache`` so the
in-memory reference store can be swapped for a shared one (e.g. Redis)
without touching the throttle or the API layer.
"""

"""Services Layer — per-entity record services and application state.

Invariants:
    - Services orchestrate core (pure) and infrastructure (IO); no HTTP types here
"""

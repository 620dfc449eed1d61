"""Route Modules — health checks plus one generated router per record kind.

Invariants:
    - Each router carries its own prefix and tags
    - Routes never contain business logic (delegate to RecordService)

Design Decisions:
    - Explicit registration in main.py over auto-discovery
"""

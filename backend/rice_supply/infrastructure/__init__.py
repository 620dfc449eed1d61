"""Infrastructure Layer — storage, blockchain client, and cross-cutting concerns.

Invariants:
    - Infrastructure never imports from services/ or api/
    - External calls map failures to typed errors from core/errors.py

Design Decisions:
    - Thin wrappers over raw clients (web3, filesystem)
"""

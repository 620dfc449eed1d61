"""Pydantic Schemas — response contracts for API endpoints.

Invariants:
    - Schemas describe the wire envelope; record payloads stay plain dicts
      checked by core/validation.py
"""

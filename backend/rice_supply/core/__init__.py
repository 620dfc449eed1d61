"""Core Layer — pure record logic, no IO, no async, no web framework imports.

Invariants:
    - No module in core/ imports from services/, api/, or infrastructure/
    - Validation, record lifecycle, pagination and formatting are deterministic
      given their inputs (clock and randomness are the only ambient reads)

Design Decisions:
    - Functional core separated from imperative shell
"""

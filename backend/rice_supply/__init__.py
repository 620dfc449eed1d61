"""Rice Supply Chain Package — REST gateway over five supply-chain record kinds.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)

Design Decisions:
    - Empty __init__.py: explicit imports only, no star exports
"""

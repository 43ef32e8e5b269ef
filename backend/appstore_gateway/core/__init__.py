"""Core Layer — pure gateway logic, no IO, no HTTP framework.

Invariants:
    - No module in core/ imports from services/, api/ or infrastructure/
    - All functions are pure and deterministic
"""

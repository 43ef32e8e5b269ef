"""Infrastructure Layer — external store client and cross-cutting concerns.

Invariants:
    - Infrastructure never decides HTTP status codes (core/ does)
"""

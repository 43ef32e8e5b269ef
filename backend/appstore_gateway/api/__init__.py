"""API Layer — FastAPI routes, auth middleware and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - Every response body is JSON
"""

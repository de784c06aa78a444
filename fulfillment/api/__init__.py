"""API Layer — FastAPI app factories, routes and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - All endpoints return structured JSON, except /metrics (text exposition)

Design Decisions:
    - Thin routes delegate to the stores and the gateway router
"""

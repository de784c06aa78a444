"""Infrastructure Layer — external clients, timers and cross-cutting concerns.

Invariants:
    - Infrastructure never imports from services/ or api/
    - All downstream HTTP calls wrapped with timeout/retry/error mapping

Design Decisions:
    - Resilient wrappers over raw clients (single responsibility)
"""

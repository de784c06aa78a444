"""Services Layer — stateful stores and the gateway router.

Invariants:
    - Each store owns its records and counters exclusively
    - Every mutation and every read of a store happens under that store's lock
    - Domain errors raised here are translated to HTTP by api/error_handlers.py
"""

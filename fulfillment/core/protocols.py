"""Boundary Protocols — contracts between the stores and the timer shell.

Invariants:
    - Stores NEVER import the asyncio scheduler; they receive one by injection
    - Scheduled callbacks receive their arguments by value (captured at schedule time)

Design Decisions:
    - Protocol over ABC: structural subtyping, tests pass a manual fake
"""

from collections.abc import Callable
from typing import Any, Protocol


class TransitionScheduler(Protocol):
    """Runs `callback(*args)` once, `delay` seconds from now, without blocking."""
    def call_later(
        self, delay: float, callback: Callable[..., Any], *args: Any,
    ) -> None: ...

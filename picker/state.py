"""Application state for the picker and its transitions.

Every transition is a pure function that returns a new :class:`AppState`;
the web layer swaps the current value for the returned one.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Callable, Iterable, Optional

from .comments import Comment


@dataclass(frozen=True)
class AppState:
    """Snapshot of what the page shows."""

    comments: tuple[Comment, ...] = ()
    selected: Optional[Comment] = None
    loading: bool = False
    error: Optional[str] = None

    @property
    def total_comments(self) -> int:
        return len(self.comments)

    def to_dict(self) -> dict:
        return {
            "loading": self.loading,
            "error": self.error,
            "total_comments": self.total_comments,
            "selected": self.selected.to_dict() if self.selected else None,
        }


def start_fetch(state: AppState) -> AppState:
    """Enter the loading state; the current collection stays visible."""

    return replace(state, loading=True, error=None)


def fetch_succeeded(state: AppState, comments: Iterable[Comment]) -> AppState:
    """Replace the collection with a freshly aggregated one."""

    return replace(
        state,
        comments=tuple(comments),
        selected=None,
        loading=False,
        error=None,
    )


def fetch_failed(state: AppState, message: str) -> AppState:
    """Leave the loading state with ``message``; nothing is committed."""

    return replace(state, loading=False, error=message)


def select(state: AppState, comment: Comment) -> AppState:
    return replace(state, selected=comment, error=None)


def selection_failed(state: AppState, message: str) -> AppState:
    return replace(state, error=message)


class StateStore:
    """Holds the current :class:`AppState` for a running application."""

    def __init__(self, initial: AppState | None = None) -> None:
        self.current = initial or AppState()

    def apply(self, transition: Callable[..., AppState], *args: Any) -> AppState:
        """Replace the current state with ``transition(current, *args)``."""

        self.current = transition(self.current, *args)
        return self.current


__all__ = [
    "AppState",
    "StateStore",
    "fetch_failed",
    "fetch_succeeded",
    "select",
    "selection_failed",
    "start_fetch",
]

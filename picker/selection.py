"""Pick a single comment out of an aggregated collection."""
from __future__ import annotations

import random
from typing import Sequence

from .comments import Comment

NO_COMMENTS_MESSAGE = "No comments available to pick from."


class NoCommentsError(LookupError):
    """Raised when a pick is requested over an empty collection."""

    def __init__(self, message: str = NO_COMMENTS_MESSAGE) -> None:
        super().__init__(message)


def pick_most_liked(comments: Sequence[Comment]) -> Comment:
    """Return the comment with the highest like count.

    The earliest comment wins when several share the maximum.
    """

    if not comments:
        raise NoCommentsError()
    # max() keeps the first maximal element it sees
    return max(comments, key=lambda c: c.like_count)


def pick_random(comments: Sequence[Comment], rng: random.Random | None = None) -> Comment:
    """Return a comment chosen uniformly at random.

    ``rng`` defaults to the module-level generator of :mod:`random`.
    """

    if not comments:
        raise NoCommentsError()
    index = (rng or random).randrange(len(comments))
    return comments[index]


__all__ = ["NoCommentsError", "NO_COMMENTS_MESSAGE", "pick_most_liked", "pick_random"]

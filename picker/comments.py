"""Comment value type and helpers to build it from YouTube API items."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from bs4 import BeautifulSoup


def clean_html(text: str) -> str:
    """Return the text-only content of an HTML fragment.

    Tags are dropped and entities decoded, so ``"<b>great</b> &amp; nice"``
    becomes ``"great & nice"``.
    """

    if not text:
        return ""
    return BeautifulSoup(text, "html.parser").get_text()


@dataclass(frozen=True)
class Comment:
    """A single top-level comment flattened from the API response."""

    text: str
    author: str
    profile_image_url: str
    like_count: int
    published_at: str

    def __post_init__(self) -> None:
        if self.like_count < 0:
            raise ValueError(f"like_count must be non-negative, got {self.like_count}")

    @classmethod
    def from_api_item(cls, item: Mapping[str, Any]) -> "Comment":
        """Build a comment from one ``commentThreads`` resource.

        Raises ``KeyError``/``TypeError``/``ValueError`` for items that do not
        carry the expected ``snippet.topLevelComment.snippet`` structure.
        """

        snippet = item["snippet"]["topLevelComment"]["snippet"]
        like_count = snippet["likeCount"]
        # bool is an int subclass; neither it nor floats/strings are counts
        if not isinstance(like_count, int) or isinstance(like_count, bool):
            raise ValueError(f"likeCount must be an integer, got {like_count!r}")
        return cls(
            text=clean_html(snippet["textDisplay"]),
            author=snippet["authorDisplayName"],
            profile_image_url=snippet["authorProfileImageUrl"],
            like_count=like_count,
            published_at=snippet["publishedAt"],
        )

    def to_dict(self) -> dict:
        return {
            "text": self.text,
            "author": self.author,
            "profile_image_url": self.profile_image_url,
            "like_count": self.like_count,
            "published_at": self.published_at,
        }


__all__ = ["Comment", "clean_html"]

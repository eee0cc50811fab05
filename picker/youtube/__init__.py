"""YouTube Data API helpers for aggregating a video's top-level comments.

Requests are authenticated with a static API key passed in by the caller
(see :func:`picker.config.load_config`). The API client is built on first
use, so tests can inject a fake service instead.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional

from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from ..comments import Comment

MAX_RESULTS_PER_PAGE = 100


class FetchFailedError(RuntimeError):
    """Raised when any page of a comment aggregation fails."""
    pass


def _get_service(api_key: str | None):
    """Build and return a key-authenticated YouTube Data API client."""

    # Avoid discovery cache writes inside containers
    return build("youtube", "v3", developerKey=api_key, cache_discovery=False)


class CommentAggregator:
    """Collect every top-level comment of a video, page by page.

    ``api_key`` is forwarded to the API client; ``service`` may be given to
    use an already built client instead (tests pass a fake here).
    """

    def __init__(self, api_key: str | None, *, service: Any | None = None) -> None:
        self._api_key = api_key
        self._service = service

    def _comment_threads(self):
        if self._service is None:
            self._service = _get_service(self._api_key)
        return self._service.commentThreads()

    async def fetch(self, video_id: str) -> tuple[Comment, ...]:
        """Return all top-level comments of ``video_id`` in page order.

        The identifier is sent as-is; the API is the one to reject an empty or
        unknown ID. Any failure on any page raises :class:`FetchFailedError`
        and nothing collected so far is returned.
        """

        logging.info("Fetching comments for video %r", video_id)
        collected: list[Comment] = []
        page_token: Optional[str] = None
        pages = 0

        while True:
            params = {
                "part": "snippet",
                "videoId": video_id,
                "maxResults": MAX_RESULTS_PER_PAGE,
            }
            if page_token:
                params["pageToken"] = page_token

            try:
                request = self._comment_threads().list(**params)
                res = await asyncio.to_thread(request.execute)
            except HttpError as e:
                status = getattr(getattr(e, "resp", None), "status", None)
                logging.warning(
                    "YouTube API error on page %s for %r (status %s): %s",
                    pages + 1, video_id, status, e,
                )
                raise FetchFailedError(
                    f"YouTube API error fetching comments (status {status}): {e}"
                ) from e
            except Exception as e:
                logging.exception("Request for page %s of %r failed", pages + 1, video_id)
                raise FetchFailedError(f"Request for comments failed: {e}") from e

            try:
                collected.extend(Comment.from_api_item(it) for it in res["items"])
                page_token = res.get("nextPageToken")
            except Exception as e:
                logging.warning(
                    "Malformed response on page %s for %r: %r", pages + 1, video_id, e,
                )
                raise FetchFailedError(f"Malformed comments response: {e!r}") from e

            pages += 1
            logging.debug("Page %s for %r brought the total to %s", pages, video_id, len(collected))
            if not page_token:
                break

        logging.info(
            "Fetched %s comments for %r across %s page(s)", len(collected), video_id, pages,
        )
        return tuple(collected)


__all__ = [
    "CommentAggregator",
    "FetchFailedError",
    "MAX_RESULTS_PER_PAGE",
]

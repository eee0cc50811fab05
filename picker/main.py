"""aiohttp web front end for picking a YouTube comment.

Usage:
  python -m picker.main
"""
from __future__ import annotations

import html
import logging
import random
import time

from aiohttp import web

from .config import PickerConfig, load_config
from .selection import NoCommentsError, pick_most_liked, pick_random
from .state import (
    AppState,
    StateStore,
    fetch_failed,
    fetch_succeeded,
    select,
    selection_failed,
    start_fetch,
)
from .youtube import CommentAggregator, FetchFailedError
from .youtube.urls import extract_video_id

FETCH_FAILED_MESSAGE = "Failed to fetch comments. Please try again."

CONFIG_KEY = web.AppKey("config", PickerConfig)
AGGREGATOR_KEY = web.AppKey("aggregator", CommentAggregator)
STATE_KEY = web.AppKey("state", StateStore)
RNG_KEY = web.AppKey("rng", random.Random)
START_TIME_KEY = web.AppKey("start_time", float)

_PAGE = """<!doctype html>
<html>
<head><meta charset="utf-8"><title>YouTube Comment Picker</title></head>
<body>
<h1>YouTube Comment Picker</h1>
<form method="post" action="/fetch">
  <input type="text" name="url" placeholder="Enter YouTube Video URL" size="60">
  <button type="submit"{fetch_disabled}>{fetch_label}</button>
</form>
<form method="post" action="/pick/most-liked" style="display:inline">
  <button type="submit"{pick_disabled}>Pick Most Liked Comment</button>
</form>
<form method="post" action="/pick/random" style="display:inline">
  <button type="submit"{pick_disabled}>Pick Random Comment</button>
</form>
{error}
<p>Total Comments: {total}</p>
{selected}
</body>
</html>
"""


def _render_selected(state: AppState) -> str:
    comment = state.selected
    if comment is None:
        return ""
    return (
        "<div>\n<h3>Selected Comment:</h3>\n"
        f'<img src="{html.escape(comment.profile_image_url)}" alt="Profile" width="80" height="80">\n'
        f"<p><strong>{html.escape(comment.author)}</strong></p>\n"
        f"<p>{html.escape(comment.text)}</p>\n"
        f"<p>Likes: {comment.like_count}</p>\n"
        "</div>"
    )


def render_page(state: AppState) -> str:
    """Return the HTML page for ``state``."""

    disabled = ' disabled'
    pick_blocked = state.loading or not state.comments
    return _PAGE.format(
        fetch_disabled=disabled if state.loading else "",
        fetch_label="Loading…" if state.loading else "Fetch Comments",
        pick_disabled=disabled if pick_blocked else "",
        error=f'<p class="error">{html.escape(state.error)}</p>' if state.error else "",
        total=state.total_comments,
        selected=_render_selected(state),
    )


async def index(request: web.Request) -> web.Response:
    state = request.app[STATE_KEY].current
    return web.Response(text=render_page(state), content_type="text/html")


async def fetch_comments(request: web.Request) -> web.Response:
    """Aggregate the comments of the submitted URL into the app state."""

    store = request.app[STATE_KEY]
    form = await request.post()
    url = str(form.get("url", ""))

    # No await between the check and start_fetch
    if store.current.loading:
        logging.warning("Rejecting fetch while another one is in progress")
        raise web.HTTPConflict(text="A fetch is already in progress.")
    store.apply(start_fetch)

    video_id = extract_video_id(url)
    if not video_id:
        logging.info("No video ID found in %r; sending the request anyway", url)

    try:
        comments = await request.app[AGGREGATOR_KEY].fetch(video_id)
    except FetchFailedError as e:
        logging.warning("Couldn't fetch comments for %r: %s", url, e)
        store.apply(fetch_failed, FETCH_FAILED_MESSAGE)
    except Exception:
        logging.exception("Unexpected error fetching comments for %r", url)
        store.apply(fetch_failed, FETCH_FAILED_MESSAGE)
    else:
        store.apply(fetch_succeeded, comments)
    finally:
        # Cancellation skips the handlers above
        if store.current.loading:
            store.apply(fetch_failed, FETCH_FAILED_MESSAGE)

    raise web.HTTPSeeOther("/")


async def pick_most_liked_comment(request: web.Request) -> web.Response:
    store = request.app[STATE_KEY]
    try:
        store.apply(select, pick_most_liked(store.current.comments))
    except NoCommentsError as e:
        store.apply(selection_failed, str(e))
    raise web.HTTPSeeOther("/")


async def pick_random_comment(request: web.Request) -> web.Response:
    store = request.app[STATE_KEY]
    try:
        store.apply(select, pick_random(store.current.comments, request.app[RNG_KEY]))
    except NoCommentsError as e:
        store.apply(selection_failed, str(e))
    raise web.HTTPSeeOther("/")


async def api_state(request: web.Request) -> web.Response:
    return web.json_response(request.app[STATE_KEY].current.to_dict())


async def health(request: web.Request) -> web.Response:
    app = request.app
    return web.json_response({
        "status": "ok",
        "loading": app[STATE_KEY].current.loading,
        "uptime_s": int(time.time() - app[START_TIME_KEY]),
    })


def create_app(
    config: PickerConfig,
    *,
    aggregator: CommentAggregator | None = None,
    rng: random.Random | None = None,
) -> web.Application:
    """Build the web application around a fresh, empty state."""

    app = web.Application()
    app[CONFIG_KEY] = config
    app[AGGREGATOR_KEY] = aggregator or CommentAggregator(config.api_key)
    app[STATE_KEY] = StateStore()
    app[RNG_KEY] = rng or random.Random()
    app[START_TIME_KEY] = time.time()

    app.add_routes([
        web.get("/", index),
        web.post("/fetch", fetch_comments),
        web.post("/pick/most-liked", pick_most_liked_comment),
        web.post("/pick/random", pick_random_comment),
        web.get("/api/state", api_state),
        web.get("/healthz", health),
    ])
    return app


def main() -> None:
    config = load_config()
    logging.basicConfig(level=config.resolved_log_level)
    if not config.api_key:
        logging.warning("YOUTUBE_API_KEY is not set; every fetch will be rejected upstream")

    app = create_app(config)
    logging.info("Starting comment picker on http://%s:%s/", config.host, config.port)
    web.run_app(app, host=config.host, port=config.port, print=None)


if __name__ == "__main__":
    main()

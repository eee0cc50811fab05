import pytest


def make_item(text="hi", likes=0, author="someone"):
    return {
        "snippet": {
            "topLevelComment": {
                "snippet": {
                    "textDisplay": text,
                    "authorDisplayName": author,
                    "authorProfileImageUrl": f"https://yt3.ggpht.com/{author}.jpg",
                    "likeCount": likes,
                    "publishedAt": "2024-01-01T00:00:00Z",
                }
            }
        }
    }


def make_service(pages):
    """Create a fake YouTube API service with controllable behavior.

    pages: list of dicts to return from successive list().execute() calls,
    or Exceptions to raise instead.
    """

    class CommentThreadsResource:
        def __init__(self, outer):
            self.outer = outer

        def list(self, **params):
            self.outer.calls.append(params)

            class Exec:
                def execute(self_inner):
                    i = self.outer._page_index
                    self.outer._page_index += 1
                    page = pages[i]
                    if isinstance(page, Exception):
                        raise page
                    return page

            return Exec()

    class Service:
        def __init__(self):
            self._page_index = 0
            self.calls = []

        def commentThreads(self):
            return CommentThreadsResource(self)

    return Service()


def three_pages():
    return [
        {
            "items": [make_item(f"a{i}") for i in range(100)],
            "nextPageToken": "tok2",
        },
        {
            "items": [make_item(f"b{i}") for i in range(100)],
            "nextPageToken": "tok3",
        },
        {"items": [make_item(f"c{i}") for i in range(37)]},
    ]


@pytest.mark.asyncio
async def test_fetch_concatenates_pages_in_order():
    from picker.youtube import CommentAggregator

    service = make_service(three_pages())
    aggregator = CommentAggregator("key", service=service)

    comments = await aggregator.fetch("vid123")

    assert len(comments) == 237
    texts = [c.text for c in comments]
    assert texts[:2] == ["a0", "a1"]
    assert texts[100] == "b0"
    assert texts[200] == "c0"
    assert texts[-1] == "c36"


@pytest.mark.asyncio
async def test_fetch_threads_page_tokens():
    from picker.youtube import CommentAggregator

    service = make_service(three_pages())
    await CommentAggregator("key", service=service).fetch("vid123")

    assert len(service.calls) == 3
    assert "pageToken" not in service.calls[0]
    assert service.calls[1]["pageToken"] == "tok2"
    assert service.calls[2]["pageToken"] == "tok3"
    for params in service.calls:
        assert params["part"] == "snippet"
        assert params["videoId"] == "vid123"
        assert params["maxResults"] == 100


@pytest.mark.asyncio
async def test_fetch_stops_on_empty_token():
    from picker.youtube import CommentAggregator

    service = make_service([{"items": [make_item()], "nextPageToken": ""}])
    comments = await CommentAggregator("key", service=service).fetch("vid")

    assert len(comments) == 1
    assert len(service.calls) == 1


@pytest.mark.asyncio
async def test_fetch_empty_video_has_no_comments():
    from picker.youtube import CommentAggregator

    service = make_service([{"items": []}])
    assert await CommentAggregator("key", service=service).fetch("vid") == ()


@pytest.mark.asyncio
async def test_fetch_failure_on_second_page_discards_everything():
    from picker.youtube import CommentAggregator, FetchFailedError

    pages = three_pages()
    pages[1] = ConnectionError("connection reset")
    service = make_service(pages)

    with pytest.raises(FetchFailedError):
        await CommentAggregator("key", service=service).fetch("vid123")

    assert len(service.calls) == 2


@pytest.mark.asyncio
async def test_fetch_wraps_http_error():
    import httplib2
    from googleapiclient.errors import HttpError

    from picker.youtube import CommentAggregator, FetchFailedError

    error = HttpError(
        httplib2.Response({"status": 403}),
        b'{"error": {"message": "API key not valid"}}',
    )
    service = make_service([error])
    with pytest.raises(FetchFailedError) as ei:
        await CommentAggregator("bad-key", service=service).fetch("vid")

    assert "status 403" in str(ei.value)
    assert ei.value.__cause__ is error


@pytest.mark.asyncio
async def test_transport_error_not_reported_as_api_error(caplog):
    from picker.youtube import CommentAggregator, FetchFailedError

    service = make_service([ConnectionError("connection reset")])
    with caplog.at_level("WARNING"):
        with pytest.raises(FetchFailedError) as ei:
            await CommentAggregator("key", service=service).fetch("vid")

    assert "YouTube API error" not in str(ei.value)
    assert not any("YouTube API error" in message for message in caplog.messages)
    assert isinstance(ei.value.__cause__, ConnectionError)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "page",
    [
        {},
        {"items": [{"snippet": {}}]},
        {"items": [make_item(likes="lots")]},
        {"items": [make_item(likes=-1)]},
        {"items": [make_item(likes=float("inf"))]},
        {"items": [make_item(likes=9.7)]},
        {"items": [make_item(likes="5")]},
        {"items": [make_item(likes=True)]},
        {"items": None},
    ],
)
async def test_fetch_malformed_response_fails(page):
    from picker.youtube import CommentAggregator, FetchFailedError

    service = make_service([page])
    with pytest.raises(FetchFailedError):
        await CommentAggregator("key", service=service).fetch("vid")


@pytest.mark.asyncio
async def test_fetch_strips_html_from_text():
    from picker.youtube import CommentAggregator

    service = make_service([{"items": [make_item("<b>great</b> &amp; nice", likes=4)]}])
    (comment,) = await CommentAggregator("key", service=service).fetch("vid")

    assert comment.text == "great & nice"
    assert comment.like_count == 4
    assert comment.author == "someone"


@pytest.mark.asyncio
async def test_fetch_sends_empty_identifier_upstream():
    from picker.youtube import CommentAggregator

    service = make_service([{"items": []}])
    await CommentAggregator("key", service=service).fetch("")

    assert service.calls[0]["videoId"] == ""


@pytest.mark.asyncio
async def test_service_built_lazily_with_api_key(monkeypatch):
    from picker import youtube as yt

    built = []
    service = make_service([{"items": []}])

    def fake_get_service(api_key):
        built.append(api_key)
        return service

    monkeypatch.setattr(yt, "_get_service", fake_get_service)

    aggregator = yt.CommentAggregator("secret")
    assert built == []
    await aggregator.fetch("vid")
    await aggregator.fetch("vid")

    assert built == ["secret"]


@pytest.mark.asyncio
async def test_any_error_while_mapping_items_fails_the_fetch(monkeypatch):
    from picker import youtube as yt

    def overflow(item):
        raise OverflowError("cannot convert float infinity to integer")

    monkeypatch.setattr(yt.Comment, "from_api_item", staticmethod(overflow))

    service = make_service([{"items": [make_item()]}])
    with pytest.raises(yt.FetchFailedError) as ei:
        await yt.CommentAggregator("key", service=service).fetch("vid")

    assert isinstance(ei.value.__cause__, OverflowError)

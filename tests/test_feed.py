from datetime import datetime
from typing import Any

import pytest
import requests

from blogindex import feed
from blogindex.feed import FeedClient, FeedError


class _Response:
    def __init__(self, status_code: int, payload: Any) -> None:
        self.status_code = status_code
        self._payload = payload

    def json(self) -> Any:
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


def _stub_get(monkeypatch: pytest.MonkeyPatch, response: _Response, seen: list[str] | None = None) -> None:
    def fake_get(url: str, **kwargs: Any) -> _Response:
        if seen is not None:
            seen.append(url)
        return response

    monkeypatch.setattr(feed.requests, "get", fake_get)


def test_fetch_posts_from_list(monkeypatch: pytest.MonkeyPatch) -> None:
    seen: list[str] = []
    payload = [
        {"title": "Mongo", "date": "2018-09-10", "url": "/docker/mongo", "category": "docker"},
        {"title": "Auth", "date": "2019-02-03", "url": "/nextjs/auth", "category": "nextjs"},
    ]
    _stub_get(monkeypatch, _Response(200, payload), seen)

    posts = FeedClient("https://blog.example/").fetch_posts("/posts.json")
    assert seen == ["https://blog.example/posts.json"]
    assert [p.title for p in posts] == ["Mongo", "Auth"]
    assert posts[0].date == datetime(2018, 9, 10)
    assert posts[1].category == "nextjs"


def test_fetch_posts_from_object(monkeypatch: pytest.MonkeyPatch) -> None:
    _stub_get(monkeypatch, _Response(200, {"posts": [{"title": "Only"}]}))
    posts = FeedClient("https://blog.example/posts.json").fetch_posts()
    assert [p.title for p in posts] == ["Only"]


def test_http_error(monkeypatch: pytest.MonkeyPatch) -> None:
    _stub_get(monkeypatch, _Response(404, {}))
    with pytest.raises(FeedError):
        FeedClient("https://blog.example").fetch_posts("/posts.json")


def test_non_json_payload(monkeypatch: pytest.MonkeyPatch) -> None:
    _stub_get(monkeypatch, _Response(200, ValueError("not json")))
    with pytest.raises(FeedError):
        FeedClient("https://blog.example").fetch_posts()


def test_bad_shape(monkeypatch: pytest.MonkeyPatch) -> None:
    _stub_get(monkeypatch, _Response(200, {"items": []}))
    with pytest.raises(FeedError):
        FeedClient("https://blog.example").fetch_posts()


def test_transport_error(monkeypatch: pytest.MonkeyPatch) -> None:
    def boom(url: str, **kwargs: Any) -> None:
        raise requests.ConnectionError("down")

    monkeypatch.setattr(feed.requests, "get", boom)
    with pytest.raises(FeedError):
        FeedClient("https://blog.example").fetch_posts()


def test_empty_url_rejected() -> None:
    with pytest.raises(FeedError):
        FeedClient("  ")

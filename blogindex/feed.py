"""
feed.py

Responsibility: Isolate all HTTP access to a site's published post metadata.

Site generators can publish post metadata as JSON (for example a `posts.json`
built from a Liquid loop). This module is the only place that sends HTTP
requests; everything else works on `Post` records.
"""

from __future__ import annotations

import logging
from typing import Any

import requests

from blogindex.posts import Post, post_from_record

logger = logging.getLogger(__name__)


class FeedError(RuntimeError):
    pass


class FeedClient:
    def __init__(self, base_url: str, timeout: float = 30) -> None:
        if not base_url.strip():
            raise FeedError("Feed URL is required.")
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout

    def _headers(self) -> dict[str, str]:
        return {
            "Accept": "application/json",
            "User-Agent": "blogindex",
        }

    def _get(self, path: str) -> Any:
        url = f"{self._base_url}{path}" if path else self._base_url
        try:
            r = requests.get(url, headers=self._headers(), timeout=self._timeout)
        except requests.RequestException as e:
            raise FeedError(f"Cannot fetch {url}: {e}") from e
        if r.status_code >= 400:
            raise FeedError(f"Feed error {r.status_code} GET {url}")
        try:
            return r.json()
        except ValueError as e:
            raise FeedError(f"Feed at {url} did not return JSON") from e

    def fetch_posts(self, path: str = "") -> list[Post]:
        """
        Fetch post records and return them in feed order.

        The payload is either a list of records or an object with a `posts` list.
        """
        data = self._get(path)
        if isinstance(data, dict):
            data = data.get("posts")
        if not isinstance(data, list):
            raise FeedError("Feed payload must be a list of posts or an object with a `posts` list.")

        source = f"{self._base_url}{path}"
        posts = [post_from_record(record, source=source) for record in data if isinstance(record, dict)]
        logger.info("Fetched %d posts from %s", len(posts), source)
        return posts

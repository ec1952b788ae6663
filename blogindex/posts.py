"""
posts.py

Responsibility: Load blog posts into `Post` records.

Posts are Markdown files with YAML front matter, laid out Jekyll-style
(`_posts/YYYY-MM-DD-some-title.md`). The body is kept as opaque text; only the
metadata used by the category index is interpreted here.
"""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any, Mapping

import yaml

from blogindex.categories import slugify
from blogindex.config import SiteConfig

logger = logging.getLogger(__name__)

POST_SUFFIXES = (".md", ".markdown")

_FILENAME_RE = re.compile(r"^(?P<year>\d{4})-(?P<month>\d{2})-(?P<day>\d{2})-(?P<slug>.+)$")

_OPEN_RE = re.compile(r"\A---[ \t]*\n")
_CLOSE_RE = re.compile(r"^(?:---|\.\.\.)[ \t]*(?:\n|\Z)", re.MULTILINE)

# Jekyll's built-in permalink styles.
PERMALINK_STYLES = {
    "date": "/:categories/:year/:month/:day/:title:output_ext",
    "pretty": "/:categories/:year/:month/:day/:title/",
    "ordinal": "/:categories/:year/:y_day/:title:output_ext",
    "none": "/:categories/:title:output_ext",
}


class PostError(ValueError):
    pass


@dataclass(frozen=True)
class Post:
    """A single blog entry. `date` is whatever could be parsed from the metadata."""

    title: str
    date: datetime | date | str | None
    category: str
    url: str
    body: str = ""
    source: str = ""


def split_front_matter(text: str) -> tuple[dict[str, Any] | None, str]:
    """
    If the markdown begins with YAML front matter delimited by '---', parse it.
    The closing line may be '---' or '...'; trailing whitespace is allowed.
    Returns (front_matter_dict_or_none, remaining_markdown_text).
    """
    text = text.replace("\r\n", "\n")
    opening = _OPEN_RE.match(text)
    if opening is None:
        return None, text

    closing = _CLOSE_RE.search(text, opening.end())
    if closing is None:
        raise PostError("Front matter starts with '---' but no closing '---' was found.")

    fm_text = text[opening.end() : closing.start()]
    rest = text[closing.end() :]
    try:
        data = yaml.safe_load(fm_text) or {}
    except yaml.YAMLError as e:
        raise PostError(f"Front matter is not valid YAML: {e}") from e
    if not isinstance(data, dict):
        raise PostError("Front matter must be a mapping/object at the top level.")
    return data, rest


def parse_date(value: Any) -> datetime | date:
    """
    Parse a post date.

    Accepts date/datetime objects (YAML produces these for unquoted dates),
    ISO-8601 strings and Jekyll's `YYYY-MM-DD HH:MM:SS +ZZZZ` form.
    """
    if isinstance(value, (datetime, date)):
        return value
    if not isinstance(value, str) or not value.strip():
        raise PostError(f"Unsupported date value: {value!r}")

    raw = value.strip()
    iso = raw[:-1] + "+00:00" if raw.endswith("Z") else raw
    try:
        return datetime.fromisoformat(iso)
    except ValueError:
        pass
    for fmt in ("%Y-%m-%d %H:%M:%S %z", "%Y-%m-%d %H:%M %z"):
        try:
            return datetime.strptime(raw, fmt)
        except ValueError:
            continue
    raise PostError(f"Unrecognised date format: {raw!r}")


def _first_category(meta: Mapping[str, Any]) -> str | None:
    category = meta.get("category")
    if category is not None and str(category).strip():
        return str(category).strip()

    categories = meta.get("categories")
    if isinstance(categories, str):
        categories = categories.split()
    if isinstance(categories, list):
        for c in categories:
            if c is not None and str(c).strip():
                return str(c).strip()
    return None


def _expand_permalink(pattern: str, *, category: str, when: datetime | date | None, slug: str) -> str:
    pattern = PERMALINK_STYLES.get(pattern, pattern)
    parts = {
        ":categories": slugify(category),
        ":category": slugify(category),
        ":title": slug,
        ":output_ext": ".html",
        ":year": f"{when.year:04d}" if when else "",
        ":short_year": f"{when.year % 100:02d}" if when else "",
        ":month": f"{when.month:02d}" if when else "",
        ":i_month": str(when.month) if when else "",
        ":day": f"{when.day:02d}" if when else "",
        ":i_day": str(when.day) if when else "",
        ":y_day": when.strftime("%j") if when else "",
    }
    url = pattern
    # Longest placeholder first so `:categories` is not clobbered by `:category`.
    for key in sorted(parts, key=len, reverse=True):
        url = url.replace(key, parts[key])
    url = re.sub(r"/{2,}", "/", url)
    return url if url.startswith("/") else "/" + url


def load_post(post_path: str | Path, config: SiteConfig) -> Post:
    """
    Parse one post file into a `Post`.

    Front matter wins; the filename supplies the date and title slug when the
    front matter does not.
    """
    post, _meta = _read_post(Path(post_path), config)
    return post


def _read_post(path: Path, config: SiteConfig) -> tuple[Post, dict[str, Any]]:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise PostError(f"Cannot read post: {path}") from e

    try:
        meta, body = split_front_matter(text)
    except PostError as e:
        raise PostError(f"{path}: {e}") from e
    meta = meta or {}

    m = _FILENAME_RE.match(path.stem)
    slug = m.group("slug") if m else path.stem

    when: datetime | date | None = None
    try:
        if meta.get("date") is not None:
            when = parse_date(meta["date"])
        elif m:
            when = date(int(m.group("year")), int(m.group("month")), int(m.group("day")))
    except (PostError, ValueError) as e:
        raise PostError(f"{path}: {e}") from e

    title = str(meta.get("title") or slug)
    category = _first_category(meta) or config.default_category
    url = meta.get("permalink") or meta.get("url")
    if not url:
        url = _expand_permalink(config.permalink, category=category, when=when, slug=slug)

    post = Post(
        title=title,
        date=when,
        category=category,
        url=str(url),
        body=body,
        source=str(path),
    )
    return post, meta


def _iter_post_files(posts_dir: Path) -> list[Path]:
    """
    Return all post files under posts_dir in deterministic relative-path order.
    """
    files: list[Path] = []
    for root, _dirs, filenames in os.walk(posts_dir):
        root_path = Path(root)
        for name in filenames:
            if name.lower().endswith(POST_SUFFIXES):
                files.append(root_path / name)
    files.sort(key=lambda p: str(p.relative_to(posts_dir)).replace(os.sep, "/"))
    return files


def _sort_key(post: Post) -> datetime:
    when = post.date
    if isinstance(when, datetime):
        if when.tzinfo is not None:
            return when.astimezone(timezone.utc).replace(tzinfo=None)
        return when
    if isinstance(when, date):
        return datetime(when.year, when.month, when.day)
    return datetime.min


def load_posts(posts_dir: str | Path, config: SiteConfig) -> list[Post]:
    """
    Load every post under posts_dir, newest first.

    Posts with equal dates keep their path order. Posts marked
    `published: false` are skipped.
    """
    root = Path(posts_dir)
    if not root.is_dir():
        raise PostError(f"Posts directory not found: {root}")

    posts: list[Post] = []
    for path in _iter_post_files(root):
        post, meta = _read_post(path, config)
        if meta.get("published", True) is False:
            logger.info("Skipping unpublished post %s", path)
            continue
        posts.append(post)

    logger.info("Loaded %d posts from %s", len(posts), root)
    return sorted(posts, key=_sort_key, reverse=True)


def post_from_record(record: Mapping[str, Any], source: str = "") -> Post:
    """
    Build a `Post` from a metadata record (`title`, `date`, `url`, `category`).

    No validation: missing keys become empty strings and a date that cannot be
    parsed is kept as the raw value so the renderer prints it as given.
    """
    raw_date = record.get("date")
    when: datetime | date | str | None
    try:
        when = parse_date(raw_date) if raw_date is not None else None
    except PostError:
        when = str(raw_date)

    return Post(
        title=str(record.get("title") or ""),
        date=when,
        category=str(record.get("category") or ""),
        url=str(record.get("url") or ""),
        body=str(record.get("body") or ""),
        source=source,
    )

"""
categories.py

Responsibility: Group posts by category and derive the anchor slug of each category.

Categories are a view over the posts, not owners of them: grouping never
re-sorts, so each group lists its posts in the order they were given.
"""

from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable

if TYPE_CHECKING:
    from blogindex.posts import Post

FALLBACK_SLUG = "category"

_NON_ALNUM_RE = re.compile(r"[^a-z0-9]+")


def slugify(name: str) -> str:
    """
    Lowercase, ASCII-folded, hyphen-separated form of `name`.

    Idempotent: slugify(slugify(x)) == slugify(x).
    """
    folded = unicodedata.normalize("NFKD", str(name)).encode("ascii", "ignore").decode("ascii")
    slug = _NON_ALNUM_RE.sub("-", folded.lower()).strip("-")
    return slug or FALLBACK_SLUG


@dataclass(frozen=True)
class Category:
    name: str
    posts: tuple[Post, ...] = ()

    @property
    def slug(self) -> str:
        return slugify(self.name)


def group_by_category(posts: Iterable[Post]) -> list[Category]:
    """
    Group posts by their `category`, in order of first appearance.
    """
    groups: dict[str, list[Post]] = {}
    for post in posts:
        groups.setdefault(post.category, []).append(post)
    return [Category(name=name, posts=tuple(items)) for name, items in groups.items()]

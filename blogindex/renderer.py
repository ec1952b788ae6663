"""
renderer.py

Responsibility: Deterministically render the category index to HTML.

Rules:
- One heading block per category, in the order given; its `id` is the category slug.
- Posts are listed in the order given; nothing is re-sorted here.
- No validation: missing titles or URLs render as whatever placeholder the
  upstream metadata supplied.

This module intentionally does NOT know about post files, feeds, or CLI parsing.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path
from typing import Any, Iterable, Mapping, Sequence, Union

from jinja2 import Environment, PackageLoader, StrictUndefined, TemplateError, select_autoescape

from blogindex.categories import Category
from blogindex.posts import Post, PostError, parse_date, post_from_record

DEFAULT_DATE_FORMAT = "%B %d, %Y"

FRAGMENT_TEMPLATE = "category_index.html"
PAGE_TEMPLATE = "page.html"

PostLike = Union[Post, Mapping[str, Any]]
CategoryLike = Union[Category, tuple[str, Sequence[PostLike]]]


class RenderError(RuntimeError):
    pass


@dataclass(frozen=True)
class RenderResult:
    path: Path
    categories: int
    posts: int


def format_date(value: Any, fmt: str = DEFAULT_DATE_FORMAT) -> str:
    """
    Jinja filter: "Month DD, YYYY" by default. Unparseable values are printed as given.
    """
    if value is None:
        return ""
    if isinstance(value, str):
        try:
            value = parse_date(value)
        except PostError:
            return value
    if isinstance(value, (datetime, date)):
        return value.strftime(fmt)
    return str(value)


def iso_date(value: Any) -> str:
    """Jinja filter: machine readable `YYYY-MM-DD`, or "" when the value is not a date."""
    if isinstance(value, str):
        try:
            value = parse_date(value)
        except PostError:
            return ""
    if isinstance(value, (datetime, date)):
        return value.strftime("%Y-%m-%d")
    return ""


def _environment() -> Environment:
    env = Environment(
        loader=PackageLoader("blogindex", "templates"),
        autoescape=select_autoescape(["html"]),
        undefined=StrictUndefined,
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["format_date"] = format_date
    env.filters["iso_date"] = iso_date
    return env


def _as_post(item: PostLike) -> Post:
    if isinstance(item, Post):
        return item
    return post_from_record(item)


def _as_categories(categories: Iterable[CategoryLike]) -> list[Category]:
    out: list[Category] = []
    for item in categories:
        if isinstance(item, Category):
            out.append(item)
            continue
        name, posts = item
        out.append(Category(name=str(name), posts=tuple(_as_post(p) for p in posts)))
    return out


def _render(template_name: str, context: dict[str, Any]) -> str:
    try:
        template = _environment().get_template(template_name)
        return template.render(**context)
    except TemplateError as e:
        raise RenderError(f"Failed rendering template: {template_name}") from e


def render_category_index(
    categories: Iterable[CategoryLike],
    *,
    date_format: str = DEFAULT_DATE_FORMAT,
) -> str:
    """
    Render the category index as an HTML fragment (inline CSS included).
    """
    return _render(
        FRAGMENT_TEMPLATE,
        {"categories": _as_categories(categories), "date_format": date_format},
    )


def render_page(
    categories: Iterable[CategoryLike],
    *,
    site_title: str = "Blog",
    date_format: str = DEFAULT_DATE_FORMAT,
) -> str:
    """
    Render the category index wrapped in a complete HTML document.
    """
    return _render(
        PAGE_TEMPLATE,
        {
            "categories": _as_categories(categories),
            "date_format": date_format,
            "site_title": site_title,
        },
    )


def write_category_index(
    categories: Iterable[CategoryLike],
    destination: str | Path,
    *,
    standalone: bool = False,
    site_title: str = "Blog",
    date_format: str = DEFAULT_DATE_FORMAT,
) -> RenderResult:
    """
    Render the index and write it to `destination`, creating parent directories.
    """
    cats = _as_categories(categories)
    if standalone:
        html = render_page(cats, site_title=site_title, date_format=date_format)
    else:
        html = render_category_index(cats, date_format=date_format)

    dst_path = Path(destination).resolve()
    dst_path.parent.mkdir(parents=True, exist_ok=True)
    # Normalize newlines for stable cross-platform output.
    dst_path.write_text(html, encoding="utf-8", newline="\n")

    return RenderResult(
        path=dst_path,
        categories=len(cats),
        posts=sum(len(c.posts) for c in cats),
    )

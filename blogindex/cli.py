"""
cli.py

Responsibility: CLI entrypoint for blogindex.

High-level flow (command `build`):
1) Load site config (`_config.yml`) and apply CLI overrides
2) Load posts from the posts directory, or fetch them from a JSON feed
3) Group posts by category
4) Render the category index and write it to the output file

This module should orchestrate behavior but keep concerns isolated:
- Config: `config.py`
- Post loading: `posts.py` / `feed.py`
- Grouping: `categories.py`
- Rendering: `renderer.py`
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path

from blogindex import __version__
from blogindex.categories import Category, group_by_category
from blogindex.config import CONFIG_FILENAME, ConfigError, SiteConfig, load_config
from blogindex.feed import FeedClient, FeedError
from blogindex.posts import Post, PostError, load_posts
from blogindex.renderer import RenderError, write_category_index

logger = logging.getLogger(__name__)


def _load_site_config(args: argparse.Namespace) -> tuple[Path, SiteConfig]:
    site_dir = Path(args.site_dir).resolve()
    config_path = Path(args.config) if args.config else site_dir / CONFIG_FILENAME
    # Only an explicit --config has to exist.
    config = load_config(config_path, required=bool(args.config)).with_overrides(
        posts_dir=args.posts_dir,
        feed_url=args.feed_url,
    )
    return site_dir, config


def _collect_categories(site_dir: Path, config: SiteConfig) -> list[Category]:
    posts: list[Post]
    if config.feed_url:
        posts = FeedClient(config.feed_url).fetch_posts()
        # Feed records without a category still need a group to land in.
        posts = [p if p.category else replace(p, category=config.default_category) for p in posts]
    else:
        posts_dir = Path(config.posts_dir)
        if not posts_dir.is_absolute():
            posts_dir = site_dir / posts_dir
        posts = load_posts(posts_dir, config)

    categories = group_by_category(posts)
    logger.info("Grouped %d posts into %d categories", len(posts), len(categories))
    return categories


def build_cmd(args: argparse.Namespace) -> int:
    site_dir, config = _load_site_config(args)

    # CLI overrides
    config = config.with_overrides(
        output=args.output,
        title=args.title,
        date_format=args.date_format,
        standalone=args.standalone,
    )

    categories = _collect_categories(site_dir, config)

    output = Path(config.output)
    if not output.is_absolute():
        output = site_dir / output

    result = write_category_index(
        categories,
        output,
        standalone=config.standalone,
        site_title=config.title,
        date_format=config.date_format,
    )
    logger.info("Wrote %d categories (%d posts) to %s", result.categories, result.posts, result.path)
    return 0


def categories_cmd(args: argparse.Namespace) -> int:
    site_dir, config = _load_site_config(args)
    for category in _collect_categories(site_dir, config):
        print(f"{category.name}\t#{category.slug}\t{len(category.posts)}")
    return 0


def _add_source_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("site_dir", nargs="?", default=".", help="Site root directory (default: current directory)")
    p.add_argument("--config", default=None, help=f"Config file (default: SITE_DIR/{CONFIG_FILENAME})")
    p.add_argument("--posts-dir", default=None, help="Posts directory, relative to SITE_DIR (overrides config)")
    p.add_argument("--feed-url", default=None, help="Fetch post metadata from a JSON feed instead of the posts directory")


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="blogindex", description="Render the category index of a static Markdown blog")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = p.add_subparsers(dest="command", required=True)

    b = sub.add_parser("build", help="Render the category index page")
    _add_source_args(b)
    b.add_argument("--output", "-o", default=None, help="Output file, relative to SITE_DIR (overrides config)")
    b.add_argument("--title", default=None, help="Site title used by --standalone pages")
    b.add_argument("--date-format", default=None, help="strftime format for post dates (default: '%%B %%d, %%Y')")
    b.add_argument("--standalone", dest="standalone", action="store_true", default=None, help="Write a complete HTML page")
    b.add_argument("--fragment", dest="standalone", action="store_false", default=None, help="Write an HTML fragment only")
    b.set_defaults(func=build_cmd)

    c = sub.add_parser("categories", help="List categories with their anchor slug and post count")
    _add_source_args(c)
    c.set_defaults(func=categories_cmd)

    return p


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)
    try:
        return int(args.func(args))
    except (ConfigError, PostError, FeedError, RenderError) as e:
        logger.error("%s", e)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())

"""
blogindex package

This package builds the category listing page of a static Markdown blog.

Key responsibilities are split across modules:
- `config.py`: load the site configuration (`_config.yml`)
- `posts.py`: read post front matter into `Post` records
- `feed.py`: fetch post metadata published as JSON by the site generator
- `categories.py`: slugify category names and group posts by category
- `renderer.py`: render the category index through Jinja2 templates
- `cli.py`: CLI entrypoint and orchestration (load -> group -> render)
"""

from __future__ import annotations

__all__ = ["__version__"]

__version__ = "0.1.0"

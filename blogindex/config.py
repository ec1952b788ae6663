"""
config.py

Responsibility: Load the site configuration from a Jekyll-style `_config.yml`.

Only the keys this tool understands are read; anything else in the file
belongs to the site generator and is ignored.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "_config.yml"


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class SiteConfig:
    """Settings used to load posts and render the category index."""

    title: str = "Blog"
    posts_dir: str = "_posts"
    output: str = "categories.html"
    # Placeholders: :category, :year, :month, :day, :title
    permalink: str = "/:category/:year/:month/:day/:title.html"
    default_category: str = "Uncategorized"
    date_format: str = "%B %d, %Y"
    standalone: bool = False
    feed_url: str | None = None

    def with_overrides(self, **overrides: Any) -> SiteConfig:
        """
        Return a copy with every non-None override applied (CLI flags win over the file).
        """
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes)


def _coerce(name: str, value: Any) -> Any:
    if name == "standalone":
        if not isinstance(value, bool):
            raise ConfigError(f"`{name}` must be a boolean, got {value!r}")
        return value
    if isinstance(value, (dict, list)):
        raise ConfigError(f"`{name}` must be a scalar value.")
    return str(value).strip()


def load_config(config_path: str | Path, *, required: bool = False) -> SiteConfig:
    """
    Load a `SiteConfig` from a YAML file.

    A missing file yields the defaults unless `required` is set. Unknown keys are ignored.
    """
    path = Path(config_path)
    if not path.exists():
        if required:
            raise ConfigError(f"Config file not found: {path}")
        logger.debug("No config file at %s, using defaults", path)
        return SiteConfig()

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Config file is not valid YAML: {path}") from e
    if not isinstance(data, dict):
        raise ConfigError("Config must be a mapping/object at the top level.")

    known = {f.name for f in fields(SiteConfig)}
    values = {k: _coerce(k, v) for k, v in data.items() if k in known and v is not None}
    logger.debug("Loaded config keys %s from %s", sorted(values), path)
    return SiteConfig(**values)

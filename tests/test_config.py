from pathlib import Path

import pytest

from blogindex.config import ConfigError, SiteConfig, load_config


def test_missing_file_gives_defaults(tmp_path: Path) -> None:
    assert load_config(tmp_path / "_config.yml") == SiteConfig()


def test_missing_required_file_is_rejected(tmp_path: Path) -> None:
    with pytest.raises(ConfigError):
        load_config(tmp_path / "custom.yml", required=True)


def test_load_known_keys_and_ignore_unknown(tmp_path: Path) -> None:
    path = tmp_path / "_config.yml"
    path.write_text(
        "title: Notes\nposts_dir: posts\nstandalone: true\ntheme: minima\nplugins: [jekyll-feed]\n",
        encoding="utf-8",
    )
    config = load_config(path)
    assert config.title == "Notes"
    assert config.posts_dir == "posts"
    assert config.standalone is True
    assert config.output == "categories.html"


def test_non_mapping_is_rejected(tmp_path: Path) -> None:
    path = tmp_path / "_config.yml"
    path.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(path)


def test_invalid_yaml_is_rejected(tmp_path: Path) -> None:
    path = tmp_path / "_config.yml"
    path.write_text("title: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(path)


def test_standalone_must_be_bool(tmp_path: Path) -> None:
    path = tmp_path / "_config.yml"
    path.write_text("standalone: sometimes\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(path)


def test_with_overrides_skips_none() -> None:
    config = SiteConfig(title="Notes").with_overrides(title=None, output="out.html")
    assert config.title == "Notes"
    assert config.output == "out.html"

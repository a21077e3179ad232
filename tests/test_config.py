import pytest

from blogsmith.config import DEFAULT_CONFIG, SiteConfig, load_config, load_site_config
from blogsmith.errors import BlogError


def test_load_config_defaults(tmp_path):
    assert load_config(tmp_path) == DEFAULT_CONFIG


def test_load_config_overrides(tmp_path):
    (tmp_path / "blog.yaml").write_text(
        "url: https://me.example.org/\nprepath: /~me/\ntitle: Mine\nconverter: mistune\n",
        encoding="utf-8",
    )
    config = load_site_config(tmp_path)
    assert config.url == "https://me.example.org"
    assert config.prepath == "~me"
    assert config.title == "Mine"
    assert config.converter == "mistune"
    assert config.post_prefix == "post/"
    assert "node_modules" in config.exclude
    assert config.root == tmp_path


def test_invalid_config_raises(tmp_path):
    (tmp_path / "blog.yaml").write_text("url: [\n", encoding="utf-8")
    with pytest.raises(BlogError):
        load_config(tmp_path)
    (tmp_path / "blog.yaml").write_text("- a\n", encoding="utf-8")
    with pytest.raises(BlogError):
        load_config(tmp_path)


def test_concurrency_must_be_positive(tmp_path):
    with pytest.raises(BlogError):
        SiteConfig.from_mapping(tmp_path, {"concurrency": 0})


def test_default_metadata_uses_single_build_time(tmp_path):
    config = SiteConfig.from_mapping(tmp_path, {"author": "Ann", "banner": "b.jpg"})
    first = config.default_metadata()
    second = config.default_metadata()
    assert first["date"] == second["date"] == config.build_time
    assert first["author"] == "Ann"
    assert first["banner"] == "b.jpg"
    assert first["tags"] == ()


def test_concurrency_must_be_an_integer(tmp_path):
    with pytest.raises(BlogError, match="concurrency must be an integer"):
        SiteConfig.from_mapping(tmp_path, {"concurrency": "many"})

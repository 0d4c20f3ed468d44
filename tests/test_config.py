"""Tests for pagegen.config."""

import pytest

from pagegen.config import DEFAULT_FEED_LIMIT, SiteConfig, load_config
from pagegen.errors import ConfigError


class TestLoadConfig:
    def test_missing_file_is_empty(self, tmp_path):
        assert load_config(tmp_path / "site.toml") == {}

    def test_reads_toml(self, tmp_path):
        path = tmp_path / "site.toml"
        path.write_text('title = "Blog"\n[location]\ncity = "Lisbon"\n', encoding="utf-8")
        assert load_config(path) == {"title": "Blog", "location": {"city": "Lisbon"}}

    def test_reads_yaml(self, tmp_path):
        path = tmp_path / "site.yaml"
        path.write_text("title: Blog\nfeed_limit: 5\n", encoding="utf-8")
        assert load_config(path) == {"title": "Blog", "feed_limit": 5}

    def test_reads_json(self, tmp_path):
        path = tmp_path / "site.json"
        path.write_text('{"title": "Blog"}', encoding="utf-8")
        assert load_config(path) == {"title": "Blog"}

    def test_invalid_toml_raises(self, tmp_path):
        path = tmp_path / "site.toml"
        path.write_text("title = ", encoding="utf-8")
        with pytest.raises(ConfigError):
            load_config(path)

    def test_non_mapping_raises(self, tmp_path):
        path = tmp_path / "site.json"
        path.write_text("[1, 2]", encoding="utf-8")
        with pytest.raises(ConfigError):
            load_config(path)


class TestSiteConfig:
    def test_defaults(self):
        config = SiteConfig.from_mapping({})
        assert config.feed_limit == DEFAULT_FEED_LIMIT
        assert config.content_dir == "content/posts"
        assert config.social == ()
        assert config.title == ""
        assert config.about_file == ""

    def test_reads_nested_values(self):
        config = SiteConfig.from_mapping(
            {
                "title": "Blog",
                "site_url": "https://blog.example/",
                "about_file": " about.md ",
                "location": {"city": "Lisbon", "country": "Portugal"},
                "social": [{"name": "github", "url": "https://github.com/x"}],
            }
        )
        assert config.site_url == "https://blog.example"
        assert config.location.city == "Lisbon"
        assert config.social[0].name == "github"
        assert config.about_file == "about.md"

    def test_rejects_non_positive_feed_limit(self):
        with pytest.raises(ConfigError):
            SiteConfig.from_mapping({"feed_limit": 0})

    def test_rejects_bad_social_entry(self):
        with pytest.raises(ConfigError):
            SiteConfig.from_mapping({"social": [{"name": "no url"}]})

    def test_is_immutable(self):
        config = SiteConfig()
        with pytest.raises(AttributeError):
            config.title = "changed"
        assert config.replace(title="changed").title == "changed"
        assert config.title != "changed"

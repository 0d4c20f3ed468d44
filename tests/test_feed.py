"""Tests for pagegen.feed."""

import pytest

from conftest import make_doc
from pagegen.config import SiteConfig
from pagegen.feed import build_rss, project, project_index


class TestProject:
    def test_excludes_drafts(self):
        docs = [make_doc("/pub/", "2021-01-01"), make_doc("/draft/", "2021-01-02", published=False)]
        assert [entry.slug for entry in project(docs)] == ["/pub/"]

    def test_newest_first(self):
        docs = [make_doc(f"/p{i}/", f"2021-01-0{i}") for i in range(1, 4)]
        assert [entry.slug for entry in project(docs)] == ["/p3/", "/p2/", "/p1/"]

    def test_caps_at_limit(self):
        docs = [make_doc(f"/p{i}/", f"2021-01-0{i}") for i in range(1, 6)]
        assert [entry.slug for entry in project(docs, limit=2)] == ["/p5/", "/p4/"]

    def test_rejects_non_positive_limit(self):
        with pytest.raises(ValueError):
            project([], limit=0)

    def test_external_document_is_in_feed(self):
        ext = make_doc("/ext/", "2021-01-01", external_link="https://x.com")
        entry = project([ext])[0]
        assert entry.link == "https://x.com"


class TestProjectIndex:
    def test_lists_external_document(self):
        ext = make_doc("/ext/", "2021-01-01", external_link="https://x.com")
        entry = project_index([ext])[0]
        assert entry.href == "https://x.com"
        assert entry.is_external

    def test_excludes_drafts(self):
        docs = [make_doc("/draft/", "2021-01-02", published=False)]
        assert project_index(docs) == []


class TestBuildRss:
    def test_renders_items_with_absolute_links(self):
        config = SiteConfig(title="Blog & co", site_url="https://blog.example")
        docs = [
            make_doc("/local/", "2021-01-01", title="Local"),
            make_doc("/ext/", "2021-01-02", external_link="https://x.com", title="Ext"),
        ]
        rss = build_rss(project(docs), config)
        assert "<title>Blog &amp; co</title>" in rss
        assert "<link>https://blog.example/local/</link>" in rss
        assert "<link>https://x.com</link>" in rss
        assert rss.index("Ext") < rss.index("Local")
        assert "<lastBuildDate>Sat, 02 Jan 2021 00:00:00 +0000</lastBuildDate>" in rss

    def test_same_input_same_output(self):
        config = SiteConfig(site_url="https://blog.example")
        docs = [make_doc("/a/", "2021-01-01")]
        assert build_rss(project(docs), config) == build_rss(project(docs), config)

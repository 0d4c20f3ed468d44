from __future__ import annotations

import dataclasses as dc
import datetime as dt
import html
from typing import Iterable

from .config import DEFAULT_FEED_LIMIT, SiteConfig
from .content import ContentDocument
from .sequence import order_by_date
from .utils import join_url, rfc822_date

FEED_PATH = "rss.xml"


@dc.dataclass(frozen=True)
class FeedEntry:
    slug: str
    title: str
    date: dt.datetime
    excerpt: str
    html: str
    link: str


@dc.dataclass(frozen=True)
class IndexEntry:
    slug: str
    title: str
    date: dt.datetime
    excerpt: str
    href: str
    reading_time: str
    is_external: bool


def published_newest_first(docs: Iterable[ContentDocument], limit: int) -> list[ContentDocument]:
    if limit <= 0:
        raise ValueError(f"limit must be positive, got {limit}")
    return order_by_date(doc for doc in docs if doc.published is True)[:limit]


def project(docs: Iterable[ContentDocument], limit: int = DEFAULT_FEED_LIMIT) -> list[FeedEntry]:
    return [
        FeedEntry(
            slug=doc.slug,
            title=doc.title,
            date=doc.date,
            excerpt=doc.excerpt,
            html=doc.html,
            link=doc.external_link or doc.slug,
        )
        for doc in published_newest_first(docs, limit)
    ]


def project_index(docs: Iterable[ContentDocument], limit: int = DEFAULT_FEED_LIMIT) -> list[IndexEntry]:
    return [
        IndexEntry(
            slug=doc.slug,
            title=doc.title or doc.slug,
            date=doc.date,
            excerpt=doc.excerpt,
            href=doc.external_link or doc.slug,
            reading_time=doc.reading_time,
            is_external=doc.is_external,
        )
        for doc in published_newest_first(docs, limit)
    ]


def absolute_link(site_url: str, link: str) -> str:
    if link.startswith(("http://", "https://")):
        return link
    return join_url(site_url, link)


def build_rss(entries: list[FeedEntry], config: SiteConfig) -> str:
    site_url = config.site_url.rstrip("/")
    items = []
    for entry in entries:
        link = absolute_link(site_url, entry.link)
        items.append(
            "\n".join(
                [
                    "<item>",
                    f"<title>{html.escape(entry.title)}</title>",
                    f"<link>{html.escape(link)}</link>",
                    f"<guid>{html.escape(link)}</guid>",
                    f"<pubDate>{rfc822_date(entry.date)}</pubDate>",
                    f"<description>{html.escape(entry.excerpt)}</description>",
                    f"<content:encoded>{html.escape(entry.html)}</content:encoded>",
                    "</item>",
                ]
            )
        )
    last_build = rfc822_date(entries[0].date) if entries else ""
    return "\n".join(
        [
            '<?xml version="1.0" encoding="UTF-8"?>',
            '<rss version="2.0" xmlns:content="http://purl.org/rss/1.0/modules/content/">',
            "<channel>",
            f"<title>{html.escape(config.title)}</title>",
            f"<link>{site_url}/</link>",
            f"<description>{html.escape(config.description)}</description>",
            f"<language>{html.escape(config.lang)}</language>",
            f"<lastBuildDate>{last_build}</lastBuildDate>" if last_build else "",
            "\n".join(items),
            "</channel>",
            "</rss>",
        ]
    )

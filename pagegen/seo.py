from __future__ import annotations

import datetime as dt
import html
import json
from typing import Optional

from .config import SiteConfig
from .feed import absolute_link


def build_schema(
    config: SiteConfig,
    *,
    is_post: bool,
    title: str = "",
    date: Optional[dt.datetime] = None,
    url: str = "",
    image: str = "",
) -> dict:
    if is_post:
        schema = {
            "@context": "https://schema.org",
            "@type": "BlogPosting",
            "mainEntityOfPage": {
                "@type": "WebPage",
                "@id": absolute_link(config.site_url, url) if url else config.site_url,
            },
            "headline": title,
            "author": {
                "@type": "Person",
                "name": config.author,
            },
        }
        if image:
            schema["image"] = image
        if date is not None:
            schema["datePublished"] = date.date().isoformat()
        return schema
    return {
        "@context": "https://schema.org/",
        "@type": "WebSite",
        "name": config.title,
        "url": config.site_url,
    }


def build_meta(
    config: SiteConfig,
    *,
    title: str,
    description: Optional[str] = None,
    url: str = "",
    image: str = "",
) -> list[tuple[str, str, str]]:
    description = description or config.description
    page_url = absolute_link(config.site_url, url) if url else config.site_url
    meta = [
        ("name", "description", description),
        ("property", "og:title", title),
        ("property", "og:description", description),
        ("property", "og:url", page_url),
        ("property", "og:type", "website"),
        ("name", "twitter:card", "summary"),
        ("name", "twitter:creator", config.author),
        ("name", "twitter:title", title),
        ("name", "twitter:description", description),
    ]
    if image:
        meta.append(("property", "og:image", absolute_link(config.site_url, image)))
    return meta


def render_head(
    config: SiteConfig,
    *,
    title: str,
    description: Optional[str] = None,
    url: str = "",
    image: str = "",
    is_post: bool = False,
    is_home: bool = False,
    date: Optional[dt.datetime] = None,
) -> str:
    tags = [
        f'<meta {attr}="{html.escape(key)}" content="{html.escape(content)}">'
        for attr, key, content in build_meta(config, title=title, description=description, url=url, image=image)
    ]
    if is_post or is_home:
        schema = build_schema(config, is_post=is_post, title=title, date=date, url=url, image=image)
        # "</" inside a script body would end the tag early.
        payload = json.dumps(schema, ensure_ascii=False).replace("</", "<\\/")
        tags.append(f'<script type="application/ld+json">{payload}</script>')
    return "\n".join(tags)

from __future__ import annotations

import datetime as dt
import html
from pathlib import Path
from typing import Optional

from pygments.formatters import HtmlFormatter

from .config import SiteConfig
from .content import AboutPage, ContentDocument
from .feed import FEED_PATH, IndexEntry
from .planner import NavLink, PageSpec
from .seo import render_head
from .slugs import ABOUT_ROUTE

DATE_FMT = "%Y-%m-%d"
INDEX_DATE_FMT = "%B %d, %Y"
TEMPLATES_DIR = Path(__file__).with_name("templates")
PYGMENTS_CSS = "css/pygments.css"


def render_template(template: str, **context: str) -> str:
    output = template
    late_keys = {"content", "sidebar"}
    for key, value in context.items():
        if key in late_keys:
            continue
        output = output.replace(f"{{{{{key}}}}}", value)
    for key in late_keys:
        if key in context:
            output = output.replace(f"{{{{{key}}}}}", context[key])
    return output


def read_template(name: str, templates_dir: Optional[Path] = None) -> str:
    if templates_dir is not None and templates_dir.joinpath(name).exists():
        return templates_dir.joinpath(name).read_text(encoding="utf-8")
    return TEMPLATES_DIR.joinpath(name).read_text(encoding="utf-8")


def write_text(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


def pygments_css() -> str:
    return HtmlFormatter(style="default").get_style_defs(".codehilite")


def relative_root(route: str) -> str:
    depth = len([part for part in route.split("/") if part])
    if depth == 0:
        return "."
    return "/".join([".."] * depth)


def page_href(root: str, href: str) -> str:
    if href.startswith(("http://", "https://")):
        return href
    return f"{root}/{href.lstrip('/')}"


def build_bio(config: SiteConfig, root: str) -> str:
    place = ", ".join(part for part in (config.location.city, config.location.country) if part)
    heading = html.escape(config.author)
    if place:
        heading = f"{heading} - {html.escape(place)}"
    links = [f'<a href="{html.escape(social.url)}">{html.escape(social.name)}</a>' for social in config.social]
    return (
        '<div class="panel bio">'
        f"<p>{heading}<br>{html.escape(config.description)}</p>"
        f'<p class="bio-links">{" ".join(links)}</p>'
        "</div>"
    )


def build_book_banner(config: SiteConfig) -> str:
    if not config.book_link:
        return ""
    book_title = html.escape(config.book_title or "my new book")
    return (
        '<div class="book-banner">'
        "<span>I recently published a book!</span>"
        f'<span class="book-title"><a href="{html.escape(config.book_link)}" target="_blank">{book_title}</a></span>'
        "</div>"
    )


def build_newsletter_form(config: SiteConfig) -> str:
    if not config.newsletter_url:
        return ""
    return (
        '<div id="subscribe-to-my-newsletter" class="panel">'
        "<h2>Get a once-a-month digest of my posts</h2>"
        "<p>No more than one email per month, and only when there is new content.</p>"
        f'<form class="newsletter" method="post" action="{html.escape(config.newsletter_url)}">'
        '<input type="email" name="EMAIL" placeholder="Your email" required>'
        '<button type="submit">Sign me up!</button>'
        "</form>"
        "</div>"
    )


def build_post_nav(previous: Optional[NavLink], next_link: Optional[NavLink], root: str) -> str:
    items = []
    if previous is not None:
        items.append(
            f'<li><a href="{html.escape(page_href(root, previous.href))}" rel="prev">'
            f"&larr; {html.escape(previous.title)}</a></li>"
        )
    else:
        items.append("<li></li>")
    if next_link is not None:
        items.append(
            f'<li><a href="{html.escape(page_href(root, next_link.href))}" rel="next">'
            f"{html.escape(next_link.title)} &rarr;</a></li>"
        )
    else:
        items.append("<li></li>")
    return f'<nav class="post-nav"><ul>{"".join(items)}</ul></nav>'


def render_page(
    base_template: str,
    config: SiteConfig,
    *,
    title: str,
    root: str,
    head: str,
    content: str,
) -> str:
    return render_template(
        base_template,
        title=html.escape(title),
        lang=html.escape(config.lang),
        root=root,
        head=head,
        banner=build_book_banner(config),
        content=content,
        sidebar=build_bio(config, root),
        site_name=html.escape(config.title),
        site_description=html.escape(config.description),
        feed=f"{root}/{FEED_PATH}",
        year=str(dt.datetime.now().year),
    )


def render_post(spec: PageSpec, doc: ContentDocument, config: SiteConfig, base_template: str) -> str:
    root = relative_root(spec.route)
    context = spec.context
    draft_marker = "" if context.published else '<span class="draft-marker">[DRAFT]</span> '
    content = (
        '<article class="post">'
        "<header>"
        f'<h1 class="post-title">{draft_marker}{html.escape(doc.title)}</h1>'
        f'<p class="post-meta">{html.escape(doc.reading_time)} - {doc.date.strftime(DATE_FMT)}</p>'
        "</header>"
        f'<section class="post-body">{doc.html}</section>'
        f"{build_newsletter_form(config)}"
        "</article>"
        f"{build_post_nav(context.previous, context.next, root)}"
    )
    head = render_head(
        config,
        title=doc.title,
        description=doc.description or doc.excerpt,
        url=spec.route,
        image=doc.image or "",
        is_post=True,
        date=doc.date,
    )
    head += f'\n<link rel="stylesheet" href="{root}/{PYGMENTS_CSS}">'
    return render_page(
        base_template,
        config,
        title=f"{doc.title} | {config.title}",
        root=root,
        head=head,
        content=content,
    )


def build_index_entries(entries: list[IndexEntry], root: str) -> str:
    cards = []
    for entry in entries:
        href = html.escape(page_href(root, entry.href))
        title = html.escape(entry.title)
        link_class = "post-link external" if entry.is_external else "post-link"
        cards.append(
            '<article class="post-card">'
            f'<h3><a class="{link_class}" href="{href}">{title}</a></h3>'
            f"<small>{html.escape(entry.reading_time)} - {entry.date.strftime(INDEX_DATE_FMT)}</small>"
            f'<p class="post-summary">{html.escape(entry.excerpt)}</p>'
            "</article>"
        )
    return "\n".join(cards) if cards else '<p class="empty">No posts yet.</p>'


def render_index(entries: list[IndexEntry], config: SiteConfig, base_template: str) -> str:
    root = "."
    content = (
        f"{build_newsletter_form(config)}"
        f'<div class="post-list">{build_index_entries(entries, root)}</div>'
    )
    head = render_head(config, title=config.author or config.title, is_home=True)
    return render_page(
        base_template,
        config,
        title=f"{config.author or config.title} | {config.title}",
        root=root,
        head=head,
        content=content,
    )


def render_about(about: AboutPage, config: SiteConfig, base_template: str) -> str:
    root = relative_root(ABOUT_ROUTE)
    content = (
        '<article class="post about">'
        f'<h1 class="post-title">{html.escape(about.title)}</h1>'
        f"{build_bio(config, root)}"
        f'<section class="post-body">{about.html}</section>'
        "</article>"
    )
    head = render_head(config, title=about.title, url=ABOUT_ROUTE)
    return render_page(
        base_template,
        config,
        title=f"{about.title} | {config.title}",
        root=root,
        head=head,
        content=content,
    )

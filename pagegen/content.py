from __future__ import annotations

import dataclasses as dc
import datetime as dt
import html as html_lib
import math
import os
import re
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Optional

import markdown
import yaml

from .errors import BuildAbortError
from .utils import parse_bool

CJK_RE = re.compile(r"[\u3040-\u30ff\u3400-\u4dbf\u4e00-\u9fff\uac00-\ud7af]")
WORD_RE = re.compile(r"[A-Za-z0-9]+(?:'[A-Za-z0-9]+)?")
TAG_RE = re.compile(r"<[^>]+>")
WORDS_PER_MINUTE = 200
EXCERPT_LENGTH = 160
ABOUT_TITLE = "About me"
MARKDOWN_EXTENSIONS = ["fenced_code", "tables", "toc", "codehilite"]
MARKDOWN_CONFIG = {"codehilite": {"guess_lang": False}}


@dc.dataclass(frozen=True)
class ContentDocument:
    """One authored post: front matter plus rendered body.

    ``fields`` holds values computed during the build (``slug``,
    ``reading_time``). Keys are only ever added, never changed.
    """

    id: str
    source: Path
    title: str
    date: dt.datetime
    published: bool
    body: str
    html: str = ""
    excerpt: str = ""
    external_link: Optional[str] = None
    description: Optional[str] = None
    image: Optional[str] = None
    fields: dict = dc.field(default_factory=dict, compare=False, hash=False)

    @property
    def slug(self) -> str:
        return self.fields.get("slug", "")

    @property
    def reading_time(self) -> str:
        return self.fields.get("reading_time", "")

    @property
    def is_external(self) -> bool:
        return bool(self.external_link)


def strip_tags(html_text: str) -> str:
    return TAG_RE.sub("", html_text)


def parse_front_matter(text: str) -> tuple[dict, str]:
    clean_text = text.lstrip("\ufeff")
    lines = clean_text.splitlines()
    if not lines or lines[0].strip() != "---":
        return {}, clean_text

    end = None
    for i in range(1, len(lines)):
        if lines[i].strip() == "---":
            end = i
            break
    if end is None:
        return {}, clean_text

    try:
        meta = yaml.safe_load("\n".join(lines[1:end]))
    except yaml.YAMLError as exc:
        raise BuildAbortError(f"Invalid front matter: {exc}") from exc
    if meta is None:
        meta = {}
    if not isinstance(meta, dict):
        raise BuildAbortError("Front matter must be a mapping")
    meta = {str(key).strip(): value for key, value in meta.items()}
    body = "\n".join(lines[end + 1 :])
    return meta, body


def extract_title(meta: dict, body: str) -> tuple[str, str]:
    if meta.get("title"):
        return str(meta["title"]), body
    lines = body.splitlines()
    for i, line in enumerate(lines):
        stripped = line.strip()
        if stripped.startswith("# "):
            title = stripped[2:].strip() or "Untitled"
            new_body = "\n".join(lines[i + 1 :]).lstrip()
            return title, new_body
        if stripped:
            break
    return "Untitled", body


def as_naive_utc(value: dt.datetime) -> dt.datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(dt.timezone.utc).replace(tzinfo=None)


def parse_date(value: object, source: Path) -> dt.datetime:
    if isinstance(value, dt.datetime):
        return as_naive_utc(value)
    if isinstance(value, dt.date):
        return dt.datetime.combine(value, dt.time())
    if value is None or not str(value).strip():
        raise BuildAbortError(f"{source}: missing date")
    text = str(value).strip()
    try:
        return as_naive_utc(dt.datetime.fromisoformat(text))
    except ValueError:
        pass
    try:
        return dt.datetime.combine(dt.date.fromisoformat(text), dt.time())
    except ValueError as exc:
        raise BuildAbortError(f"{source}: invalid date {text!r}") from exc


def optional_text(value: object) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def count_words(text: str) -> int:
    text = html_lib.unescape(text)
    cjk_count = len(CJK_RE.findall(text))
    text = CJK_RE.sub(" ", text)
    word_count = len(WORD_RE.findall(text))
    return cjk_count + word_count


def reading_time(html_text: str) -> str:
    words = count_words(strip_tags(html_text))
    minutes = max(1, math.ceil(words / WORDS_PER_MINUTE))
    return f"{minutes} min read"


def make_excerpt(html_text: str, limit: int = EXCERPT_LENGTH) -> str:
    text = html_lib.unescape(strip_tags(html_text))
    text = " ".join(text.split())
    if len(text) <= limit:
        return text
    return text[:limit].rstrip() + "..."


def render_markdown(body: str) -> str:
    md = markdown.Markdown(extensions=MARKDOWN_EXTENSIONS, extension_configs=MARKDOWN_CONFIG)
    return md.convert(body)


def parse_document(path: Path, content_dir: Path) -> ContentDocument:
    try:
        raw_text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise BuildAbortError(f"Cannot read {path}: {exc}") from exc
    try:
        meta, body = parse_front_matter(raw_text)
    except BuildAbortError as exc:
        raise BuildAbortError(f"{path}: {exc}") from exc
    title, body = extract_title(meta, body)
    html_content = render_markdown(body)
    description = optional_text(meta.get("description"))
    doc = ContentDocument(
        id=path.relative_to(content_dir).as_posix(),
        source=path,
        title=title,
        date=parse_date(meta.get("date"), path),
        published=parse_bool(meta.get("published")),
        body=body,
        html=html_content,
        excerpt=description or make_excerpt(html_content),
        external_link=optional_text(meta.get("externalLink") or meta.get("external_link")),
        description=description,
        image=optional_text(meta.get("featuredImage") or meta.get("image")),
    )
    doc.fields["reading_time"] = optional_text(meta.get("readingTime")) or reading_time(html_content)
    return doc


def list_sources(content_dir: Path) -> list[Path]:
    return sorted(content_dir.rglob("*.md"), key=lambda p: p.as_posix())


def load_documents(content_dir: Path, workers: int = 0) -> list[ContentDocument]:
    """Parse every Markdown file under ``content_dir``.

    Files are parsed concurrently, but the result is always in source order
    (sorted posix path). The first failure aborts the whole load.
    """
    if not content_dir.is_dir():
        raise BuildAbortError(f"Content directory not found: {content_dir}")
    sources = list_sources(content_dir)
    if workers <= 0:
        workers = os.cpu_count() or 1
    workers = max(1, min(workers, 32, len(sources) or 1))

    def parse(path: Path) -> ContentDocument:
        return parse_document(path, content_dir)

    if workers > 1:
        with ThreadPoolExecutor(max_workers=workers) as executor:
            return list(executor.map(parse, sources))
    return [parse(path) for path in sources]


@dc.dataclass(frozen=True)
class AboutPage:
    title: str
    html: str


def load_about(path: Path) -> AboutPage:
    """Read the standalone about page: HTML as is, Markdown rendered, anything else as text."""
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise BuildAbortError(f"Cannot read about file {path}: {exc}") from exc
    suffix = path.suffix.lower()
    if suffix in {".html", ".htm"}:
        return AboutPage(title=ABOUT_TITLE, html=text)
    if suffix == ".md":
        try:
            meta, body = parse_front_matter(text)
        except BuildAbortError as exc:
            raise BuildAbortError(f"{path}: {exc}") from exc
        if meta.get("title") or body.lstrip().startswith("# "):
            title, body = extract_title(meta, body)
        else:
            title = ABOUT_TITLE
        return AboutPage(title=title, html=render_markdown(body))
    paragraphs = [part.strip() for part in text.split("\n\n") if part.strip()]
    escaped = [html_lib.escape(part).replace("\n", "<br>") for part in paragraphs]
    return AboutPage(title=ABOUT_TITLE, html="".join(f"<p>{part}</p>" for part in escaped))

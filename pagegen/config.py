from __future__ import annotations

import dataclasses as dc
import json
from pathlib import Path
from typing import Optional

import yaml

try:
    import tomllib as toml
except ImportError:
    import tomli as toml

from .errors import ConfigError
from .utils import parse_int

DEFAULT_FEED_LIMIT = 1000


@dc.dataclass(frozen=True)
class SocialLink:
    name: str
    url: str


@dc.dataclass(frozen=True)
class Location:
    city: str = ""
    country: str = ""


@dc.dataclass(frozen=True)
class SiteConfig:
    """Site metadata and build settings, loaded once per build.

    Instances are passed explicitly to the components that need them.
    """

    title: str = ""
    author: str = ""
    description: str = ""
    site_url: str = ""
    lang: str = "en"
    location: Location = Location()
    social: tuple[SocialLink, ...] = ()
    book_link: str = ""
    book_title: str = ""
    newsletter_url: str = ""
    content_dir: str = "content/posts"
    output_dir: str = "public"
    templates_dir: str = ""
    about_file: str = ""
    feed_limit: int = DEFAULT_FEED_LIMIT
    build_workers: int = 0

    @classmethod
    def from_mapping(cls, data: dict) -> "SiteConfig":
        def text(key: str, default: str = "") -> str:
            value = data.get(key)
            return default if value is None else str(value).strip()

        location_data = data.get("location") or {}
        if not isinstance(location_data, dict):
            raise ConfigError("location must be a mapping with city and country")
        social_data = data.get("social") or []
        if not isinstance(social_data, list):
            raise ConfigError("social must be a list of {name, url} entries")
        social = []
        for item in social_data:
            if not isinstance(item, dict) or not item.get("url"):
                raise ConfigError(f"Invalid social entry: {item!r}")
            social.append(SocialLink(name=str(item.get("name") or item["url"]), url=str(item["url"])))

        feed_limit = parse_int(data.get("feed_limit"), DEFAULT_FEED_LIMIT)
        if feed_limit <= 0:
            raise ConfigError(f"feed_limit must be positive, got {feed_limit}")

        return cls(
            title=text("title"),
            author=text("author"),
            description=text("description"),
            site_url=text("site_url").rstrip("/"),
            lang=text("lang", "en"),
            location=Location(
                city=str(location_data.get("city") or ""),
                country=str(location_data.get("country") or ""),
            ),
            social=tuple(social),
            book_link=text("book_link"),
            book_title=text("book_title"),
            newsletter_url=text("newsletter_url"),
            content_dir=text("content_dir", cls.content_dir),
            output_dir=text("output_dir", cls.output_dir),
            templates_dir=text("templates_dir"),
            about_file=text("about_file"),
            feed_limit=feed_limit,
            build_workers=max(0, parse_int(data.get("build_workers"), 0)),
        )

    def replace(self, **changes: object) -> "SiteConfig":
        return dc.replace(self, **changes)


def load_config(path: Path) -> dict:
    if not path.exists():
        return {}
    suffix = path.suffix.lower()
    text = path.read_text(encoding="utf-8")
    if suffix == ".toml":
        try:
            data = toml.loads(text)
        except toml.TOMLDecodeError as exc:
            raise ConfigError(f"Invalid TOML in config file {path}: {exc}") from exc
    elif suffix in {".yml", ".yaml"}:
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML in config file {path}: {exc}") from exc
        if data is None:
            return {}
    else:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ConfigError(f"Invalid JSON in config file {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Config must be a mapping: {path}")
    return data


def resolve_path(value: str, config_path: Optional[Path]) -> Path:
    path = Path(value)
    if path.is_absolute() or config_path is None:
        return path
    return config_path.resolve().parent / path

from __future__ import annotations

import dataclasses as dc
import shutil
import tempfile
from pathlib import Path
from typing import Optional

from .config import SiteConfig, resolve_path
from .content import AboutPage, ContentDocument, load_about, load_documents
from .feed import FEED_PATH, FeedEntry, IndexEntry, build_rss, project, project_index
from .planner import PageSpec, plan_all
from .render import (
    PYGMENTS_CSS,
    pygments_css,
    read_template,
    render_about,
    render_index,
    render_post,
    write_text,
)
from .slugs import ABOUT_ROUTE, assign_slugs
from .utils import clean_output_dir, write_nojekyll


@dc.dataclass(frozen=True)
class BuildResult:
    documents: tuple[ContentDocument, ...]
    pages: tuple[PageSpec, ...]
    feed: tuple[FeedEntry, ...]
    index: tuple[IndexEntry, ...]
    about: Optional[AboutPage] = None


def run(documents: list[ContentDocument], config: SiteConfig, about: Optional[AboutPage] = None) -> BuildResult:
    """Derive pages, feed entries and the index listing from slugged documents."""
    return BuildResult(
        documents=tuple(documents),
        pages=tuple(plan_all(documents)),
        feed=tuple(project(documents, config.feed_limit)),
        index=tuple(project_index(documents, config.feed_limit)),
        about=about,
    )


def build(
    config: SiteConfig,
    content_dir: Path,
    workers: int = 0,
    config_path: Optional[Path] = None,
) -> BuildResult:
    documents = load_documents(content_dir, workers=workers or config.build_workers)
    assign_slugs(documents, content_dir)
    about = load_about(resolve_path(config.about_file, config_path)) if config.about_file else None
    return run(documents, config, about)


def render_site(result: BuildResult, config: SiteConfig, target: Path, templates_dir: Optional[Path] = None) -> int:
    base_template = read_template("base.html", templates_dir)
    by_slug = {doc.slug: doc for doc in result.documents}
    for spec in result.pages:
        doc = by_slug[spec.context.slug]
        write_text(target / spec.route.strip("/") / "index.html", render_post(spec, doc, config, base_template))
    write_text(target / "index.html", render_index(list(result.index), config, base_template))
    if result.about is not None:
        write_text(target / ABOUT_ROUTE.strip("/") / "index.html", render_about(result.about, config, base_template))
    if config.site_url:
        write_text(target / FEED_PATH, build_rss(list(result.feed), config))
    write_text(target / PYGMENTS_CSS, pygments_css())
    write_nojekyll(target)
    return len(result.pages)


def write_site(
    result: BuildResult,
    config: SiteConfig,
    output_dir: Path,
    project_root: Path,
    *,
    clean: bool = True,
    templates_dir: Optional[Path] = None,
) -> int:
    """Render into a staging directory, then move it into place.

    Nothing under ``output_dir`` changes unless every page rendered.
    """
    output_dir.parent.mkdir(parents=True, exist_ok=True)
    staging = Path(tempfile.mkdtemp(prefix=f".{output_dir.name}-", dir=output_dir.parent))
    try:
        count = render_site(result, config, staging, templates_dir)
        if clean or not output_dir.exists():
            clean_output_dir(output_dir, project_root)
            staging.rename(output_dir)
        else:
            shutil.copytree(staging, output_dir, dirs_exist_ok=True)
    finally:
        if staging.exists():
            shutil.rmtree(staging)
    return count


def templates_path(config: SiteConfig, config_path: Optional[Path]) -> Optional[Path]:
    if not config.templates_dir:
        return None
    return resolve_path(config.templates_dir, config_path)

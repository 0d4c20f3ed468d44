from __future__ import annotations

from pathlib import Path, PurePosixPath

from .content import ContentDocument
from .errors import BuildAbortError, SlugCollisionError

HOME_ROUTE = "/"
ABOUT_ROUTE = "/about-me/"


def file_path_slug(source: Path, content_dir: Path) -> str:
    """Route for a source file, relative to the content root.

    ``hello/index.md`` becomes ``/hello/`` and ``notes/a.md`` becomes
    ``/notes/a/``. An ``index.md`` at the root maps to ``/``.
    """
    rel = PurePosixPath(source.relative_to(content_dir).as_posix())
    parts = list(rel.with_suffix("").parts)
    if parts and parts[-1] == "index":
        parts.pop()
    if not parts:
        return HOME_ROUTE
    return "/" + "/".join(parts) + "/"


def assign(doc: ContentDocument, source_path: Path, content_dir: Path) -> str:
    slug = file_path_slug(source_path, content_dir)
    current = doc.fields.get("slug")
    if current is not None and current != slug:
        raise BuildAbortError(f"{doc.id}: slug is already set to {current}, cannot change it to {slug}")
    doc.fields["slug"] = slug
    return slug


def assign_slugs(docs: list[ContentDocument], content_dir: Path) -> list[ContentDocument]:
    # Routes of the generated site pages.
    owners: dict[str, str] = {HOME_ROUTE: "the index listing", ABOUT_ROUTE: "the about page"}
    for doc in docs:
        slug = assign(doc, doc.source, content_dir)
        if slug in owners:
            raise SlugCollisionError(slug, owners[slug], doc.id)
        owners[slug] = doc.id
    return docs

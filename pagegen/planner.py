from __future__ import annotations

import dataclasses as dc
from typing import Iterable, Optional

from .content import ContentDocument
from .sequence import Neighbors, sequence

POST_TEMPLATE = "blog-post"


@dc.dataclass(frozen=True)
class NavLink:
    slug: str
    title: str
    href: str

    @classmethod
    def from_document(cls, doc: Optional[ContentDocument]) -> Optional["NavLink"]:
        if doc is None:
            return None
        return cls(slug=doc.slug, title=doc.title, href=doc.external_link or doc.slug)


@dc.dataclass(frozen=True)
class PageContext:
    slug: str
    previous: Optional[NavLink]
    next: Optional[NavLink]
    published: bool


@dc.dataclass(frozen=True)
class PageSpec:
    route: str
    template: str
    context: PageContext


def plan(chain: Iterable[Neighbors]) -> list[PageSpec]:
    """One page per document in the chain, except off-site documents.

    Drafts get pages too. They are reachable by URL but never listed.
    """
    pages = []
    for item in chain:
        doc = item.document
        if doc.is_external:
            continue
        pages.append(
            PageSpec(
                route=doc.slug,
                template=POST_TEMPLATE,
                context=PageContext(
                    slug=doc.slug,
                    previous=NavLink.from_document(item.previous),
                    next=NavLink.from_document(item.next),
                    published=doc.published,
                ),
            )
        )
    return pages


def plan_all(docs: list[ContentDocument]) -> list[PageSpec]:
    return plan(sequence(docs, published=True)) + plan(sequence(docs, published=False))

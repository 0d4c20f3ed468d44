from __future__ import annotations

import dataclasses as dc
from typing import Iterable, Optional

from .content import ContentDocument


@dc.dataclass(frozen=True)
class Neighbors:
    document: ContentDocument
    previous: Optional[ContentDocument] = None
    next: Optional[ContentDocument] = None


def order_by_date(docs: Iterable[ContentDocument]) -> list[ContentDocument]:
    # sorted() keeps equal dates in their incoming order even with reverse=True.
    return sorted(docs, key=lambda doc: doc.date, reverse=True)


def sequence(docs: Iterable[ContentDocument], published: bool) -> list[Neighbors]:
    """Order one publication partition newest first and link neighbours.

    ``previous`` is the next older document and ``next`` the next newer one.
    """
    ordered = order_by_date(doc for doc in docs if doc.published is published)
    chain = []
    last = len(ordered) - 1
    for index, doc in enumerate(ordered):
        chain.append(
            Neighbors(
                document=doc,
                previous=None if index == last else ordered[index + 1],
                next=None if index == 0 else ordered[index - 1],
            )
        )
    return chain

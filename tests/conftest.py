import datetime as dt
from pathlib import Path

import pytest

from pagegen.content import ContentDocument


def write_post(root: Path, rel: str, front_matter: str, body: str = "Some text.") -> Path:
    path = root / rel
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(f"---\n{front_matter.strip()}\n---\n\n{body}\n", encoding="utf-8")
    return path


def make_doc(
    slug: str,
    date: str,
    published: bool = True,
    external_link=None,
    title=None,
) -> ContentDocument:
    doc = ContentDocument(
        id=f"{slug.strip('/')}.md",
        source=Path(f"{slug.strip('/')}.md"),
        title=title or slug.strip("/"),
        date=dt.datetime.fromisoformat(date),
        published=published,
        body="Body.",
        html="<p>Body.</p>",
        excerpt="Body.",
        external_link=external_link,
    )
    doc.fields["slug"] = slug
    doc.fields["reading_time"] = "1 min read"
    return doc


@pytest.fixture
def content_dir(tmp_path):
    root = tmp_path / "content" / "posts"
    root.mkdir(parents=True)
    return root

"""Navigation model helpers shared by the CLI, generator, and manifest.

The sidebar is a tree of :class:`~handbook_pages.config.NavSection` groups.
Readers move through it linearly with the previous/next links in the doc
footer, so this module flattens the tree depth-first in declaration order and
answers "what comes before and after this page?". It also maps between
site-relative links and Markdown documents and prefixes links with the
configured base path.

Examples
--------
>>> from handbook_pages.config import load_site_config
>>> from handbook_pages.navigation import find_neighbours, flatten, resolve_link
>>> site = load_site_config(
...     {
...         "title": "Demo",
...         "themeConfig": {
...             "sidebar": [
...                 {"text": "A", "items": [{"text": "1", "link": "/a/1"}]},
...                 {"text": "B", "items": [{"text": "2", "link": "/b/2"}]},
...             ]
...         },
...     }
... )
>>> [item.link for item in flatten(site)]
['/a/1', '/b/2']
>>> find_neighbours(site, "/a/1").next.link
'/b/2'
>>> resolve_link("/roadmap", "/php-handbook/")
'/php-handbook/roadmap'
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
from pathlib import PurePosixPath
from urllib.parse import urlsplit

from .config import NavEntry, NavItem, NavSection, SiteConfig
from .config.helpers import _is_external_link

PAGE_SUFFIXES = (".md", ".html")


@dc.dataclass(slots=True, frozen=True)
class PageNeighbours:
    """Items immediately before and after a page in reading order."""

    previous: NavItem | None = None
    next: NavItem | None = None


def iter_nav_items(entries: cabc.Iterable[NavEntry]) -> cabc.Iterator[NavItem]:
    """Yield every link in ``entries`` depth-first, in declaration order."""
    for entry in entries:
        match entry:
            case NavSection(items=items):
                yield from iter_nav_items(items)
            case NavItem():
                yield entry


def flatten(site: SiteConfig) -> list[NavItem]:
    """Return all sidebar items of ``site`` as one ordered list."""
    return list(iter_nav_items(site.sections))


def is_external(link: str) -> bool:
    """Return True when ``link`` leaves the site."""
    return _is_external_link(link)


def normalize_page_link(link: str) -> str:
    """Return the comparable route for a site-relative link.

    Query strings and fragments are dropped, ``.md``/``.html`` suffixes and a
    trailing ``index`` are removed, and trailing slashes are stripped except
    for the root route.
    """
    path = urlsplit(link).path
    if not path:
        return ""
    for suffix in PAGE_SUFFIXES:
        if path.endswith(suffix):
            path = path[: -len(suffix)]
            break
    if path == "index" or path.endswith("/index"):
        path = path[: -len("index")]
    if len(path) > 1:
        path = path.rstrip("/")
    return path or "/"


def _page_key(link: str) -> str:
    return link if is_external(link) else normalize_page_link(link)


def page_sequence(site: SiteConfig) -> list[NavItem]:
    """Return the flattened sidebar with repeated pages kept only once."""
    seen: set[str] = set()
    sequence: list[NavItem] = []
    for item in flatten(site):
        key = _page_key(item.link)
        if key in seen:
            continue
        seen.add(key)
        sequence.append(item)
    return sequence


def find_neighbours(site: SiteConfig, link: str) -> PageNeighbours:
    """Return the previous and next sidebar items around ``link``.

    Both neighbours are ``None`` when ``link`` is not part of the sidebar.
    """
    sequence = page_sequence(site)
    key = _page_key(link)
    for index, item in enumerate(sequence):
        if _page_key(item.link) != key:
            continue
        previous = sequence[index - 1] if index > 0 else None
        following = sequence[index + 1] if index + 1 < len(sequence) else None
        return PageNeighbours(previous=previous, next=following)
    return PageNeighbours()


def resolve_link(item: NavItem | str, base: str) -> str:
    """Prefix a site-relative link with ``base``; leave external links alone."""
    link = item.link if isinstance(item, NavItem) else item
    if is_external(link) or not link.startswith("/"):
        return link
    trimmed = base.strip("/")
    prefix = f"/{trimmed}" if trimmed else ""
    return f"{prefix}{link}"


def link_for_document(relative_path: str | PurePosixPath) -> str:
    """Return the site route served by a Markdown file under the docs root."""
    path = PurePosixPath(relative_path)
    if path.suffix != ".md":
        msg = f"Expected a Markdown document, got '{path}'."
        raise ValueError(msg)
    stem = path.with_suffix("")
    if stem.name == "index":
        parent = stem.parent.as_posix()
        return "/" if parent == "." else f"/{parent}/"
    return f"/{stem.as_posix()}"


def document_candidates(link: str) -> tuple[PurePosixPath, ...]:
    """Return the Markdown paths that could serve ``link``, most specific first."""
    route = normalize_page_link(link)
    if route == "/":
        return (PurePosixPath("index.md"),)
    relative = route.lstrip("/")
    return (PurePosixPath(f"{relative}.md"), PurePosixPath(relative) / "index.md")


__all__ = [
    "PageNeighbours",
    "document_candidates",
    "find_neighbours",
    "flatten",
    "is_external",
    "iter_nav_items",
    "link_for_document",
    "normalize_page_link",
    "page_sequence",
    "resolve_link",
]

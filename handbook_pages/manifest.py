"""Export the navigation model as a JSON manifest.

The manifest gives client-side widgets (sidebar, doc footer) the same view of
the site as the generator: the sidebar tree and the linear reading order with
base-resolved hrefs and previous/next links for each page. It is encoded with
``msgspec`` structs so the schema is explicit and round-trips through
:func:`read_nav_manifest`.

Examples
--------
>>> from handbook_pages.config import load_site_config
>>> from handbook_pages.manifest import build_nav_manifest
>>> site = load_site_config(
...     {
...         "title": "Demo",
...         "base": "/demo/",
...         "themeConfig": {
...             "sidebar": [{"text": "A", "items": [{"text": "1", "link": "/a/1"}]}]
...         },
...     }
... )
>>> build_nav_manifest(site).pages[0].href
'/demo/a/1'
"""

from __future__ import annotations

import typing as typ

import msgspec

from .config import NavEntry, NavItem, NavSection
from .navigation import is_external, page_sequence, resolve_link

if typ.TYPE_CHECKING:
    from pathlib import Path

    from .config import SiteConfig


class ManifestLink(msgspec.Struct, frozen=True, tag="link"):
    """A labelled link with its base-resolved href."""

    text: str
    link: str
    href: str
    external: bool = False


class ManifestSection(msgspec.Struct, frozen=True, tag="section"):
    """A sidebar section and its children."""

    title: str
    collapsed: bool
    items: list[ManifestSection | ManifestLink]


class ManifestPage(msgspec.Struct, frozen=True):
    """A page in reading order with its doc-footer neighbours."""

    text: str
    link: str
    href: str
    external: bool
    prev: ManifestLink | None = None
    next: ManifestLink | None = None


class NavManifest(msgspec.Struct, frozen=True):
    """Top-level manifest document."""

    title: str
    base: str
    lang: str
    sidebar: list[ManifestSection]
    pages: list[ManifestPage]


def _link(item: NavItem, base: str) -> ManifestLink:
    return ManifestLink(
        text=item.text,
        link=item.link,
        href=resolve_link(item, base),
        external=is_external(item.link),
    )


def _entry(entry: NavEntry, base: str) -> ManifestSection | ManifestLink:
    match entry:
        case NavSection(title=title, items=items, collapsed=collapsed):
            return ManifestSection(
                title=title,
                collapsed=collapsed,
                items=[_entry(child, base) for child in items],
            )
        case _:
            return _link(entry, base)


def build_nav_manifest(site: SiteConfig) -> NavManifest:
    """Return the manifest structure for ``site``."""
    sequence = page_sequence(site)
    pages: list[ManifestPage] = []
    for index, item in enumerate(sequence):
        previous = sequence[index - 1] if index > 0 else None
        following = sequence[index + 1] if index + 1 < len(sequence) else None
        pages.append(
            ManifestPage(
                text=item.text,
                link=item.link,
                href=resolve_link(item, site.base),
                external=is_external(item.link),
                prev=_link(previous, site.base) if previous else None,
                next=_link(following, site.base) if following else None,
            )
        )
    return NavManifest(
        title=site.title,
        base=site.base,
        lang=site.lang,
        sidebar=[
            typ.cast("ManifestSection", _entry(section, site.base))
            for section in site.sections
        ],
        pages=pages,
    )


def encode_nav_manifest(site: SiteConfig) -> bytes:
    """Return the manifest as indented UTF-8 JSON."""
    return msgspec.json.format(msgspec.json.encode(build_nav_manifest(site)), indent=2)


def write_nav_manifest(site: SiteConfig, path: Path) -> Path:
    """Write the manifest for ``site`` to ``path`` and return the path."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(encode_nav_manifest(site) + b"\n")
    return path


def read_nav_manifest(path: Path) -> NavManifest:
    """Decode a manifest previously written by :func:`write_nav_manifest`."""
    return msgspec.json.decode(path.read_bytes(), type=NavManifest)


__all__ = [
    "ManifestLink",
    "ManifestPage",
    "ManifestSection",
    "NavManifest",
    "build_nav_manifest",
    "encode_nav_manifest",
    "read_nav_manifest",
    "write_nav_manifest",
]

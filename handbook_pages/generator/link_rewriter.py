"""Rewrite links inside chapter Markdown to base-prefixed site routes."""

from __future__ import annotations

import posixpath
import typing as typ
from urllib.parse import urlsplit

from markdown.extensions import Extension
from markdown.treeprocessors import Treeprocessor

from handbook_pages.navigation import is_external, resolve_link

if typ.TYPE_CHECKING:
    from xml.etree.ElementTree import Element

    from markdown import Markdown
else:  # pragma: no cover - type-checking fallback
    Markdown = typ.Any
    Element = typ.Any


class SiteLinkExtension(Extension):
    """Point chapter links at rendered routes under the site base.

    Site-relative (``/02-oop/01-classes-objects.md``) and page-relative
    (``./02-variables``) links lose their ``.md`` suffix and gain the base
    prefix, so they keep working when the site is served from a sub-path.
    Every internal route seen is recorded in :attr:`internal_links` for the
    dead-link check.
    """

    def __init__(self, base: str, page_link: str) -> None:
        super().__init__()
        self.base = base
        self.page_link = page_link
        self.internal_links: list[str] = []

    def extendMarkdown(self, md: Markdown) -> None:  # type: ignore[override]  # noqa: N802
        """Register the link treeprocessor on the Markdown instance."""
        processor = SiteLinkTreeprocessor(md, self)
        md.treeprocessors.register(processor, "handbook_site_links", 15)


class SiteLinkTreeprocessor(Treeprocessor):
    """Rewrite ``<a href>`` and ``<img src>`` targets in the parsed tree."""

    def __init__(self, md: Markdown, extension: SiteLinkExtension) -> None:
        super().__init__(md)
        self.extension = extension

    def run(self, root: Element) -> Element:
        """Rewrite internal anchors and site-relative images."""
        for element in root.iter():
            if element.tag == "a":
                rewritten = self._rewrite(element.get("href"))
                if rewritten:
                    element.set("href", rewritten)
            elif element.tag == "img":
                src = element.get("src")
                if src and src.startswith("/") and not is_external(src):
                    element.set("src", resolve_link(src, self.extension.base))
        return root

    def _rewrite(self, target: str | None) -> str | None:
        """Return the base-prefixed route for an internal link, else None."""
        if not target or target.startswith("#") or is_external(target):
            return None
        parsed = urlsplit(target)
        if parsed.scheme or not parsed.path:
            return None

        route = parsed.path
        if not route.startswith("/"):
            current = self.extension.page_link
            directory = current if current.endswith("/") else posixpath.dirname(current)
            joined = posixpath.normpath(posixpath.join(directory, route))
            if route.endswith("/") and not joined.endswith("/"):
                joined = f"{joined}/"
            route = joined
        if route.endswith(".md"):
            route = route[: -len(".md")]
        self.extension.internal_links.append(route)

        url = resolve_link(route, self.extension.base)
        if parsed.query:
            url = f"{url}?{parsed.query}"
        if parsed.fragment:
            url = f"{url}#{parsed.fragment}"
        return url


__all__ = ["SiteLinkExtension", "SiteLinkTreeprocessor"]

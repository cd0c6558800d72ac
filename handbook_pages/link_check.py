"""Find internal links that no Markdown document or public asset serves.

The handbook's own configuration sets ``ignoreDeadLinks: true`` so broken
links never fail a build by default. Callers opt in (``ignoreDeadLinks:
false``, a list of ignore patterns, or ``--check-dead-links``) and then use
:func:`check_dead_links`, which raises :class:`DeadLinkError` listing every
unresolved link before anything is written.
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import logging
import re
from pathlib import Path, PurePosixPath
from urllib.parse import urlsplit

from .config import SiteConfig
from .navigation import PAGE_SUFFIXES, document_candidates, is_external, iter_nav_items

logger = logging.getLogger(__name__)

PUBLIC_DIR_NAME = "public"


@dc.dataclass(slots=True, frozen=True)
class DeadLink:
    """An internal link and where it was found (``nav``, ``sidebar``, or a page)."""

    source: str
    link: str


class DeadLinkError(RuntimeError):
    """Raised when dead-link checking is enabled and links do not resolve."""

    def __init__(self, dead_links: cabc.Sequence[DeadLink]) -> None:
        self.dead_links = tuple(dead_links)
        details = "\n".join(f"  {item.link} (in {item.source})" for item in dead_links)
        super().__init__(f"Found {len(self.dead_links)} dead link(s):\n{details}")


def link_target_exists(link: str, docs_root: Path) -> bool:
    """Return True when a document or public asset under ``docs_root`` serves ``link``."""
    route = urlsplit(link).path
    if not route:
        return True
    relative = route.lstrip("/")
    suffix = PurePosixPath(route).suffix
    if suffix and suffix not in PAGE_SUFFIXES:
        return (docs_root / PUBLIC_DIR_NAME / relative).is_file() or (
            docs_root / relative
        ).is_file()
    return any(
        (docs_root / candidate).is_file() for candidate in document_candidates(route)
    )


def _config_links(site: SiteConfig) -> list[DeadLink]:
    links = [DeadLink("nav", item.link) for item in iter_nav_items(site.theme.nav)]
    links.extend(DeadLink("sidebar", item.link) for item in iter_nav_items(site.sections))
    return links


def find_dead_links(
    site: SiteConfig,
    docs_root: Path,
    page_links: cabc.Mapping[str, cabc.Iterable[str]] | None = None,
) -> list[DeadLink]:
    """Return internal links from the config and pages that do not resolve.

    Parameters
    ----------
    site : SiteConfig
        Loaded configuration; its nav and sidebar links are always checked and
        its ``dead_link_ignore_patterns`` are honoured.
    docs_root : Path
        Directory holding the Markdown documents and the ``public`` folder.
    page_links : Mapping[str, Iterable[str]], optional
        Routes linked from each rendered page, keyed by the page route.

    Returns
    -------
    list[DeadLink]
        Unresolved links in discovery order, each reported once per source.
    """
    patterns = [re.compile(pattern) for pattern in site.dead_link_ignore_patterns]
    candidates = _config_links(site)
    for source, links in (page_links or {}).items():
        candidates.extend(DeadLink(source, link) for link in links)

    dead: list[DeadLink] = []
    seen: set[DeadLink] = set()
    for candidate in candidates:
        link = candidate.link
        if is_external(link) or not link.startswith("/") or candidate in seen:
            continue
        seen.add(candidate)
        if any(pattern.search(link) for pattern in patterns):
            continue
        if not link_target_exists(link, docs_root):
            dead.append(candidate)
    return dead


def check_dead_links(
    site: SiteConfig,
    docs_root: Path,
    page_links: cabc.Mapping[str, cabc.Iterable[str]] | None = None,
) -> None:
    """Raise :class:`DeadLinkError` when any internal link is unresolved."""
    dead = find_dead_links(site, docs_root, page_links)
    if dead:
        raise DeadLinkError(dead)
    logger.debug("No dead links found under %s", docs_root)


__all__ = [
    "DeadLink",
    "DeadLinkError",
    "check_dead_links",
    "find_dead_links",
    "link_target_exists",
]

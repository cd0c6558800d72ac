"""Shared dataclasses used by the page generation pipeline."""

from __future__ import annotations

import dataclasses as dc
import datetime as dt  # noqa: TC003 - used for runtime type metadata
import typing as typ
from pathlib import Path  # noqa: TC003 - used for runtime type metadata

from handbook_pages.config import NavItem  # noqa: TC001 - dataclass field type


@dc.dataclass(slots=True, frozen=True)
class Heading:
    """A rendered heading with its anchor id."""

    level: int
    anchor: str
    text: str


@dc.dataclass(slots=True)
class RenderedMarkdown:
    """HTML produced from a Markdown body plus the headings it contains."""

    html: str
    headings: list[Heading]

    @property
    def title(self) -> str | None:
        """Return the text of the first level-one heading, if any."""
        return next((h.text for h in self.headings if h.level == 1), None)


@dc.dataclass(slots=True)
class PageModel:
    """Structured data passed to the page template.

    Attributes
    ----------
    link : str
        Site route of the page (``/01-php-basics/01-types``).
    source_path : str
        Markdown path relative to the docs root.
    output_path : Path
        Destination of the rendered HTML.
    title : str
        Page title from frontmatter, first heading, or the site title.
    description : str
        Meta description for the page.
    layout : str
        ``"doc"`` for chapters, ``"home"`` for landing pages.
    content_html : str
        Rendered Markdown body.
    outline : list[Heading]
        Headings within the configured outline levels.
    sidebar : list[dict[str, Any]]
        Sidebar view model with active and expanded flags resolved.
    previous : NavItem or None
        Previous page in reading order.
    next : NavItem or None
        Next page in reading order.
    edit_url : str or None
        Link to edit the source document.
    last_updated : datetime or None
        Last modification time of the source document.
    internal_links : list[str]
        Site routes linked from the Markdown body.
    """

    link: str
    source_path: str
    output_path: Path
    title: str
    description: str
    layout: str
    content_html: str
    outline: list[Heading]
    sidebar: list[dict[str, typ.Any]]
    previous: NavItem | None
    next: NavItem | None
    edit_url: str | None
    last_updated: dt.datetime | None
    internal_links: list[str] = dc.field(default_factory=list)


__all__ = ["Heading", "PageModel", "RenderedMarkdown"]

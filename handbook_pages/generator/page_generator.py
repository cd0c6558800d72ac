"""High-level orchestration for rendering the handbook site.

This module walks the docs root, renders every Markdown chapter with the
shared Jinja templates, and writes a themed HTML page per chapter. Each page
gets the sidebar (active entry marked, enclosing sections expanded), the
on-page outline, the edit link, the last-updated timestamp, and previous/next
links taken from the flattened sidebar. It exposes :class:`SiteGenerator`,
which consumes a :class:`~handbook_pages.config.SiteConfig`.

Example
-------
>>> from pathlib import Path
>>> from handbook_pages.config import load_site_config
>>> from handbook_pages.generator import SiteGenerator
>>> site = load_site_config(Path("config/site.yaml"))  # doctest: +SKIP
>>> generator = SiteGenerator(site, docs_root=Path("docs"), output_dir=Path("dist"))  # doctest: +SKIP
>>> generator.run()  # doctest: +SKIP
[PosixPath('dist/index.html'), ...]
"""

from __future__ import annotations

import datetime as dt
import logging
import shutil
import subprocess
import typing as typ
from pathlib import Path, PurePosixPath

from jinja2 import Environment, FileSystemLoader

from handbook_pages._constants import NAV_MANIFEST_NAME, NOT_FOUND_PAGE
from handbook_pages.config import LastUpdatedConfig, NavEntry, NavItem, NavSection
from handbook_pages.config.helpers import _optional_str, _validate_link
from handbook_pages.config.models import ConfigParseError
from handbook_pages.config.theme import _parse_outline_levels
from handbook_pages.generator.link_rewriter import SiteLinkExtension
from handbook_pages.generator.models import Heading, PageModel
from handbook_pages.generator.renderer import HtmlContentRenderer
from handbook_pages.link_check import PUBLIC_DIR_NAME, check_dead_links
from handbook_pages.manifest import write_nav_manifest
from handbook_pages.markdown_parser import FrontmatterError, parse_document
from handbook_pages.navigation import (
    PageNeighbours,
    find_neighbours,
    is_external,
    link_for_document,
    normalize_page_link,
    resolve_link,
)

if typ.TYPE_CHECKING:
    from handbook_pages.config import SiteConfig

logger = logging.getLogger(__name__)

SKIPPED_DIRS = frozenset({PUBLIC_DIR_NAME, "node_modules"})
DATE_FORMATS = {
    "full": "%A, %d %B %Y",
    "long": "%d %B %Y",
    "medium": "%d %b %Y",
    "short": "%d.%m.%Y",
}
TIME_FORMATS = {
    "full": "%H:%M:%S %Z",
    "long": "%H:%M:%S %Z",
    "medium": "%H:%M:%S",
    "short": "%H:%M",
}


def format_last_updated(value: dt.datetime, options: LastUpdatedConfig) -> str:
    """Format ``value`` with the configured date and time styles."""
    parts: list[str] = []
    if options.date_style:
        parts.append(value.strftime(DATE_FORMATS[options.date_style]))
    if options.time_style:
        parts.append(value.strftime(TIME_FORMATS[options.time_style]))
    if not parts:
        return value.isoformat(timespec="minutes")
    return ", ".join(parts)


class SiteGenerator:
    """Render every Markdown document under the docs root into themed HTML."""

    def __init__(
        self,
        site_config: SiteConfig,
        *,
        docs_root: Path,
        output_dir: Path,
        templates_dir: Path | None = None,
        pygments_style: str = "monokai",
        check_dead_links: bool | None = None,
    ) -> None:
        """Initialize the generator with configuration and template context.

        Parameters
        ----------
        site_config : SiteConfig
            Loaded site configuration providing navigation and theme labels.
        docs_root : Path
            Directory containing the Markdown chapters and ``public`` assets.
        output_dir : Path
            Directory receiving the rendered HTML.
        templates_dir : Path, optional
            Directory containing Jinja templates; defaults to the package templates.
        pygments_style : str, optional
            Pygments style used for highlighted code blocks.
        check_dead_links : bool, optional
            Override the configured dead-link policy; ``None`` follows
            ``ignoreDeadLinks``.
        """
        self.site = site_config
        self.docs_root = docs_root
        self.output_dir = output_dir
        default_templates = Path(__file__).resolve().parents[1] / "templates"
        self.templates_dir = templates_dir or default_templates
        self.renderer = HtmlContentRenderer(pygments_style)
        if check_dead_links is None:
            check_dead_links = not site_config.ignore_dead_links
        self.check_dead_links = check_dead_links
        self._git = shutil.which("git")
        self.env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.env.globals["href"] = self._href
        self.page_template = self.env.get_template("page.jinja")
        self.not_found_template = self.env.get_template("not_found.jinja")

    def run(self) -> list[Path]:
        """Render all pages, then write them with the 404 page and nav manifest.

        Returns
        -------
        list[Path]
            Paths to the generated pages (docs order), the 404 page, and the
            navigation manifest.

        Raises
        ------
        FileNotFoundError
            If the docs root does not exist.
        RuntimeError
            If the docs root holds no Markdown documents.
        DeadLinkError
            If dead-link checking is enabled and internal links do not resolve;
            nothing is written in that case.
        """
        if not self.docs_root.is_dir():
            msg = f"Docs root '{self.docs_root}' not found."
            raise FileNotFoundError(msg)
        documents = self._discover_documents()
        if not documents:
            msg = f"No Markdown documents were found under '{self.docs_root}'."
            raise RuntimeError(msg)

        pages = [self._build_page(path) for path in documents]
        if self.check_dead_links:
            check_dead_links(
                self.site,
                self.docs_root,
                {page.link: page.internal_links for page in pages},
            )
        else:
            logger.info("Dead-link checking is disabled (ignoreDeadLinks).")

        self.output_dir.mkdir(parents=True, exist_ok=True)
        generated_at = dt.datetime.now(dt.UTC)
        written: list[Path] = []
        for page in pages:
            html = self.page_template.render(**self._page_context(page, generated_at))
            page.output_path.parent.mkdir(parents=True, exist_ok=True)
            page.output_path.write_text(html, encoding="utf-8")
            logger.debug("Rendered %s -> %s", page.source_path, page.output_path)
            written.append(page.output_path)

        not_found = self._write_not_found(pages, generated_at)
        if not_found is not None:
            written.append(not_found)
        self._copy_public_assets()
        written.append(
            write_nav_manifest(self.site, self.output_dir / NAV_MANIFEST_NAME)
        )
        logger.info("Rendered %d pages into %s", len(pages), self.output_dir)
        return written

    def _discover_documents(self) -> list[Path]:
        """Return Markdown files under the docs root, skipping hidden and asset dirs."""
        documents: list[Path] = []
        for path in sorted(self.docs_root.rglob("*.md")):
            parents = path.relative_to(self.docs_root).parts[:-1]
            if any(part.startswith(".") or part in SKIPPED_DIRS for part in parents):
                continue
            documents.append(path)
        return documents

    def _build_page(self, path: Path) -> PageModel:
        """Parse and render one document into a PageModel."""
        relative = path.relative_to(self.docs_root).as_posix()
        link = link_for_document(relative)
        document = parse_document(path.read_text(encoding="utf-8"), source=relative)
        frontmatter = document.frontmatter
        link_extension = SiteLinkExtension(self.site.base, link)
        rendered = self.renderer.markdown(document.body, link_extension=link_extension)

        is_doc = frontmatter.get("layout") != "home"
        theme = self.site.theme
        show_sidebar = is_doc and frontmatter.get("sidebar", True) is not False
        edit_url = None
        if theme.edit_link and is_doc and frontmatter.get("editLink", True) is not False:
            edit_url = theme.edit_link.url_for(relative)
        last_updated = None
        if self.site.last_updated and frontmatter.get("lastUpdated", True) is not False:
            last_updated = self._resolve_last_updated(path)
        neighbours = (
            self._resolve_neighbours(link, frontmatter, relative)
            if is_doc
            else PageNeighbours()
        )

        return PageModel(
            link=link,
            source_path=relative,
            output_path=self.output_dir / PurePosixPath(relative).with_suffix(".html"),
            title=(
                _optional_str(frontmatter.get("title"))
                or rendered.title
                or self.site.title
            ),
            description=(
                _optional_str(frontmatter.get("description")) or self.site.description
            ),
            layout="doc" if is_doc else "home",
            content_html=rendered.html,
            outline=(
                self._resolve_outline(rendered.headings, frontmatter, relative)
                if is_doc
                else []
            ),
            sidebar=self._build_nav_tree(theme.sidebar, link) if show_sidebar else [],
            previous=neighbours.previous,
            next=neighbours.next,
            edit_url=edit_url,
            last_updated=last_updated,
            internal_links=link_extension.internal_links,
        )

    def _resolve_neighbours(
        self, link: str, frontmatter: dict[str, typ.Any], source: str
    ) -> PageNeighbours:
        """Return sidebar neighbours with frontmatter ``prev``/``next`` applied."""
        neighbours = find_neighbours(self.site, link)
        return PageNeighbours(
            previous=_override_neighbour(
                neighbours.previous, frontmatter.get("prev"), f"{source} 'prev'"
            ),
            next=_override_neighbour(
                neighbours.next, frontmatter.get("next"), f"{source} 'next'"
            ),
        )

    def _resolve_outline(
        self, headings: list[Heading], frontmatter: dict[str, typ.Any], source: str
    ) -> list[Heading]:
        """Return the headings that fall within the configured outline levels."""
        outline = self.site.theme.outline
        override = frontmatter.get("outline")
        if override is False or (override is None and not outline.enabled):
            return []
        levels = outline.levels
        if override not in (None, True):
            try:
                levels = _parse_outline_levels(override, "outline")
            except ConfigParseError as exc:
                msg = f"Invalid 'outline' frontmatter in {source}: {exc}"
                raise FrontmatterError(msg) from exc
        low, high = levels
        return [heading for heading in headings if low <= heading.level <= high]

    def _build_nav_tree(
        self, entries: typ.Iterable[NavEntry], active_link: str
    ) -> list[dict[str, typ.Any]]:
        """Build nav view models, flagging the active item and its sections."""
        active = normalize_page_link(active_link)
        nodes: list[dict[str, typ.Any]] = []
        for entry in entries:
            match entry:
                case NavSection(title=title, items=items, collapsed=collapsed):
                    children = self._build_nav_tree(items, active_link)
                    has_active = any(child["has_active"] for child in children)
                    nodes.append(
                        {
                            "kind": "section",
                            "label": title,
                            "collapsed": collapsed and not has_active,
                            "has_active": has_active,
                            "is_active": False,
                            "children": children,
                        }
                    )
                case NavItem(text=text, link=link):
                    external = is_external(link)
                    is_active = not external and normalize_page_link(link) == active
                    nodes.append(
                        {
                            "kind": "item",
                            "label": text,
                            "href": resolve_link(link, self.site.base),
                            "external": external,
                            "has_active": is_active,
                            "is_active": is_active,
                            "children": [],
                        }
                    )
        return nodes

    def _resolve_last_updated(self, path: Path) -> dt.datetime:
        """Return the last commit time of ``path``, falling back to its mtime."""
        if self._git:
            result = subprocess.run(  # noqa: S603 - fixed argv, no shell
                [self._git, "log", "-1", "--format=%cI", "--", path.name],
                cwd=path.parent,
                capture_output=True,
                text=True,
                check=False,
            )
            stamp = result.stdout.strip()
            if result.returncode == 0 and stamp:
                return dt.datetime.fromisoformat(stamp).astimezone(dt.UTC)
        return dt.datetime.fromtimestamp(path.stat().st_mtime, tz=dt.UTC)

    def _page_context(
        self, page: PageModel, generated_at: dt.datetime
    ) -> dict[str, typ.Any]:
        """Return the template context shared by chapter pages."""
        theme = self.site.theme
        last_updated_text = None
        if page.last_updated is not None:
            last_updated_text = format_last_updated(
                page.last_updated, theme.last_updated
            )
        return {
            "site": self.site,
            "theme": theme,
            "page": page,
            "html_title": self._format_page_title(page.title),
            "nav": self._build_nav_tree(theme.nav, page.link),
            "pygments_css": self.renderer.stylesheet,
            "last_updated_text": last_updated_text,
            "generated_at": generated_at,
        }

    def _write_not_found(
        self, pages: list[PageModel], generated_at: dt.datetime
    ) -> Path | None:
        """Write the fallback 404 page unless the docs provide their own."""
        output_path = self.output_dir / NOT_FOUND_PAGE
        if any(page.output_path == output_path for page in pages):
            return None
        theme = self.site.theme
        html = self.not_found_template.render(
            site=self.site,
            theme=theme,
            html_title=self._format_page_title("404"),
            nav=self._build_nav_tree(theme.nav, "/404"),
            generated_at=generated_at,
        )
        output_path.write_text(html, encoding="utf-8")
        return output_path

    def _copy_public_assets(self) -> None:
        """Copy ``<docs_root>/public`` verbatim into the output directory."""
        public_dir = self.docs_root / PUBLIC_DIR_NAME
        if public_dir.is_dir():
            shutil.copytree(public_dir, self.output_dir, dirs_exist_ok=True)

    def _format_page_title(self, title: str) -> str:
        """Compose the HTML title from the page and site titles."""
        if title == self.site.title:
            return title
        return f"{title} | {self.site.title}"

    def _href(self, link: str) -> str:
        """Resolve ``link`` against the site base for templates."""
        return resolve_link(link, self.site.base)


def _override_neighbour(
    default: NavItem | None, value: object, where: str
) -> NavItem | None:
    """Apply a frontmatter ``prev``/``next`` override to a sidebar neighbour."""
    match value:
        case None | True:
            return default
        case False:
            return None
        case str() as text:
            return NavItem(text=text, link=default.link) if default else None
        case {"text": text, "link": link}:
            try:
                checked = _validate_link(link, where)
            except ConfigParseError as exc:
                raise FrontmatterError(str(exc)) from exc
            return NavItem(text=str(text), link=checked)
        case _:
            msg = f"{where} must be false, a label, or a mapping with text and link."
            raise FrontmatterError(msg)


__all__ = ["SiteGenerator", "format_last_updated"]

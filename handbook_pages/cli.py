"""Cyclopts CLI entrypoint for building and inspecting the handbook site.

The ``handbook`` console script defined here renders the Markdown chapters to
static HTML, validates the site configuration (optionally checking for dead
links), prints the reading order used by the previous/next doc footer, and
exports the navigation manifest. Typical usage is ``handbook build`` locally
or in CI and ``handbook check --strict`` before publishing.

Examples
--------
Build the site with the default configuration:

>>> from handbook_pages.cli import main
>>> main()  # doctest: +SKIP

Show the neighbours of one chapter:

>>> from handbook_pages.cli import app
>>> app(["nav", "--page", "/02-oop/01-classes-objects"])  # doctest: +SKIP
"""

from __future__ import annotations

import logging
import os
import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter

from ._constants import DEFAULT_CONFIG, DEFAULT_DOCS_ROOT, DEFAULT_OUTPUT_DIR
from ._constants import NAV_MANIFEST_NAME
from .config import load_site_config
from .generator import SiteGenerator
from .link_check import find_dead_links
from .manifest import write_nav_manifest
from .navigation import find_neighbours, flatten, resolve_link

app = App(name="handbook", config=cyclopts.config.Env("HANDBOOK_", command=False))  # type: ignore[unknown-argument]


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:  # pragma: no cover - fallback for different roots
            return str(path)
    return str(path)


@app.command(help="Render the Markdown chapters into static HTML pages.")
def build(
    *,
    config: typ.Annotated[
        Path, Parameter(help="Path to site config", env_var="HANDBOOK_CONFIG")
    ] = DEFAULT_CONFIG,
    docs_root: typ.Annotated[
        Path, Parameter(help="Markdown docs root", env_var="HANDBOOK_DOCS_ROOT")
    ] = DEFAULT_DOCS_ROOT,
    output_dir: typ.Annotated[
        Path, Parameter(help="Output folder", env_var="HANDBOOK_OUTPUT_DIR")
    ] = DEFAULT_OUTPUT_DIR,
    check_dead_links: typ.Annotated[
        bool | None,
        Parameter(
            help="Override the configured ignoreDeadLinks policy",
            env_var="HANDBOOK_CHECK_DEAD_LINKS",
        ),
    ] = None,
) -> None:
    """Render every chapter under ``docs_root`` into ``output_dir``.

    Parameters
    ----------
    config : Path, optional
        Path to the ``site.yaml`` configuration file (overridable via
        ``HANDBOOK_CONFIG``).
    docs_root : Path, optional
        Directory holding the Markdown chapters and ``public`` assets.
    output_dir : Path, optional
        Directory receiving the rendered site.
    check_dead_links : bool or None, optional
        ``True`` fails the build on unresolved internal links, ``False``
        skips the check; ``None`` follows ``ignoreDeadLinks``.

    Returns
    -------
    None
        Writes rendered artifacts and prints the generated paths.

    Raises
    ------
    ConfigParseError
        If the configuration is malformed.
    DeadLinkError
        If dead-link checking is enabled and links do not resolve.
    """
    site_config = load_site_config(config)
    generator = SiteGenerator(
        site_config,
        docs_root=docs_root,
        output_dir=output_dir,
        check_dead_links=check_dead_links,
    )
    for path in generator.run():
        print(f"wrote {_format_path(path)}")


@app.command(help="Validate the site config and optionally check for dead links.")
def check(
    *,
    config: typ.Annotated[
        Path, Parameter(help="Path to site config", env_var="HANDBOOK_CONFIG")
    ] = DEFAULT_CONFIG,
    docs_root: typ.Annotated[
        Path, Parameter(help="Markdown docs root", env_var="HANDBOOK_DOCS_ROOT")
    ] = DEFAULT_DOCS_ROOT,
    strict: typ.Annotated[
        bool, Parameter(help="Check nav and sidebar links even if ignored")
    ] = False,
) -> None:
    """Load the configuration, report its size, and check links when enabled.

    Raises
    ------
    SystemExit
        With status 1 when dead links are found.
    """
    site_config = load_site_config(config)
    items = flatten(site_config)
    print(
        f"{site_config.title}: {len(site_config.sections)} sections, "
        f"{len(items)} pages"
    )
    if not strict and site_config.ignore_dead_links:
        print("dead-link check skipped (ignoreDeadLinks)")
        return
    dead = find_dead_links(site_config, docs_root)
    for entry in dead:
        print(f"dead link: {entry.link} (in {entry.source})")
    if dead:
        raise SystemExit(1)
    print("no dead links")


@app.command(help="Print the reading order, or the neighbours of one page.")
def nav(
    *,
    config: typ.Annotated[
        Path, Parameter(help="Path to site config", env_var="HANDBOOK_CONFIG")
    ] = DEFAULT_CONFIG,
    page: typ.Annotated[
        str | None, Parameter(help="Page link such as /roadmap")
    ] = None,
) -> None:
    """Print each page with its resolved href, or ``prev``/``next`` for ``page``."""
    site_config = load_site_config(config)
    if page is None:
        for index, item in enumerate(flatten(site_config), start=1):
            print(f"{index:>3} {resolve_link(item, site_config.base)}  {item.text}")
        return
    neighbours = find_neighbours(site_config, page)
    for label, item in (("prev", neighbours.previous), ("next", neighbours.next)):
        if item is None:
            print(f"{label}: -")
        else:
            print(f"{label}: {resolve_link(item, site_config.base)}  {item.text}")


@app.command(help="Write the navigation manifest JSON.")
def export(
    *,
    config: typ.Annotated[
        Path, Parameter(help="Path to site config", env_var="HANDBOOK_CONFIG")
    ] = DEFAULT_CONFIG,
    output: typ.Annotated[
        Path, Parameter(help="Manifest destination", env_var="HANDBOOK_MANIFEST")
    ] = DEFAULT_OUTPUT_DIR / NAV_MANIFEST_NAME,
) -> None:
    """Write the sidebar tree and reading order to ``output``."""
    site_config = load_site_config(config)
    path = write_nav_manifest(site_config, output)
    print(f"wrote {_format_path(path)}")


def main() -> None:
    """Invoke the Cyclopts application that powers the `handbook` console command.

    Logging goes to stderr at INFO level, or DEBUG when ``HANDBOOK_DEBUG`` is
    set to a non-empty value.

    Examples
    --------
    >>> main()  # doctest: +SKIP
    """
    level = logging.DEBUG if os.getenv("HANDBOOK_DEBUG") else logging.INFO
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()

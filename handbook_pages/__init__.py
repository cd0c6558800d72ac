"""Build tooling for the PHP/Laravel handbook static site.

This package loads the site navigation config, renders the Markdown chapters
to HTML with previous/next doc footers, and exposes the ``handbook`` console
command.

Exports
-------
- ``app``: Cyclopts application entry for subcommands.
- ``main``: Convenience function that invokes the Cyclopts app.

Examples
--------
>>> from handbook_pages import main
>>> main()  # doctest: +SKIP
"""

from __future__ import annotations

from .cli import app, main

__all__ = ["app", "main"]

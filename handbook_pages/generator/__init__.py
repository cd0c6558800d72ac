"""Utilities for rendering handbook Markdown into themed HTML pages."""

from .link_rewriter import SiteLinkExtension
from .models import Heading, PageModel, RenderedMarkdown
from .page_generator import SiteGenerator, format_last_updated
from .renderer import HtmlContentRenderer

__all__ = [
    "Heading",
    "HtmlContentRenderer",
    "PageModel",
    "RenderedMarkdown",
    "SiteGenerator",
    "SiteLinkExtension",
    "format_last_updated",
]

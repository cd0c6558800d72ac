"""Load and validate the handbook site configuration.

This subpackage parses the project's ``site.yaml`` file (title, head tags,
top navigation, collapsible sidebar sections, and theme labels) and produces
immutable dataclasses (:class:`SiteConfig`, :class:`NavSection`,
:class:`NavItem`, etc.) that the navigation helpers and the page generator
consume. The primary entry point is :func:`load_site_config`, which checks
required fields, validates every link, applies defaults, and raises
:class:`ConfigParseError` when the configuration is malformed.

Examples
--------
>>> from pathlib import Path
>>> from handbook_pages.config import load_site_config
>>> site = load_site_config(Path("config/site.yaml"))  # doctest: +SKIP
>>> site.sections[0].title  # doctest: +SKIP
'PHP Основы'
"""

from .loader import build_site_config, load_site_config
from .models import (
    ConfigParseError,
    DocFooterLabels,
    EditLinkConfig,
    FooterConfig,
    HeadTag,
    LastUpdatedConfig,
    NavEntry,
    NavItem,
    NavSection,
    OutlineConfig,
    SearchConfig,
    SiteConfig,
    SocialLink,
    ThemeConfig,
    UiLabels,
)

__all__ = [
    "ConfigParseError",
    "DocFooterLabels",
    "EditLinkConfig",
    "FooterConfig",
    "HeadTag",
    "LastUpdatedConfig",
    "NavEntry",
    "NavItem",
    "NavSection",
    "OutlineConfig",
    "SearchConfig",
    "SiteConfig",
    "SocialLink",
    "ThemeConfig",
    "UiLabels",
    "build_site_config",
    "load_site_config",
]

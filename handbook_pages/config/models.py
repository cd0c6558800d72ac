"""Typed dataclasses describing the handbook site configuration."""

from __future__ import annotations

import dataclasses as dc


class ConfigParseError(ValueError):
    """Raised when the site configuration is invalid or incomplete."""


@dc.dataclass(slots=True, frozen=True)
class NavItem:
    """A single labelled link in the top nav or sidebar."""

    text: str
    link: str


@dc.dataclass(slots=True, frozen=True)
class NavSection:
    """Named, collapsible group of navigation entries."""

    title: str
    items: tuple[NavEntry, ...]
    collapsed: bool = False


NavEntry = NavItem | NavSection


@dc.dataclass(slots=True, frozen=True)
class HeadTag:
    """Extra element injected into every page ``<head>``."""

    tag: str
    attrs: tuple[tuple[str, str], ...] = ()
    content: str | None = None


@dc.dataclass(slots=True, frozen=True)
class SocialLink:
    """Icon link rendered in the navbar."""

    icon: str
    link: str


@dc.dataclass(slots=True, frozen=True)
class EditLinkConfig:
    """Template for the "edit this page" link."""

    pattern: str
    text: str = "Edit this page"

    def url_for(self, relative_path: str) -> str:
        """Return the edit URL for a document path relative to the docs root."""
        return self.pattern.replace(":path", relative_path.lstrip("/"))


@dc.dataclass(slots=True, frozen=True)
class FooterConfig:
    """Footer copy shown under every page."""

    message: str | None = None
    copyright: str | None = None


@dc.dataclass(slots=True, frozen=True)
class SearchConfig:
    """Search provider name and the labels used by its widget."""

    provider: str = "local"
    button_text: str = "Search"
    button_aria_label: str = "Search"
    no_results_text: str = "No results for"
    reset_button_title: str = "Reset search"
    select_text: str = "to select"
    navigate_text: str = "to navigate"
    close_text: str = "to close"


@dc.dataclass(slots=True, frozen=True)
class OutlineConfig:
    """Heading levels listed in the on-page outline."""

    levels: tuple[int, int] = (2, 2)
    label: str = "On this page"
    enabled: bool = True


@dc.dataclass(slots=True, frozen=True)
class DocFooterLabels:
    """Labels for the previous/next page links."""

    prev: str = "Previous page"
    next: str = "Next page"


@dc.dataclass(slots=True, frozen=True)
class LastUpdatedConfig:
    """Label and format styles for the last-updated timestamp."""

    text: str = "Last updated"
    date_style: str | None = "short"
    time_style: str | None = "short"


@dc.dataclass(slots=True, frozen=True)
class UiLabels:
    """Miscellaneous theme labels."""

    dark_mode_switch_label: str = "Appearance"
    light_mode_switch_title: str = "Switch to light theme"
    dark_mode_switch_title: str = "Switch to dark theme"
    sidebar_menu_label: str = "Menu"
    return_to_top_label: str = "Return to top"


@dc.dataclass(slots=True, frozen=True)
class ThemeConfig:
    """Theme options: navigation, sidebar, and UI copy."""

    logo: str | None = None
    nav: tuple[NavEntry, ...] = ()
    sidebar: tuple[NavSection, ...] = ()
    social_links: tuple[SocialLink, ...] = ()
    edit_link: EditLinkConfig | None = None
    footer: FooterConfig | None = None
    search: SearchConfig = dc.field(default_factory=SearchConfig)
    outline: OutlineConfig = dc.field(default_factory=OutlineConfig)
    doc_footer: DocFooterLabels = dc.field(default_factory=DocFooterLabels)
    last_updated: LastUpdatedConfig = dc.field(default_factory=LastUpdatedConfig)
    labels: UiLabels = dc.field(default_factory=UiLabels)


@dc.dataclass(slots=True, frozen=True)
class SiteConfig:
    """Top-level, read-only site configuration."""

    title: str
    description: str = ""
    lang: str = "en-US"
    base: str = "/"
    head: tuple[HeadTag, ...] = ()
    theme: ThemeConfig = dc.field(default_factory=ThemeConfig)
    ignore_dead_links: bool = True
    dead_link_ignore_patterns: tuple[str, ...] = ()
    last_updated: bool = False

    @property
    def sections(self) -> tuple[NavSection, ...]:
        """Return the sidebar sections in display order."""
        return self.theme.sidebar


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
]

"""Builders for the ``themeConfig`` block: navigation, sidebar, and UI copy."""

from __future__ import annotations

import collections.abc as cabc
import typing as typ

from .helpers import _as_bool, _optional_str, _require_str, _validate_link
from .models import (
    ConfigParseError,
    DocFooterLabels,
    EditLinkConfig,
    FooterConfig,
    LastUpdatedConfig,
    NavEntry,
    NavItem,
    NavSection,
    OutlineConfig,
    SearchConfig,
    SocialLink,
    ThemeConfig,
    UiLabels,
)

DATE_TIME_STYLES = frozenset({"full", "long", "medium", "short"})
DEEP_OUTLINE = (2, 6)


def _pick(payload: typ.Mapping[str, typ.Any], key: str, fallback: str) -> str:
    """Return a non-empty string from ``payload`` or ``fallback``."""
    return _optional_str(payload.get(key)) or fallback


def _as_mapping(payload: object, where: str) -> typ.Mapping[str, typ.Any]:
    """Return ``payload`` as a mapping, treating None as empty."""
    match payload:
        case None:
            return {}
        case cabc.Mapping() as data:
            return data
        case _:
            msg = f"'{where}' must be a mapping."
            raise ConfigParseError(msg)


def _as_list(payload: object, where: str) -> list[typ.Any]:
    """Return ``payload`` as a list, treating None as empty."""
    match payload:
        case None:
            return []
        case list() | tuple() as items:
            return list(items)
        case _:
            msg = f"'{where}' must be a list."
            raise ConfigParseError(msg)


def _build_theme_config(payload: object) -> ThemeConfig:
    """Build the ThemeConfig from the ``themeConfig`` mapping."""
    data = _as_mapping(payload, "themeConfig")
    return ThemeConfig(
        logo=_build_logo(data.get("logo")),
        nav=_build_entries(data.get("nav"), "nav"),
        sidebar=_build_sidebar(data.get("sidebar")),
        social_links=_build_social_links(data.get("socialLinks")),
        edit_link=_build_edit_link(data.get("editLink")),
        footer=_build_footer_config(data.get("footer")),
        search=_build_search_config(data.get("search")),
        outline=_build_outline_config(data.get("outline")),
        doc_footer=_build_doc_footer(data.get("docFooter")),
        last_updated=_build_last_updated_config(data.get("lastUpdated")),
        labels=_build_ui_labels(data),
    )


def _build_logo(payload: object) -> str | None:
    match payload:
        case cabc.Mapping() as data:
            return _optional_str(data.get("src"))
        case _:
            return _optional_str(payload)


def _build_entries(payload: object, where: str) -> tuple[NavEntry, ...]:
    """Build nav entries (links or nested sections) from a list payload."""
    return tuple(
        _build_entry(entry, f"{where}[{index}]")
        for index, entry in enumerate(_as_list(payload, where))
    )


def _build_entry(entry: object, where: str) -> NavEntry:
    """Build a NavSection when ``items`` is present, otherwise a NavItem."""
    match entry:
        case {"items": _}:
            return _build_section(typ.cast("typ.Mapping[str, typ.Any]", entry), where)
        case cabc.Mapping() as data:
            return NavItem(
                text=_require_str(data, "text", where),
                link=_validate_link(data.get("link"), where),
            )
        case _:
            msg = f"{where} must be a mapping with 'text' and 'link'."
            raise ConfigParseError(msg)


def _build_section(payload: typ.Mapping[str, typ.Any], where: str) -> NavSection:
    """Build a collapsible section and its children."""
    if payload.get("link") is not None:
        msg = f"{where} cannot define both 'link' and 'items'."
        raise ConfigParseError(msg)
    title = _require_str(payload, "text", where)
    match payload.get("items"):
        case list() | tuple() as items_raw:
            pass
        case _:
            msg = f"{where}.items must be a list."
            raise ConfigParseError(msg)
    return NavSection(
        title=title,
        items=_build_entries(items_raw, f"{where}.items"),
        collapsed=_as_bool(
            payload.get("collapsed"), f"{where}.collapsed", default=False
        ),
    )


def _build_sidebar(payload: object) -> tuple[NavSection, ...]:
    """Build the ordered sidebar; every top-level entry must be a section."""
    if isinstance(payload, cabc.Mapping):
        msg = "'sidebar' must be a list of sections."
        raise ConfigParseError(msg)
    sections: list[NavSection] = []
    for index, entry in enumerate(_as_list(payload, "sidebar")):
        where = f"sidebar[{index}]"
        match entry:
            case {"items": _}:
                sections.append(_build_section(entry, where))
            case _:
                msg = f"{where} must be a section with 'text' and 'items'."
                raise ConfigParseError(msg)
    return tuple(sections)


def _build_social_links(payload: object) -> tuple[SocialLink, ...]:
    links: list[SocialLink] = []
    for index, entry in enumerate(_as_list(payload, "socialLinks")):
        where = f"socialLinks[{index}]"
        data = _as_mapping(entry, where)
        links.append(
            SocialLink(
                icon=_require_str(data, "icon", where),
                link=_validate_link(data.get("link"), where),
            )
        )
    return tuple(links)


def _build_edit_link(payload: object) -> EditLinkConfig | None:
    if payload is None:
        return None
    data = _as_mapping(payload, "editLink")
    pattern = _require_str(data, "pattern", "editLink")
    default = EditLinkConfig(pattern=pattern)
    return EditLinkConfig(pattern=pattern, text=_pick(data, "text", default.text))


def _build_footer_config(payload: object) -> FooterConfig | None:
    if payload is None:
        return None
    data = _as_mapping(payload, "footer")
    return FooterConfig(
        message=_optional_str(data.get("message")),
        copyright=_optional_str(data.get("copyright")),
    )


def _build_search_config(payload: object) -> SearchConfig:
    """Build search labels from the nested ``options.translations`` block."""
    data = _as_mapping(payload, "search")
    base = SearchConfig()
    options = _as_mapping(data.get("options"), "search.options")
    translations = _as_mapping(options.get("translations"), "search.translations")
    button = _as_mapping(translations.get("button"), "search.translations.button")
    modal = _as_mapping(translations.get("modal"), "search.translations.modal")
    footer = _as_mapping(modal.get("footer"), "search.translations.modal.footer")
    return SearchConfig(
        provider=_pick(data, "provider", base.provider),
        button_text=_pick(button, "buttonText", base.button_text),
        button_aria_label=_pick(button, "buttonAriaLabel", base.button_aria_label),
        no_results_text=_pick(modal, "noResultsText", base.no_results_text),
        reset_button_title=_pick(modal, "resetButtonTitle", base.reset_button_title),
        select_text=_pick(footer, "selectText", base.select_text),
        navigate_text=_pick(footer, "navigateText", base.navigate_text),
        close_text=_pick(footer, "closeText", base.close_text),
    )


def _parse_outline_levels(value: object, where: str) -> tuple[int, int]:
    """Parse an outline level spec: an int, ``[low, high]``, or ``"deep"``."""
    match value:
        case None:
            return OutlineConfig().levels
        case "deep":
            return DEEP_OUTLINE
        case bool():
            low = high = 0
        case int() as level:
            low = high = level
        case [int() as low, int() as high]:
            pass
        case _:
            low = high = 0
    if not 1 <= low <= high <= 6:  # noqa: PLR2004 - heading levels
        msg = f"'{where}' must be a heading level, a [low, high] pair, or 'deep'."
        raise ConfigParseError(msg)
    return (low, high)


def _build_outline_config(payload: object) -> OutlineConfig:
    match payload:
        case None | True:
            return OutlineConfig()
        case False:
            return OutlineConfig(enabled=False)
        case cabc.Mapping() as data:
            return OutlineConfig(
                levels=_parse_outline_levels(data.get("level"), "outline.level"),
                label=_pick(data, "label", OutlineConfig().label),
            )
        case _:
            return OutlineConfig(levels=_parse_outline_levels(payload, "outline"))


def _build_doc_footer(payload: object) -> DocFooterLabels:
    data = _as_mapping(payload, "docFooter")
    base = DocFooterLabels()
    return DocFooterLabels(
        prev=_pick(data, "prev", base.prev),
        next=_pick(data, "next", base.next),
    )


def _parse_style(value: object, where: str) -> str | None:
    style = _optional_str(value)
    if style is not None and style not in DATE_TIME_STYLES:
        known = ", ".join(sorted(DATE_TIME_STYLES))
        msg = f"'{where}' must be one of {known}; got {style!r}."
        raise ConfigParseError(msg)
    return style


def _build_last_updated_config(payload: object) -> LastUpdatedConfig:
    data = _as_mapping(payload, "lastUpdated")
    base = LastUpdatedConfig()
    text = _pick(data, "text", base.text)
    if "formatOptions" not in data:
        return LastUpdatedConfig(text=text)
    options = _as_mapping(data.get("formatOptions"), "lastUpdated.formatOptions")
    return LastUpdatedConfig(
        text=text,
        date_style=_parse_style(options.get("dateStyle"), "formatOptions.dateStyle"),
        time_style=_parse_style(options.get("timeStyle"), "formatOptions.timeStyle"),
    )


def _build_ui_labels(data: typ.Mapping[str, typ.Any]) -> UiLabels:
    base = UiLabels()
    return UiLabels(
        dark_mode_switch_label=_pick(
            data, "darkModeSwitchLabel", base.dark_mode_switch_label
        ),
        light_mode_switch_title=_pick(
            data, "lightModeSwitchTitle", base.light_mode_switch_title
        ),
        dark_mode_switch_title=_pick(
            data, "darkModeSwitchTitle", base.dark_mode_switch_title
        ),
        sidebar_menu_label=_pick(data, "sidebarMenuLabel", base.sidebar_menu_label),
        return_to_top_label=_pick(data, "returnToTopLabel", base.return_to_top_label),
    )


__all__ = ["_build_entries", "_build_sidebar", "_build_theme_config"]

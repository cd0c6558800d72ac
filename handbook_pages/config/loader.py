"""Load the site configuration YAML into immutable dataclasses."""

from __future__ import annotations

import collections.abc as cabc
import logging
import re
import typing as typ
from pathlib import Path

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .helpers import _as_bool, _normalize_base, _optional_str, _require_str
from .models import ConfigParseError, HeadTag, SiteConfig
from .theme import _as_list, _build_theme_config

logger = logging.getLogger(__name__)

ConfigSource = Path | str | cabc.Mapping[str, typ.Any]


def load_site_config(source: ConfigSource) -> SiteConfig:
    """Load the declarative site configuration into a :class:`SiteConfig`.

    Parameters
    ----------
    source : Path or str or Mapping
        Filesystem path to the YAML configuration file (for example,
        ``config/site.yaml``) or an already-parsed mapping with the same
        structure.

    Returns
    -------
    SiteConfig
        Read-only configuration holding the site metadata, head tags, top
        navigation, sidebar sections, and theme labels.

    Raises
    ------
    FileNotFoundError
        If ``source`` is a path and no file exists there.
    ConfigParseError
        If the YAML cannot be parsed, the top-level structure is not a
        mapping, or required fields (``title``, nav ``text``/``link``) are
        missing or malformed.

    Examples
    --------
    >>> from handbook_pages.config import load_site_config
    >>> site = load_site_config({"title": "Handbook", "base": "/docs"})
    >>> site.base
    '/docs/'
    """
    match source:
        case cabc.Mapping():
            raw = dict(source)
        case Path() | str():
            raw = _read_yaml(Path(source))
        case _:
            msg = f"Unsupported configuration source: {type(source).__name__}."
            raise TypeError(msg)

    site = build_site_config(raw)
    logger.debug(
        "Loaded site config %r with %d sidebar sections and %d nav entries",
        site.title,
        len(site.sections),
        len(site.theme.nav),
    )
    return site


def _read_yaml(path: Path) -> dict[str, typ.Any]:
    """Read ``path`` as YAML 1.2 and return its top-level mapping."""
    if not path.exists():
        msg = f"Configuration file '{path}' not found."
        raise FileNotFoundError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    try:
        with path.open("r", encoding="utf-8") as handle:
            loaded = loader.load(handle)
    except YAMLError as exc:
        msg = f"Configuration file '{path}' is not valid YAML: {exc}"
        raise ConfigParseError(msg) from exc
    if loaded is None:
        loaded = {}
    if not isinstance(loaded, dict):
        msg = "Top-level YAML structure must be a mapping."
        raise ConfigParseError(msg)
    return dict(loaded)


def build_site_config(raw: typ.Mapping[str, typ.Any]) -> SiteConfig:
    """Build a SiteConfig from an already-parsed configuration mapping."""
    title = _require_str(raw, "title", "Site configuration")
    ignore_dead_links, ignore_patterns = _parse_dead_link_policy(
        raw.get("ignoreDeadLinks")
    )
    return SiteConfig(
        title=title,
        description=_optional_str(raw.get("description")) or "",
        lang=_optional_str(raw.get("lang")) or "en-US",
        base=_normalize_base(raw.get("base")),
        head=_build_head_tags(raw.get("head")),
        theme=_build_theme_config(raw.get("themeConfig")),
        ignore_dead_links=ignore_dead_links,
        dead_link_ignore_patterns=ignore_patterns,
        last_updated=_as_bool(raw.get("lastUpdated"), "lastUpdated", default=False),
    )


def _parse_dead_link_policy(value: object) -> tuple[bool, tuple[str, ...]]:
    """Return ``(ignore_all, ignore_patterns)`` for ``ignoreDeadLinks``.

    Unset keeps the permissive default. A list of regular expressions enables
    checking and skips links that match any of them.
    """
    match value:
        case None:
            return True, ()
        case bool():
            return value, ()
        case list() as patterns:
            compiled: list[str] = []
            for index, pattern in enumerate(patterns):
                text = str(pattern)
                try:
                    re.compile(text)
                except re.error as exc:
                    msg = f"ignoreDeadLinks[{index}] is not a valid pattern: {exc}"
                    raise ConfigParseError(msg) from exc
                compiled.append(text)
            return False, tuple(compiled)
        case _:
            msg = "'ignoreDeadLinks' must be true, false, or a list of patterns."
            raise ConfigParseError(msg)


def _build_head_tags(payload: object) -> tuple[HeadTag, ...]:
    """Build head tags from ``[tag, attrs]`` or ``[tag, attrs, content]`` lists."""
    tags: list[HeadTag] = []
    for index, entry in enumerate(_as_list(payload, "head")):
        match entry:
            case [str() as tag, cabc.Mapping() as attrs]:
                content = None
            case [str() as tag, cabc.Mapping() as attrs, str() as content]:
                pass
            case _:
                msg = (
                    f"head[{index}] must be [tag, attributes] or "
                    "[tag, attributes, content]."
                )
                raise ConfigParseError(msg)
        tags.append(
            HeadTag(
                tag=tag,
                attrs=tuple((str(key), str(value)) for key, value in attrs.items()),
                content=content,
            )
        )
    return tuple(tags)


__all__ = ["ConfigSource", "build_site_config", "load_site_config"]

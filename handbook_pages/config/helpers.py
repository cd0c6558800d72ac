"""Utility helpers shared by the handbook configuration loader."""

from __future__ import annotations

import collections.abc as cabc
import typing as typ
from urllib.parse import urlsplit

from .models import ConfigParseError

DEFAULT_BASE = "/"
OPAQUE_SCHEMES = frozenset({"mailto", "tel"})


def _optional_str(value: object | None) -> str | None:
    """Return a stripped string value or None when empty."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _require_str(payload: typ.Mapping[str, typ.Any], key: str, where: str) -> str:
    """Return ``payload[key]`` as a non-empty string or raise ConfigParseError."""
    raw = payload.get(key)
    if isinstance(raw, cabc.Mapping | list | tuple | set):
        msg = f"{where} has a non-text '{key}': {raw!r}."
        raise ConfigParseError(msg)
    value = _optional_str(raw)
    if value is None:
        msg = f"{where} is missing '{key}'."
        raise ConfigParseError(msg)
    return value


def _as_bool(value: object, where: str, *, default: bool) -> bool:
    """Return ``value`` as a bool, using ``default`` when it is unset."""
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    msg = f"'{where}' must be true or false, got {value!r}."
    raise ConfigParseError(msg)


def _is_external_link(link: str) -> bool:
    """Return True when ``link`` carries a host or an opaque scheme."""
    parsed = urlsplit(link)
    if parsed.netloc:
        return True
    return parsed.scheme.lower() in OPAQUE_SCHEMES


def _validate_link(value: object, where: str) -> str:
    """Return a link that is either site-relative or an absolute URL."""
    link = _optional_str(value)
    if link is None:
        msg = f"{where} is missing 'link'."
        raise ConfigParseError(msg)
    if _is_external_link(link) or link.startswith("/"):
        return link
    msg = (
        f"{where} has link {link!r}; links must start with '/' or be an "
        "absolute URL."
    )
    raise ConfigParseError(msg)


def _normalize_base(value: object | None) -> str:
    """Return the base path with a leading and trailing slash."""
    text = _optional_str(value) or DEFAULT_BASE
    parsed = urlsplit(text)
    if parsed.scheme or parsed.netloc:
        msg = f"'base' must be a path such as '/docs/', got {text!r}."
        raise ConfigParseError(msg)
    if not text.startswith("/"):
        text = f"/{text}"
    if not text.endswith("/"):
        text = f"{text}/"
    return text


__all__ = [
    "DEFAULT_BASE",
    "OPAQUE_SCHEMES",
    "_as_bool",
    "_is_external_link",
    "_normalize_base",
    "_optional_str",
    "_require_str",
    "_validate_link",
]

r"""Split handbook Markdown documents into frontmatter and body.

Chapters may start with a YAML block delimited by ``---`` lines that overrides
per-page presentation (title, layout, previous/next links, outline). This
module separates that block from the Markdown body and returns a
:class:`Document` the page generator consumes.

Example
-------
>>> from handbook_pages.markdown_parser import parse_document
>>> doc = parse_document("---\ntitle: Types\nprev: false\n---\n# Types\nBody")
>>> doc.frontmatter["title"], doc.frontmatter["prev"]
('Types', False)
>>> doc.body
'# Types\nBody'
"""

from __future__ import annotations

import dataclasses as dc
import re
import typing as typ

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

FRONTMATTER_PATTERN = re.compile(
    r"\A\ufeff?---[ \t]*\r?\n(.*?)^---[ \t]*(?:\r?\n|\Z)", re.DOTALL | re.MULTILINE
)


class FrontmatterError(ValueError):
    """Raised when a document's frontmatter is not a valid YAML mapping."""


@dc.dataclass(slots=True)
class Document:
    """Markdown document split into frontmatter and body.

    Attributes
    ----------
    frontmatter : dict[str, Any]
        Parsed YAML mapping; empty when the document has no frontmatter.
    body : str
        Markdown that follows the frontmatter block.
    """

    frontmatter: dict[str, typ.Any]
    body: str


def parse_document(text: str, *, source: str = "<string>") -> Document:
    """Return the frontmatter mapping and Markdown body of ``text``.

    Parameters
    ----------
    text : str
        Raw document contents.
    source : str, optional
        Name used in error messages, usually the document path.

    Raises
    ------
    FrontmatterError
        If the frontmatter block is not valid YAML or not a mapping.
    """
    match = FRONTMATTER_PATTERN.match(text)
    if not match:
        return Document(frontmatter={}, body=text.removeprefix("\ufeff"))

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    try:
        loaded = loader.load(match.group(1))
    except YAMLError as exc:
        msg = f"Invalid frontmatter in {source}: {exc}"
        raise FrontmatterError(msg) from exc
    if loaded is None:
        loaded = {}
    if not isinstance(loaded, dict):
        msg = f"Frontmatter in {source} must be a mapping."
        raise FrontmatterError(msg)
    return Document(frontmatter=dict(loaded), body=text[match.end() :])


__all__ = ["Document", "FrontmatterError", "parse_document"]

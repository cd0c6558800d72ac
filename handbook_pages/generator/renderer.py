"""Render handbook Markdown into highlighted HTML and collect its headings."""

from __future__ import annotations

import re
import typing as typ
from html import escape, unescape

from markdown import Markdown
from markdown.extensions.toc import slugify_unicode
from pygments.formatters.html import HtmlFormatter

from .models import Heading, RenderedMarkdown

if typ.TYPE_CHECKING:
    from markdown.extensions import Extension
else:  # pragma: no cover - type-checking fallback
    Extension = typ.Any

HIGHLIGHT_CLASS = "codehilite"
BASE_EXTENSIONS = ("fenced_code", "codehilite", "tables", "sane_lists", "toc")
FENCE_OPEN_PATTERN = re.compile(
    r"^[`~]{3,}[ \t]*([A-Za-z0-9_+#.-]+)?[^\n]*\n.*?^[`~]{3,}[ \t]*$",
    re.DOTALL | re.MULTILINE,
)
INDENTED_FENCE_PATTERN = re.compile(r"^ {1,3}(?=[`~]{3,})", re.MULTILINE)
# ```php{2,4} and ```php:line-numbers carry display hints the highlighter rejects
FENCE_HINT_PATTERN = re.compile(
    r"^([`~]{3,})[ \t]*([A-Za-z0-9_+#-]+)[{:][^\r\n]*$", re.MULTILINE
)
HIGHLIGHT_OPEN_TAG = re.compile(rf'<div class="{HIGHLIGHT_CLASS}">')


class HtmlContentRenderer:
    """Render chapter Markdown with consistent code styling and anchors."""

    def __init__(self, pygments_style: str = "monokai") -> None:
        self.pygments_style = pygments_style
        self._formatter = HtmlFormatter(style=pygments_style, cssclass=HIGHLIGHT_CLASS)

    @property
    def stylesheet(self) -> str:
        """Return Pygments CSS scoped to highlighted blocks."""
        return self._formatter.get_style_defs(f".{HIGHLIGHT_CLASS}")

    def markdown(
        self, text: str, *, link_extension: Extension | None = None
    ) -> RenderedMarkdown:
        """Render ``text`` into HTML and list its headings.

        Parameters
        ----------
        text : str
            Markdown body without frontmatter.
        link_extension : Extension, optional
            Extension that rewrites links for the current page; pass ``None``
            to leave links untouched.

        Returns
        -------
        RenderedMarkdown
            HTML with ``data-language`` on highlighted blocks and every
            heading (levels 1-6) in document order.
        """
        source = _prepare_fences(text)
        if not source.strip():
            return RenderedMarkdown(html="", headings=[])
        md = self._converter(link_extension)
        html = _label_code_blocks(md.convert(source), source)
        headings = list(_iter_headings(getattr(md, "toc_tokens", [])))
        return RenderedMarkdown(html=html, headings=headings)

    def _converter(self, link_extension: Extension | None) -> Markdown:
        extensions: list[Extension | str] = list(BASE_EXTENSIONS)
        if link_extension is not None:
            extensions.append(link_extension)
        return Markdown(
            extensions=extensions,
            extension_configs={
                "codehilite": {
                    "css_class": HIGHLIGHT_CLASS,
                    "guess_lang": False,
                    "linenums": False,
                    "pygments_style": self.pygments_style,
                },
                "toc": {"slugify": slugify_unicode, "toc_depth": "1-6"},
            },
        )


def _prepare_fences(text: str) -> str:
    """Dedent fences nested in lists and drop line-highlight hints."""
    dedented = INDENTED_FENCE_PATTERN.sub("", text)
    return FENCE_HINT_PATTERN.sub(r"\1\2", dedented)


def _label_code_blocks(html: str, source: str) -> str:
    """Tag each highlighted block with the language of its source fence."""
    languages = iter(
        match.group(1) or "text" for match in FENCE_OPEN_PATTERN.finditer(source)
    )

    def _open_tag(_match: re.Match[str]) -> str:
        language = escape(next(languages, "text"), quote=True)
        return f'<div class="{HIGHLIGHT_CLASS}" data-language="{language}">'

    return HIGHLIGHT_OPEN_TAG.sub(_open_tag, html)


def _iter_headings(tokens: list[dict[str, typ.Any]]) -> typ.Iterator[Heading]:
    """Flatten the nested toc tokens produced by the ``toc`` extension."""
    for token in tokens:
        yield Heading(
            level=int(token["level"]),
            anchor=str(token["id"]),
            text=unescape(str(token["name"])),
        )
        yield from _iter_headings(token.get("children", []))


__all__ = ["HtmlContentRenderer"]

"""End-to-end tests for rendering a handbook docs tree into HTML.

The fixtures build a small docs root under ``tmp_path`` (a landing page, three
chapters across two sidebar sections, and a ``public`` asset) together with a
matching site configuration, run :class:`handbook_pages.generator.SiteGenerator`
once per module, and expose the written pages as ``BeautifulSoup`` trees.

The assertions cover the chrome a reader sees around each chapter: the
sidebar with the active entry marked and its section expanded, the outline,
the doc footer previous/next links, the edit link, and the base-prefixed
links. Separate tests exercise frontmatter overrides, the last-updated stamp,
the 404 page, the ``nav.json`` manifest, and the dead-link policy.
"""

from __future__ import annotations

import datetime as dt
import os
import typing as typ
from pathlib import Path

import msgspec.json as msgspec_json
import pytest
from bs4 import BeautifulSoup

from handbook_pages.config import LastUpdatedConfig, SiteConfig, load_site_config
from handbook_pages.generator import SiteGenerator, format_last_updated
from handbook_pages.link_check import DeadLinkError
from handbook_pages.markdown_parser import FrontmatterError

SITE_CONFIG: dict[str, typ.Any] = {
    "title": "PHP Handbook",
    "description": "Interview prep",
    "lang": "ru-RU",
    "base": "/php-handbook/",
    "head": [["meta", {"name": "theme-color", "content": "#5f67ee"}]],
    "themeConfig": {
        "logo": "/logo.svg",
        "nav": [
            {"text": "Главная", "link": "/"},
            {"text": "GitHub", "link": "https://github.com/example/handbook"},
        ],
        "sidebar": [
            {
                "text": "PHP Основы",
                "collapsed": False,
                "items": [
                    {"text": "Типы данных", "link": "/01-php-basics/01-types"},
                    {"text": "Переменные", "link": "/01-php-basics/02-variables"},
                ],
            },
            {
                "text": "ООП",
                "collapsed": True,
                "items": [{"text": "Классы", "link": "/02-oop/01-classes"}],
            },
        ],
        "socialLinks": [{"icon": "github", "link": "https://github.com/example"}],
        "editLink": {
            "pattern": "https://github.com/example/handbook/edit/main/:path",
            "text": "Редактировать",
        },
        "footer": {"message": "MIT", "copyright": "CodeMate"},
        "outline": {"level": [2, 3], "label": "На этой странице"},
        "docFooter": {"prev": "Назад", "next": "Дальше"},
    },
}

TYPES_MD = """---
description: Scalar and compound types
---
# Типы данных

## Скалярные типы

### Целые числа

#### Detail

See [variables](./02-variables.md) and the [roadmap](/roadmap).

```php
<?php
$count = 1;
```
"""


def _write_docs(root: Path) -> Path:
    docs = root / "docs"
    (docs / "01-php-basics").mkdir(parents=True)
    (docs / "02-oop").mkdir()
    (docs / "public").mkdir()
    (docs / ".vitepress").mkdir()
    (docs / "index.md").write_text(
        "---\nlayout: home\ntitle: Welcome\n---\n# Handbook\n", encoding="utf-8"
    )
    (docs / "01-php-basics" / "01-types.md").write_text(TYPES_MD, encoding="utf-8")
    (docs / "01-php-basics" / "02-variables.md").write_text(
        "# Переменные\n\nBody.\n", encoding="utf-8"
    )
    (docs / "02-oop" / "01-classes.md").write_text(
        "---\ntitle: Classes & Objects\nnext: false\n---\nNo heading here.\n",
        encoding="utf-8",
    )
    (docs / "public" / "logo.svg").write_text("<svg/>", encoding="utf-8")
    (docs / ".vitepress" / "ignored.md").write_text("# Hidden\n", encoding="utf-8")
    return docs


@pytest.fixture(scope="module")
def site_config() -> SiteConfig:
    return load_site_config(SITE_CONFIG)


@pytest.fixture(scope="module")
def build(
    tmp_path_factory: pytest.TempPathFactory, site_config: SiteConfig
) -> dict[str, typ.Any]:
    """Render the sample docs tree once and return the output locations."""
    root = tmp_path_factory.mktemp("site")
    docs = _write_docs(root)
    output = root / "dist"
    written = SiteGenerator(site_config, docs_root=docs, output_dir=output).run()
    return {"output": output, "written": written}


def _soup(build: dict[str, typ.Any], relative: str) -> BeautifulSoup:
    path: Path = build["output"] / relative
    return BeautifulSoup(path.read_text(encoding="utf-8"), "html.parser")


def test_every_document_is_written(build: dict[str, typ.Any]) -> None:
    output: Path = build["output"]
    relative = sorted(path.relative_to(output).as_posix() for path in build["written"])

    assert relative == [
        "01-php-basics/01-types.html",
        "01-php-basics/02-variables.html",
        "02-oop/01-classes.html",
        "404.html",
        "index.html",
        "nav.json",
    ]
    assert not (output / ".vitepress").exists(), "hidden directories are skipped"
    assert (output / "logo.svg").read_text(encoding="utf-8") == "<svg/>"


def test_page_head_uses_titles_and_tags(build: dict[str, typ.Any]) -> None:
    soup = _soup(build, "01-php-basics/01-types.html")

    assert soup.title is not None
    assert soup.title.string == "Типы данных | PHP Handbook"
    html = soup.find("html")
    assert html is not None
    assert html.get("lang") == "ru-RU"
    description = soup.find("meta", attrs={"name": "description"})
    assert description is not None
    assert description.get("content") == "Scalar and compound types"
    theme_color = soup.find("meta", attrs={"name": "theme-color"})
    assert theme_color is not None
    assert theme_color.get("content") == "#5f67ee"


def test_sidebar_marks_active_page_once(build: dict[str, typ.Any]) -> None:
    soup = _soup(build, "01-php-basics/02-variables.html")

    active = soup.select("a.sidebar-link.is-active")
    assert len(active) == 1, f"expected one active sidebar link, got {len(active)}"
    assert active[0].get("href") == "/php-handbook/01-php-basics/02-variables"
    assert active[0].get("aria-current") == "page"


def test_collapsed_section_opens_only_when_active(build: dict[str, typ.Any]) -> None:
    types_page = _soup(build, "01-php-basics/01-types.html")
    classes_page = _soup(build, "02-oop/01-classes.html")

    groups = types_page.select("details.sidebar-section__group")
    assert [group.has_attr("open") for group in groups] == [True, False]
    groups = classes_page.select("details.sidebar-section__group")
    assert [group.has_attr("open") for group in groups] == [True, True]


def test_doc_footer_links_neighbours(build: dict[str, typ.Any]) -> None:
    soup = _soup(build, "01-php-basics/02-variables.html")

    prev_link = soup.select_one("a.doc-footer__prev")
    next_link = soup.select_one("a.doc-footer__next")
    assert prev_link is not None
    assert next_link is not None
    assert prev_link.get("href") == "/php-handbook/01-php-basics/01-types"
    assert next_link.get("href") == "/php-handbook/02-oop/01-classes"
    prev_label = prev_link.select_one(".doc-footer__label")
    next_title = next_link.select_one(".doc-footer__title")
    assert prev_label is not None
    assert prev_label.get_text(strip=True) == "Назад"
    assert next_title is not None
    assert next_title.get_text(strip=True) == "Классы"


def test_first_chapter_has_no_previous_link(build: dict[str, typ.Any]) -> None:
    soup = _soup(build, "01-php-basics/01-types.html")

    assert soup.select_one("a.doc-footer__prev") is None
    assert soup.select_one("a.doc-footer__next") is not None


def test_frontmatter_can_hide_next_link(build: dict[str, typ.Any]) -> None:
    soup = _soup(build, "02-oop/01-classes.html")

    assert soup.select_one("a.doc-footer__next") is None
    prev_link = soup.select_one("a.doc-footer__prev")
    assert prev_link is not None
    assert soup.title is not None
    assert soup.title.string == "Classes & Objects | PHP Handbook"


def test_outline_respects_configured_levels(build: dict[str, typ.Any]) -> None:
    soup = _soup(build, "01-php-basics/01-types.html")

    label = soup.select_one(".doc-outline__label")
    assert label is not None
    assert label.get_text(strip=True) == "На этой странице"
    items = soup.select("li.doc-outline__item")
    assert [item.get_text(strip=True) for item in items] == [
        "Скалярные типы",
        "Целые числа",
    ]
    anchor = items[0].find("a")
    assert anchor is not None
    target = soup.find(id=str(anchor.get("href")).removeprefix("#"))
    assert target is not None
    assert target.name == "h2"


def test_body_links_are_rewritten(build: dict[str, typ.Any]) -> None:
    soup = _soup(build, "01-php-basics/01-types.html")
    article = soup.select_one("article.doc-content")
    assert article is not None

    hrefs = [anchor.get("href") for anchor in article.find_all("a")]
    assert hrefs == [
        "/php-handbook/01-php-basics/02-variables",
        "/php-handbook/roadmap",
    ]
    block = article.select_one("div.codehilite")
    assert block is not None
    assert block.get("data-language") == "php"


def test_edit_link_points_at_source(build: dict[str, typ.Any]) -> None:
    soup = _soup(build, "01-php-basics/01-types.html")

    edit = soup.select_one("a.edit-link")
    assert edit is not None
    assert edit.get("href") == (
        "https://github.com/example/handbook/edit/main/01-php-basics/01-types.md"
    )
    assert edit.get_text(strip=True) == "Редактировать"
    assert soup.select_one("p.last-updated") is None, "lastUpdated is off by default"


def test_header_chrome_is_rendered(build: dict[str, typ.Any]) -> None:
    soup = _soup(build, "01-php-basics/01-types.html")

    logo = soup.select_one("img.site-logo")
    assert logo is not None
    assert logo.get("src") == "/php-handbook/logo.svg"
    nav_links = soup.select("a.site-nav__link")
    assert [link.get("href") for link in nav_links] == [
        "/php-handbook/",
        "https://github.com/example/handbook",
    ]
    assert nav_links[1].get("target") == "_blank"
    social = soup.select_one("a.social-link")
    assert social is not None
    assert social.get("data-icon") == "github"
    message = soup.select_one(".site-footer__message")
    assert message is not None
    assert message.get_text(strip=True) == "MIT"


def test_home_layout_hides_doc_chrome(build: dict[str, typ.Any]) -> None:
    soup = _soup(build, "index.html")

    body = soup.find("body")
    assert body is not None
    assert "layout-home" in body.get("class", [])
    assert soup.select_one("aside.sidebar") is None
    assert soup.select_one("nav.doc-footer") is None
    assert soup.select_one("a.edit-link") is None
    assert soup.title is not None
    assert soup.title.string == "Welcome | PHP Handbook"
    home = soup.select_one("a.site-nav__link.is-active")
    assert home is not None
    assert home.get("href") == "/php-handbook/"


def test_not_found_page_is_written(build: dict[str, typ.Any]) -> None:
    soup = _soup(build, "404.html")

    title = soup.select_one(".not-found__title")
    assert title is not None
    assert title.get_text(strip=True) == "Page not found"
    home = soup.select_one("a.not-found__home")
    assert home is not None
    assert home.get("href") == "/php-handbook/"


def test_nav_manifest_is_written(build: dict[str, typ.Any]) -> None:
    manifest_path: Path = build["output"] / "nav.json"
    manifest = msgspec_json.decode(manifest_path.read_bytes())

    assert manifest["base"] == "/php-handbook/"
    assert [page["link"] for page in manifest["pages"]] == [
        "/01-php-basics/01-types",
        "/01-php-basics/02-variables",
        "/02-oop/01-classes",
    ]
    assert manifest["pages"][1]["next"]["href"] == "/php-handbook/02-oop/01-classes"


def test_last_updated_uses_file_time(tmp_path: Path) -> None:
    docs = tmp_path / "docs"
    docs.mkdir()
    page = docs / "guide.md"
    page.write_text("# Guide\n", encoding="utf-8")
    stamp = dt.datetime(2025, 10, 5, 14, 30, tzinfo=dt.UTC)
    os.utime(page, (stamp.timestamp(), stamp.timestamp()))
    config = dict(SITE_CONFIG, lastUpdated=True)
    config["themeConfig"] = dict(
        SITE_CONFIG["themeConfig"],
        lastUpdated={
            "text": "Обновлено",
            "formatOptions": {"dateStyle": "short", "timeStyle": "short"},
        },
    )

    generator = SiteGenerator(
        load_site_config(config), docs_root=docs, output_dir=tmp_path / "dist"
    )
    generator.run()

    soup = BeautifulSoup(
        (tmp_path / "dist" / "guide.html").read_text(encoding="utf-8"), "html.parser"
    )
    label = soup.select_one(".last-updated__label")
    time = soup.select_one("p.last-updated time")
    assert label is not None
    assert label.get_text(strip=True) == "Обновлено:"
    assert time is not None
    assert time.get_text(strip=True) == "05.10.2025, 14:30"
    assert time.get("datetime") == "2025-10-05T14:30:00+00:00"


@pytest.mark.parametrize(
    ("date_style", "time_style", "expected"),
    [
        ("short", "short", "05.10.2025, 14:30"),
        ("short", None, "05.10.2025"),
        (None, "medium", "14:30:00"),
        (None, None, "2025-10-05T14:30+00:00"),
    ],
)
def test_format_last_updated(
    date_style: str | None, time_style: str | None, expected: str
) -> None:
    value = dt.datetime(2025, 10, 5, 14, 30, tzinfo=dt.UTC)
    options = LastUpdatedConfig(date_style=date_style, time_style=time_style)

    assert format_last_updated(value, options) == expected


def test_docs_supplied_404_is_kept(tmp_path: Path) -> None:
    docs = tmp_path / "docs"
    docs.mkdir()
    (docs / "404.md").write_text("# Lost\n", encoding="utf-8")

    written = SiteGenerator(
        load_site_config({"title": "T"}), docs_root=docs, output_dir=tmp_path / "dist"
    ).run()

    assert [path.name for path in written] == ["404.html", "nav.json"]
    soup = BeautifulSoup(written[0].read_text(encoding="utf-8"), "html.parser")
    assert soup.select_one(".not-found") is None


def test_invalid_prev_override_is_rejected(tmp_path: Path) -> None:
    docs = _write_docs(tmp_path)
    (docs / "01-php-basics" / "02-variables.md").write_text(
        "---\nprev: [1, 2]\n---\nBody\n", encoding="utf-8"
    )

    generator = SiteGenerator(
        load_site_config(SITE_CONFIG), docs_root=docs, output_dir=tmp_path / "dist"
    )
    with pytest.raises(FrontmatterError, match="02-variables.md 'prev'"):
        generator.run()


def test_custom_prev_override_is_used(tmp_path: Path) -> None:
    docs = _write_docs(tmp_path)
    (docs / "01-php-basics" / "02-variables.md").write_text(
        "---\nprev:\n  text: Roadmap\n  link: /roadmap\nnext: Onwards\n---\nBody\n",
        encoding="utf-8",
    )

    SiteGenerator(
        load_site_config(SITE_CONFIG), docs_root=docs, output_dir=tmp_path / "dist"
    ).run()

    soup = BeautifulSoup(
        (tmp_path / "dist" / "01-php-basics" / "02-variables.html").read_text(
            encoding="utf-8"
        ),
        "html.parser",
    )
    prev_link = soup.select_one("a.doc-footer__prev")
    next_title = soup.select_one("a.doc-footer__next .doc-footer__title")
    assert prev_link is not None
    assert prev_link.get("href") == "/php-handbook/roadmap"
    assert next_title is not None
    assert next_title.get_text(strip=True) == "Onwards"


def test_dead_links_fail_build_before_writing(tmp_path: Path) -> None:
    docs = _write_docs(tmp_path)
    output = tmp_path / "dist"

    generator = SiteGenerator(
        load_site_config(SITE_CONFIG),
        docs_root=docs,
        output_dir=output,
        check_dead_links=True,
    )
    with pytest.raises(DeadLinkError, match="/roadmap"):
        generator.run()
    assert not output.exists(), "nothing is written when links are dead"


def test_dead_links_are_ignored_by_default(tmp_path: Path) -> None:
    docs = _write_docs(tmp_path)

    written = SiteGenerator(
        load_site_config(SITE_CONFIG), docs_root=docs, output_dir=tmp_path / "dist"
    ).run()

    assert written, "build succeeds despite the missing /roadmap page"


def test_missing_docs_root_is_reported(tmp_path: Path) -> None:
    generator = SiteGenerator(
        load_site_config({"title": "T"}),
        docs_root=tmp_path / "absent",
        output_dir=tmp_path / "dist",
    )

    with pytest.raises(FileNotFoundError, match="absent"):
        generator.run()


def test_empty_docs_root_is_reported(tmp_path: Path) -> None:
    (tmp_path / "docs").mkdir()
    generator = SiteGenerator(
        load_site_config({"title": "T"}),
        docs_root=tmp_path / "docs",
        output_dir=tmp_path / "dist",
    )

    with pytest.raises(RuntimeError, match="No Markdown documents"):
        generator.run()

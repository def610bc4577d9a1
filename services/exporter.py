# services/exporter.py
from __future__ import annotations

from typing import Any, Callable, Dict, List, NamedTuple

from models.base import json_get, json_list
from models.content_models import GeneratedContent

DEFAULT_TITLE = "Blog Post"


class ExportResult(NamedTuple):
    body: str
    media_type: str
    filename: str


# ============================================================
# ユーティリティ
# ============================================================


def _title(content: GeneratedContent) -> str:
    return _text(content.title or DEFAULT_TITLE)


def _sections(content: GeneratedContent) -> List[Any]:
    return json_list(content.sections)


def _subsections(section: Any) -> List[Any]:
    return json_list(json_get(section, "subheadings"))


def _text(value) -> str:
    return "" if value is None else str(value)


def _field(obj: Any, key: str) -> str:
    return _text(json_get(obj, key))


# ============================================================
# HTML
# ============================================================


def render_html(content: GeneratedContent) -> str:
    """<article> だけを持つ最小限の HTML ドキュメント。"""
    parts = []
    for section in _sections(content):
        subs = "".join(
            "\n"
            f"                <h3>{_field(sub, 'title')}</h3>\n"
            f"                <p>{_field(sub, 'content')}</p>\n"
            "            "
            for sub in _subsections(section)
        )
        parts.append(
            "\n"
            f"            <h2>{_field(section, 'heading')}</h2>\n"
            f"            <p>{_field(section, 'content')}</p>\n"
            f"            {subs}\n"
            "        "
        )

    return (
        "<!DOCTYPE html>\n"
        '<html lang="en">\n'
        "<head>\n"
        '    <meta charset="UTF-8">\n'
        '    <meta name="viewport" content="width=device-width, initial-scale=1.0">\n'
        f'    <meta name="description" content="{_text(content.meta_description)}">\n'
        f"    <title>{_title(content)}</title>\n"
        "</head>\n"
        "<body>\n"
        "    <article>\n"
        f"        <h1>{_title(content)}</h1>\n"
        f"        <p>{_text(content.intro)}</p>\n"
        f"        {''.join(parts)}\n"
        f"        <p>{_text(content.conclusion)}</p>\n"
        "    </article>\n"
        "</body>\n"
        "</html>"
    )


# ============================================================
# Markdown
# ============================================================


def render_markdown(content: GeneratedContent) -> str:
    parts = []
    for section in _sections(content):
        subs = "".join(
            f"\n### {_field(sub, 'title')}\n\n{_field(sub, 'content')}\n"
            for sub in _subsections(section)
        )
        parts.append(f"\n## {_field(section, 'heading')}\n\n{_field(section, 'content')}\n\n{subs}\n")

    return (
        f"# {_title(content)}\n\n"
        f"{_text(content.intro)}\n\n"
        f"{''.join(parts)}\n\n"
        f"{_text(content.conclusion)}"
    )


# ============================================================
# WordPress ブロックエディタ形式
# ============================================================

WP_HEADING_OPEN = "<!-- wp:heading -->"
WP_HEADING_H3_OPEN = '<!-- wp:heading {"level":3} -->'
WP_HEADING_H1_OPEN = '<!-- wp:heading {"level":1} -->'
WP_HEADING_CLOSE = "<!-- /wp:heading -->"
WP_PARAGRAPH_OPEN = "<!-- wp:paragraph -->"
WP_PARAGRAPH_CLOSE = "<!-- /wp:paragraph -->"


def _wp_paragraph(text: str) -> str:
    return f"{WP_PARAGRAPH_OPEN}\n<p>{text}</p>\n{WP_PARAGRAPH_CLOSE}"


def render_wordpress(content: GeneratedContent) -> str:
    """見出し・段落をすべて wp:heading / wp:paragraph のコメントで囲む。"""
    parts = []
    for section in _sections(content):
        subs = "".join(
            f"\n{WP_HEADING_H3_OPEN}\n<h3>{_field(sub, 'title')}</h3>\n{WP_HEADING_CLOSE}\n\n"
            f"{_wp_paragraph(_field(sub, 'content'))}\n"
            for sub in _subsections(section)
        )
        parts.append(
            f"\n{WP_HEADING_OPEN}\n<h2>{_field(section, 'heading')}</h2>\n{WP_HEADING_CLOSE}\n\n"
            f"{_wp_paragraph(_field(section, 'content'))}\n\n"
            f"{subs}\n"
        )

    return (
        f"{WP_HEADING_H1_OPEN}\n<h1>{_title(content)}</h1>\n{WP_HEADING_CLOSE}\n\n"
        f"{_wp_paragraph(_text(content.intro))}\n\n"
        f"{''.join(parts)}\n\n"
        f"{_wp_paragraph(_text(content.conclusion))}"
    )


# ============================================================
# プレーンテキスト
# ============================================================


def render_text(content: GeneratedContent) -> str:
    parts = []
    for section in _sections(content):
        subs = "".join(
            f"\n{_field(sub, 'title')}\n\n{_field(sub, 'content')}\n" for sub in _subsections(section)
        )
        parts.append(f"\n{_field(section, 'heading')}\n\n{_field(section, 'content')}\n\n{subs}\n")

    return (
        f"{_title(content)}\n\n"
        f"{_text(content.intro)}\n\n"
        f"{''.join(parts)}\n\n"
        f"{_text(content.conclusion)}"
    )


# ============================================================
# 形式の振り分け
# ============================================================

_FORMATS: Dict[str, tuple[Callable[[GeneratedContent], str], str, str]] = {
    "html": (render_html, "text/html", "blog-post.html"),
    "markdown": (render_markdown, "text/markdown", "blog-post.md"),
    "wordpress": (render_wordpress, "text/html", "blog-post-wordpress.html"),
}


def export_content(content: GeneratedContent, fmt: str | None) -> ExportResult:
    """未知の形式（None 含む）はプレーンテキストとして出力する。"""
    renderer, media_type, filename = _FORMATS.get(fmt or "", (render_text, "text/plain", "blog-post.txt"))
    return ExportResult(body=renderer(content), media_type=media_type, filename=filename)

"""
MarkNote — Markdown Rendering Service
======================================

What:  Converts a note's Markdown source to HTML for the detail page.
Why:   Notes are stored as raw Markdown; the detail page shows the rendered
       form while the list view shows the stripped plain-text preview.
How:   Python-Markdown with fenced code, tables and sane lists.
       - The raw-HTML processors are removed, so `<script>` typed into a
         note comes out as escaped text instead of live markup.
       - SafeUrlTreeprocessor drops `href`/`src` values whose scheme is not
         http, https or mailto, so `[x](javascript:...)` renders as an
         inert link.
Who:   Registered as the `markdown` Jinja2 filter in templating.py.

The live preview while editing is rendered in the browser
(static/js/markdown_preview.js, sanitized with DOMPurify); this module only
serves saved notes.
"""

import html
import re
from typing import Optional
from urllib.parse import urlsplit

import markdown
from markdown.treeprocessors import Treeprocessor
from markdown.util import ETX, STX
from markupsafe import Markup

EXTENSIONS = ["fenced_code", "tables", "sane_lists"]

SAFE_URL_SCHEMES = frozenset({"http", "https", "mailto"})

URL_ATTRIBUTES = {"a": "href", "img": "src"}

# Backslash escapes are held as STX<codepoint>ETX until the final unescape step.
_ESCAPED_CHAR = re.compile(f"{STX}([0-9]+){ETX}")
# Browsers ignore ASCII whitespace and control characters inside a scheme.
_IGNORED_URL_CHARS = re.compile(r"[\x00-\x20\x7f]+")


def is_safe_url(url: Optional[str]) -> bool:
    """
    True for relative URLs and for http, https and mailto.

        >>> is_safe_url("https://example.com"), is_safe_url("/notes")
        (True, True)
        >>> is_safe_url("JavaScript:alert(1)")
        False
    """
    if not url:
        return True
    decoded = _ESCAPED_CHAR.sub(lambda m: chr(int(m.group(1))), url)
    decoded = _IGNORED_URL_CHARS.sub("", html.unescape(decoded))
    try:
        scheme = urlsplit(decoded).scheme
    except ValueError:
        return False
    return not scheme or scheme.lower() in SAFE_URL_SCHEMES


class SafeUrlTreeprocessor(Treeprocessor):
    """Removes link and image URLs that is_safe_url rejects."""

    def run(self, root):
        for element in root.iter():
            attribute = URL_ATTRIBUTES.get(element.tag)
            if attribute and not is_safe_url(element.get(attribute)):
                del element.attrib[attribute]


class MarkdownService:
    """Stateless Markdown → HTML converter."""

    def __init__(self, extensions=None):
        self.extensions = list(extensions or EXTENSIONS)

    def _build(self) -> markdown.Markdown:
        # A fresh instance per call: Markdown objects hold per-document state.
        md = markdown.Markdown(extensions=self.extensions, output_format="html")
        md.preprocessors.deregister("html_block")
        md.inlinePatterns.deregister("html")
        # After "inline" (20) has built the links, before the final unescape.
        md.treeprocessors.register(SafeUrlTreeprocessor(md), "safe_urls", 1)
        return md

    def to_html(self, markdown_text: str) -> str:
        if not markdown_text:
            return ""
        return self._build().convert(markdown_text)

    def to_markup(self, markdown_text: str) -> Markup:
        """HTML marked safe for Jinja2 autoescaping."""
        return Markup(self.to_html(markdown_text))


markdown_service = MarkdownService()


def render_markdown(markdown_text: str) -> str:
    return markdown_service.to_html(markdown_text)

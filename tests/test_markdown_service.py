"""
MarkNote — Markdown Service Tests
==================================

What:  Tests for server-side Markdown rendering on the detail page.
"""

from markupsafe import Markup

from marknote.services.markdown_service import MarkdownService, is_safe_url, render_markdown


class TestMarkdownService:

    def setup_method(self):
        self.service = MarkdownService()

    def test_headings_and_emphasis(self):
        html = self.service.to_html("# Title\n\nSome **bold** and *italic* text")

        assert "<h1>Title</h1>" in html
        assert "<strong>bold</strong>" in html
        assert "<em>italic</em>" in html

    def test_fenced_code(self):
        html = self.service.to_html("```\nprint('hi')\n```")

        assert "<pre><code>" in html

    def test_tables(self):
        html = self.service.to_html("| a | b |\n|---|---|\n| 1 | 2 |")

        assert "<table>" in html
        assert "<td>1</td>" in html

    def test_raw_html_escaped(self):
        html = self.service.to_html("<script>alert(1)</script>\n\nhello <b>there</b>")

        assert "<script>" not in html
        assert "<b>" not in html
        assert "&lt;script&gt;" in html

    def test_empty_content(self):
        assert self.service.to_html("") == ""

    def test_markup_is_safe_for_templates(self):
        assert isinstance(self.service.to_markup("*x*"), Markup)

    def test_module_helper(self):
        assert "<h2>Sub</h2>" in render_markdown("## Sub")

    def test_javascript_link_rendered_inert(self):
        html = self.service.to_html("[click](javascript:alert(document.cookie))")

        assert "javascript:" not in html
        assert "<a>click</a>" in html

    def test_javascript_image_source_dropped(self):
        html = self.service.to_html("![pic](javascript:alert(1))")

        assert "javascript:" not in html
        assert "src=" not in html

    def test_safe_links_kept(self):
        html = self.service.to_html(
            "[docs](https://example.com) [mail](mailto:a@example.com) [rel](/notes)"
        )

        assert 'href="https://example.com"' in html
        assert 'href="mailto:a@example.com"' in html
        assert 'href="/notes"' in html


class TestIsSafeUrl:

    def test_allowed_schemes_and_relative_urls(self):
        for url in ("http://x.test", "HTTPS://x.test", "mailto:a@b.test", "/notes/1", "#top", ""):
            assert is_safe_url(url), url

    def test_script_schemes_rejected(self):
        for url in ("javascript:alert(1)", "JavaScript:alert(1)", "data:text/html,x", "vbscript:x"):
            assert not is_safe_url(url), url

    def test_obfuscated_schemes_rejected(self):
        assert not is_safe_url("java\tscript:alert(1)")
        assert not is_safe_url(" javascript:alert(1)")
        assert not is_safe_url("&#106;avascript:alert(1)")

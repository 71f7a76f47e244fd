"""Tests for sanitizer.sanitize and collapse_whitespace."""

from app.services.sanitizer import collapse_whitespace, sanitize


class TestSanitize:
    def test_removes_script_tags(self):
        soup = sanitize("<p>Text</p><script>alert('xss')</script>")
        assert "alert" not in soup.get_text()

    def test_removes_style_tags(self):
        soup = sanitize("<style>body { color: red; }</style><p>Text</p>")
        assert "color" not in soup.get_text()

    def test_removes_svg_tags(self):
        soup = sanitize("<p>Hello</p><svg><path d='M0 0 L100 100'/></svg>")
        text = soup.get_text()
        assert "M0 0" not in text
        assert "Hello" in text

    def test_removes_embedded_frames(self):
        soup = sanitize("<p>Content</p><iframe src='/map'>Map</iframe><object>Plugin</object>")
        text = soup.get_text()
        assert "Map" not in text
        assert "Plugin" not in text
        assert "Content" in text

    def test_removes_template_and_noscript(self):
        soup = sanitize("<p>Real</p><template><div>tmpl</div></template><noscript>Enable JS</noscript>")
        assert "tmpl" not in soup.get_text()
        assert "Enable JS" not in soup.get_text()
        assert "Real" in soup.get_text()

    def test_removes_html_comments(self):
        soup = sanitize("<p>Visible</p><!-- hidden comment -->")
        assert "hidden comment" not in str(soup)

    def test_keeps_inline_style_for_background_images(self):
        soup = sanitize('<div style="background-image: url(/hero.jpg)">Hero</div>')
        assert soup.find("div").get("style") == "background-image: url(/hero.jpg)"

    def test_keeps_header_and_nav(self):
        html = "<body><header><img src='/logo.png'><nav><a href='/about'>About</a></nav></header></body>"
        soup = sanitize(html)
        assert soup.find("header").find("img") is not None
        assert soup.find("a", href="/about") is not None

    def test_normal_content_preserved(self):
        html = "<h1>Title</h1><p>Paragraph <strong>bold</strong> text.</p>"
        soup = sanitize(html)
        assert "Title" in soup.get_text()
        assert "Paragraph" in soup.get_text()
        assert "bold" in soup.get_text()


class TestCollapseWhitespace:
    def test_collapses_runs(self):
        assert collapse_whitespace("  Hello \n\n\t world  ") == "Hello world"

    def test_empty(self):
        assert collapse_whitespace(" \n ") == ""

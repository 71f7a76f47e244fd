"""Tests for app.services.extractor."""

from unittest.mock import patch

from app.models.page import SectionKind
from app.services.extractor import extract, extract_page

_URL = "https://example.com/"

_HOME_HTML = """
<!DOCTYPE html>
<html>
<head>
  <title>Acme Photography</title>
  <meta name="description" content="Wedding and portrait photography in Austin.">
  <style>body { color: red; }</style>
</head>
<body>
  <header>
    <img src="/img/brand.png" alt="Company Logo">
  </header>
  <!-- tracking pixel goes here -->
  <section id="services">
    <h2>What we offer</h2>
    <p>Weddings, portraits and events.</p>
    <img src="/img/wedding.jpg" alt="A wedding" srcset="/img/wedding-400.jpg 400w, /img/wedding-800.jpg 800w">
  </section>
  <section class="testimonials">
    <h3>Kind words</h3>
    <p>"Best photographer ever!"</p>
  </section>
  <div class="section-about"><p>Founded in 2012 in Austin.</p></div>
  <section><p>Say hello via our contact form.</p></section>
  <div style="background-image: url('/img/hero.jpg')">Capture every moment</div>
  <img src="data:image/png;base64,iVBORw0KGgo=" alt="pixel">
  <a href="/portfolio">Portfolio</a>
  <a href="/portfolio#top">Portfolio again</a>
  <a href="https://instagram.com/acme">Instagram</a>
  <a href="mailto:hi@acme.com">Email</a>
  <script>var secret = "do not index";</script>
  <iframe src="https://maps.example.com/embed"></iframe>
</body>
</html>
"""


class TestTitleAndDescription:
    def test_title_from_title_element(self):
        assert extract_page(_HOME_HTML, _URL).title == "Acme Photography"

    def test_title_falls_back_to_first_heading(self):
        html = "<html><body><h2>Studio</h2><h1>Later</h1></body></html>"
        assert extract_page(html, _URL).title == "Studio"

    def test_title_empty_when_nothing_found(self):
        assert extract_page("<html><body><p>x</p></body></html>", _URL).title == ""

    def test_meta_description(self):
        page = extract_page(_HOME_HTML, _URL)
        assert page.description == "Wedding and portrait photography in Austin."

    def test_og_description_fallback(self):
        html = '<html><head><meta property="og:description" content="OG text"></head></html>'
        assert extract_page(html, _URL).description == "OG text"


class TestContent:
    def test_scripts_styles_and_comments_are_not_content(self):
        content = extract_page(_HOME_HTML, _URL).content
        assert "do not index" not in content
        assert "color: red" not in content
        assert "tracking pixel" not in content

    def test_whitespace_is_collapsed(self):
        html = "<html><body><p>Hello\n\n   world</p>\t<p>again</p></body></html>"
        assert extract_page(html, _URL).content == "Hello world again"

    def test_content_is_truncated(self):
        html = "<html><body><p>" + "a" * 500 + "</p></body></html>"
        with patch("app.services.extractor.MAX_CONTENT_LENGTH", 100):
            assert len(extract_page(html, _URL).content) == 100


class TestSections:
    def test_sections_are_classified_in_document_order(self):
        kinds = [section.kind for section in extract_page(_HOME_HTML, _URL).sections]
        assert kinds == [
            SectionKind.SERVICES,
            SectionKind.TESTIMONIALS,
            SectionKind.ABOUT,
            SectionKind.CONTACT,
        ]

    def test_section_title_is_nearest_heading(self):
        sections = extract_page(_HOME_HTML, _URL).sections
        assert sections[0].title == "What we offer"
        assert sections[1].title == "Kind words"

    def test_section_without_heading_uses_kind_name(self):
        sections = extract_page(_HOME_HTML, _URL).sections
        assert sections[2].title == "about"

    def test_no_containers_yields_single_other_section(self):
        html = "<html><body><p>Just some text.</p></body></html>"
        sections = extract_page(html, _URL).sections
        assert len(sections) == 1
        assert sections[0].kind is SectionKind.OTHER
        assert sections[0].content == "Just some text."

    def test_unmatched_container_is_other(self):
        html = "<html><body><section><h2>Hours</h2><p>Mon-Fri</p></section></body></html>"
        assert extract_page(html, _URL).sections[0].kind is SectionKind.OTHER


class TestImages:
    def test_discovers_img_srcset_and_background(self):
        urls = [image.url for image in extract_page(_HOME_HTML, _URL).images]
        assert urls == [
            "https://example.com/img/brand.png",
            "https://example.com/img/wedding.jpg",
            "https://example.com/img/wedding-400.jpg",
            "https://example.com/img/hero.jpg",
        ]

    def test_data_uris_are_discarded(self):
        urls = [image.url for image in extract_page(_HOME_HTML, _URL).images]
        assert not any(url.startswith("data:") for url in urls)

    def test_logo_in_header_with_logo_alt(self):
        images = {image.url: image for image in extract_page(_HOME_HTML, _URL).images}
        logo = images["https://example.com/img/brand.png"]
        assert logo.is_logo is True
        assert logo.alt_text == "Company Logo"

    def test_logo_by_class_outside_header(self):
        html = '<html><body><img class="site-Logo" src="/a.png"></body></html>'
        assert extract_page(html, _URL).images[0].is_logo is True

    def test_logo_by_url(self):
        html = '<html><body><img src="/assets/LOGO-dark.svg"></body></html>'
        assert extract_page(html, _URL).images[0].is_logo is True

    def test_regular_image_is_not_logo(self):
        images = {image.url: image for image in extract_page(_HOME_HTML, _URL).images}
        assert images["https://example.com/img/wedding.jpg"].is_logo is False

    def test_image_context_is_surrounding_text(self):
        images = {image.url: image for image in extract_page(_HOME_HTML, _URL).images}
        assert "Weddings, portraits and events." in images["https://example.com/img/wedding.jpg"].context
        assert images["https://example.com/img/hero.jpg"].context == "Capture every moment"

    def test_picture_source_srcset_takes_first_candidate(self):
        html = (
            "<html><body><picture>"
            '<source srcset="/img/a.webp 1x, /img/b.webp 2x">'
            '<img src="/img/a.jpg" alt="Cake">'
            "</picture></body></html>"
        )
        images = extract_page(html, _URL).images
        assert [image.url for image in images] == [
            "https://example.com/img/a.jpg",
            "https://example.com/img/a.webp",
        ]
        assert images[1].alt_text == "Cake"

    def test_repeated_image_on_one_page_is_listed_once(self):
        html = '<html><body><img src="/x.png"><img src="/x.png" alt="again"></body></html>'
        images = extract_page(html, _URL).images
        assert len(images) == 1
        assert images[0].alt_text == ""


class TestLinks:
    def test_links_are_canonical_and_deduplicated(self):
        _record, links = extract(_HOME_HTML, _URL)
        assert links == ["https://example.com/portfolio", "https://instagram.com/acme"]

"""Tests for app.services.classifier."""

from app.models.page import SectionKind
from app.services.classifier import SECTION_VOCABULARY, classify_section, is_logo


class TestClassifySection:
    def test_matches_on_text(self):
        assert classify_section("Read our client reviews") is SectionKind.TESTIMONIALS

    def test_matches_on_attributes(self):
        assert classify_section("Lorem ipsum", ["portfolio-grid"]) is SectionKind.PORTFOLIO

    def test_case_insensitive(self):
        assert classify_section("ABOUT US") is SectionKind.ABOUT

    def test_services_win_over_later_kinds(self):
        # Mentions both contact and services; services come first in priority
        assert classify_section("Contact us about our services") is SectionKind.SERVICES

    def test_about_wins_over_contact(self):
        assert classify_section("About the studio", ["contact"]) is SectionKind.ABOUT

    def test_default_is_other(self):
        assert classify_section("Opening hours", ["hours"]) is SectionKind.OTHER

    def test_vocabulary_covers_every_kind_but_other(self):
        assert set(SECTION_VOCABULARY) == set(SectionKind) - {SectionKind.OTHER}


class TestIsLogo:
    def test_alt_text(self):
        assert is_logo("Company Logo", "", "https://x.com/a.png", False)

    def test_class(self):
        assert is_logo("", "navbar-logo", "https://x.com/a.png", False)

    def test_url(self):
        assert is_logo("", "", "https://x.com/static/logo.svg", False)

    def test_header_placement(self):
        assert is_logo("", "", "https://x.com/a.png", True)

    def test_plain_image(self):
        assert not is_logo("Team photo", "rounded", "https://x.com/team.jpg", False)

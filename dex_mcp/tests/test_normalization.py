"""
Unit tests for identifier normalization.
"""

import pytest

from dex_mcp.services.normalization import (
    normalize_email,
    normalize_phone,
    normalize_social_url,
)


class TestNormalizeEmail:

    def test_lowercases_and_trims(self):
        assert normalize_email("  Jane.Doe@Example.COM ") == "jane.doe@example.com"

    def test_idempotent(self):
        once = normalize_email(" A@B.C ")
        assert normalize_email(once) == once


class TestNormalizePhone:

    @pytest.mark.parametrize("raw", [
        "+1 (555) 123-4567",
        "555.123.4567",
        "15551234567",
        "555-123-4567",
    ])
    def test_equivalent_formats(self, raw):
        assert normalize_phone(raw) == "5551234567"

    def test_short_number_passes_through(self):
        assert normalize_phone("123-45") == "12345"

    def test_keeps_last_ten_digits(self):
        assert normalize_phone("00442079460958") == "2079460958"

    def test_no_digits(self):
        assert normalize_phone("n/a") == ""

    def test_idempotent(self):
        once = normalize_phone("+1 (555) 123-4567")
        assert normalize_phone(once) == once


class TestNormalizeSocialUrl:

    def test_linkedin_profile(self):
        assert normalize_social_url(
            "https://www.linkedin.com/in/Melissa-Jacobs-32530b182/"
        ) == "melissa-jacobs-32530b182"

    def test_linkedin_without_scheme(self):
        assert normalize_social_url("linkedin.com/in/jane-doe?trk=abc") == "jane-doe"

    @pytest.mark.parametrize("url", [
        "https://twitter.com/JohnSmith",
        "http://www.twitter.com/johnsmith/",
        "twitter.com/johnsmith?ref=1",
        "@JohnSmith",
        "johnsmith",
    ])
    def test_twitter_equivalence(self, url):
        assert normalize_social_url(url) == "johnsmith"

    def test_other_url_keeps_host_and_path(self):
        assert normalize_social_url("https://Example.com/About/") == "example.com/about"

    def test_handle_with_whitespace(self):
        assert normalize_social_url("  @Someone/ ") == "someone"

    def test_invalid_url_does_not_raise(self):
        assert normalize_social_url("http://[invalid") == "[invalid"

    @pytest.mark.parametrize("url", [
        "https://www.linkedin.com/in/jane-doe-123/",
        "https://instagram.com/@jane",
        "https://example.com/a/b/",
        "@@handle//",
        "@https://x.com",
        "HTTP://",
    ])
    def test_idempotent(self, url):
        once = normalize_social_url(url)
        assert normalize_social_url(once) == once

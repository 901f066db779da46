"""Tests for path classification and normalisation (``linkchecker.paths``)."""

from __future__ import annotations

import pytest

from linkchecker.config import CheckerConfig
from linkchecker.models import PageType
from linkchecker.paths import (
    classify_type,
    dirname,
    fetch_url_for,
    is_onsite,
    is_web_target,
    normalize_href,
    resolve_candidate,
    split_fragment,
    strip_parent_segments,
)

_BASE = "https://docs.example.org/en/master"


# ---------------------------------------------------------------------------
# is_onsite
# ---------------------------------------------------------------------------

class TestIsOnsite:
    @pytest.mark.parametrize(
        "path, expected",
        [
            ("", True),
            ("./foo", True),
            ("#section", True),
            ("https://x", False),
            ("ftp://x", False),
            ("HTTP://EXAMPLE.COM", False),
            ("mailto:someone@example.org", False),
            ("Array.html", True),
            ("string_rb.html", True),
            ("file_rb.html", True),
            ("File.html", True),
            ("File/Stat.html", True),
            ("file:///etc/hosts", False),
            ("/absolute/path.html", False),
            ("123.html", False),
            ("../up.html", False),
        ],
    )
    def test_rule_table(self, path: str, expected: bool) -> None:
        assert is_onsite(path) is expected

    def test_uses_supplied_schemes(self) -> None:
        assert is_onsite("gopher://x") is True
        assert is_onsite("gopher://x", schemes=("gopher",)) is False

    def test_config_schemes_are_lowercased(self) -> None:
        config = CheckerConfig(schemes=("HTTPS",))
        assert config.schemes == ("https",)
        assert is_onsite("https://x", config.schemes) is False


# ---------------------------------------------------------------------------
# classify_type
# ---------------------------------------------------------------------------

class TestClassifyType:
    @pytest.mark.parametrize(
        "path, expected",
        [
            ("https://example.com/", PageType.URL),
            ("mailto:a@b.c", PageType.URL),
            ("./Foo.html", PageType.CLASS),
            ("#anchor", PageType.CLASS),
            ("", PageType.PAGE),
            ("fatal_error.html", PageType.CLASS),
            ("string.html", PageType.PAGE),
            ("NEWS-3_0_0_md.html", PageType.PAGE),
            ("README_md.html", PageType.PAGE),
            ("COPYING.html", PageType.PAGE),
            ("LEGAL.html", PageType.PAGE),
            ("Array.html", PageType.CLASS),
            ("_private.html", PageType.PAGE),
            ("files.html", PageType.PAGE),
            ("File.html", PageType.CLASS),
        ],
    )
    def test_rule_table(self, path: str, expected: PageType) -> None:
        assert classify_type(path) is expected

    def test_scheme_rule_takes_precedence(self) -> None:
        # Would otherwise fall through to the lowercase "page" rule.
        assert classify_type("http://fatal.example.com") is PageType.URL


# ---------------------------------------------------------------------------
# Normalisation helpers
# ---------------------------------------------------------------------------

class TestNormalisation:
    def test_split_fragment(self) -> None:
        assert split_fragment("a.html#sec") == ("a.html", "sec")
        assert split_fragment("a.html") == ("a.html", None)
        assert split_fragment("#sec") == ("", "sec")
        assert split_fragment("a.html#x#y") == ("a.html", "x#y")

    def test_normalize_href(self) -> None:
        assert normalize_href("./foo/") == "foo"
        assert normalize_href("foo#bar") == "foo"
        assert normalize_href("https://example.com/p/#frag") == "https://example.com/p"

    @pytest.mark.parametrize(
        "href",
        ["./foo/", "././bar//", "baz#frag", "https://example.com/a/", "", "./"],
    )
    def test_normalize_is_idempotent(self, href: str) -> None:
        once = normalize_href(href)
        assert normalize_href(once) == once

    def test_dirname(self) -> None:
        assert dirname("") == "."
        assert dirname("Array.html") == "."
        assert dirname("a/b/c.html") == "a/b"
        assert dirname("a/b/") == "a"

    def test_strip_parent_segments(self) -> None:
        assert strip_parent_segments("a/b/c.html", "../y.html") == ("a", "y.html")
        assert strip_parent_segments("a/b/c.html", "../../z.html") == (".", "z.html")
        assert strip_parent_segments("a/b/c.html", "./x.html") == ("a/b", "./x.html")
        assert strip_parent_segments("top.html", "../../z.html") == (".", "z.html")


# ---------------------------------------------------------------------------
# resolve_candidate / fetch_url_for / is_web_target
# ---------------------------------------------------------------------------

class TestResolveCandidate:
    def test_relative_links_from_subdirectory(self) -> None:
        assert resolve_candidate("a/b/index.html", "./x") == "a/b/x"
        assert resolve_candidate("a/b/index.html", "../y") == "a/y"

    def test_fragment_only_has_no_candidate(self) -> None:
        assert resolve_candidate("a/b/index.html", "#top") is None

    def test_root_level_links_are_not_joined(self) -> None:
        assert resolve_candidate("", "Array.html#method-i-each") == "Array.html"
        assert resolve_candidate("index.html", "./String.html") == "String.html"

    def test_offsite_links_are_not_joined(self) -> None:
        assert resolve_candidate("a/b/c.html", "https://example.com/p/#x") == "https://example.com/p"

    def test_link_to_own_directory(self) -> None:
        assert resolve_candidate("a/b/c.html", "./") == "a/b"


class TestFetchUrlFor:
    def test_root(self) -> None:
        assert fetch_url_for("", _BASE) == f"{_BASE}/"

    def test_onsite(self) -> None:
        assert fetch_url_for("guides/intro.html", _BASE + "/") == f"{_BASE}/guides/intro.html"

    def test_offsite_passthrough(self) -> None:
        assert fetch_url_for("https://example.com/x", _BASE) == "https://example.com/x"


class TestIsWebTarget:
    @pytest.mark.parametrize(
        "path, expected",
        [
            ("Array.html", True),
            ("", True),
            ("https://example.com", True),
            ("HTTP://example.com", True),
            ("mailto:doc@example.org", False),
            ("ftp://example.com/file", False),
            ("//cdn.example.com/lib.js", False),
        ],
    )
    def test_table(self, path: str, expected: bool) -> None:
        assert is_web_target(path) is expected

"""Tests for anchor extraction (``linkchecker.scanner.anchors``)."""

from __future__ import annotations

from linkchecker.errors import ErrorKind
from linkchecker.models import LinkStatus
from linkchecker.scanner.anchors import extract_links, iter_snippets, split_anchors


# ---------------------------------------------------------------------------
# Snippet scanning
# ---------------------------------------------------------------------------

class TestIterSnippets:
    def test_single_line_snippet(self) -> None:
        snippets = list(iter_snippets('<p>\n<a href="x.html">X</a>\n</p>\n'))
        assert snippets == [(2, '<a href="x.html">X</a>\n')]

    def test_multi_line_snippet_starts_on_opening_line(self) -> None:
        text = '<a href="y.html">\nline two\nY</a>\n'
        assert list(iter_snippets(text)) == [(1, text)]

    def test_snippet_continues_when_last_anchor_is_open(self) -> None:
        text = '<a href="a.html">A</a> and <a href="b.html">\nB</a>\n'
        snippets = list(iter_snippets(text))
        assert len(snippets) == 1
        assert snippets[0][0] == 1

    def test_unterminated_snippet_at_end_of_text(self) -> None:
        assert list(iter_snippets('<a href="x.html">dangling\nmore')) == [
            (1, '<a href="x.html">dangling\nmore')
        ]


class TestSplitAnchors:
    def test_discards_leading_text(self) -> None:
        assert split_anchors('<li><a href="a">A</a></li>') == ['<a href="a">A</a>']

    def test_multiple_anchors(self) -> None:
        anchors = split_anchors('<a href="a">A</a>, <a href="b">B</a>')
        assert anchors == ['<a href="a">A</a>', '<a href="b">B</a>']


# ---------------------------------------------------------------------------
# extract_links
# ---------------------------------------------------------------------------

class TestExtractLinks:
    def test_one_line_anchor(self) -> None:
        links, errors = extract_links("", '<a href="x.html">Text</a>')
        assert errors == []
        assert len(links) == 1
        link = links[0]
        assert link.href == "x.html"
        assert link.text == "Text"
        assert link.line_number == 1
        assert link.origin_path == ""
        assert link.status is LinkStatus.UNKNOWN

    def test_multi_line_anchor(self) -> None:
        text = '<html>\n<body>\n<a href="y.html">\n\nText</a>\n</body>\n</html>\n'
        links, errors = extract_links("index.html", text)
        assert errors == []
        assert [(lnk.line_number, lnk.href, lnk.text) for lnk in links] == [(3, "y.html", "Text")]

    def test_links_keep_markup_order(self) -> None:
        text = (
            '<p><a href="a.html">A</a> and <a href="b.html">B</a></p>\n'
            '<p><a href="c.html">C</a></p>\n'
        )
        links, _ = extract_links("", text)
        assert [lnk.href for lnk in links] == ["a.html", "b.html", "c.html"]
        assert [lnk.line_number for lnk in links] == [1, 1, 2]

    def test_image_wrappers_are_excluded(self) -> None:
        links, errors = extract_links("", '<a href="big.png"><img src="small.png"></a>')
        assert links == []
        assert errors == []

    def test_text_falls_back_to_single_child(self) -> None:
        links, _ = extract_links("", '<a href="Array.html#method-i-each"><code>each</code></a>')
        assert links[0].text == "each"

    def test_named_anchor_without_href_is_skipped(self) -> None:
        links, errors = extract_links("", '<a name="top"></a>')
        assert links == []
        assert errors == []

    def test_parse_failure_is_recorded_and_scan_continues(self) -> None:
        text = '<a href=unquoted.html>Bad</a>\n<a href="good.html">Good</a>\n'
        links, errors = extract_links("page.html", text)
        assert [lnk.href for lnk in links] == ["good.html"]
        assert len(errors) == 1
        assert errors[0].kind is ErrorKind.ANCHOR_PARSE
        assert errors[0].argname == "anchor"
        assert "unquoted.html" in errors[0].argvalue
        assert errors[0].cause_type == "ParseError"

    def test_entities_in_text(self) -> None:
        links, errors = extract_links("", '<a href="x.html">Foo&nbsp;&amp;&nbsp;Bar</a>')
        assert errors == []
        assert links[0].text == "Foo\xa0&\xa0Bar"

    def test_href_is_kept_raw_and_dir_resolved(self) -> None:
        links, _ = extract_links("a/b/c.html", '<a href="../d.html#s">D</a>')
        assert links[0].href == "../d.html#s"
        assert links[0].resolved_dir == "a"

    def test_resolved_dir_for_same_directory(self) -> None:
        links, _ = extract_links("a/b/c.html", '<a href="./x.html">X</a>')
        assert links[0].resolved_dir == "a/b"

    def test_missing_text_is_empty_string(self) -> None:
        links, _ = extract_links("", '<a href="x.html"></a>')
        assert links[0].text == ""

    def test_anchor_split_across_lines_after_closed_one(self) -> None:
        text = 'see <a href="a.html">A</a> or <a href="b.html">\nB</a>\n'
        links, errors = extract_links("", text)
        assert errors == []
        assert [(lnk.href, lnk.text) for lnk in links] == [("a.html", "A"), ("b.html", "B")]

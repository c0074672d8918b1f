"""
Unit tests for the regex-based description converters.

The conversions are ordered single-pass substitutions, so these tests
pin the exact output for common authoring patterns.
"""

import unittest

from canvas_assignment_mcp.schemas import Link
from canvas_assignment_mcp.utils import (
    extract_links,
    strip_to_plain_text,
    to_constrained_markdown,
)


class TestStripToPlainText(unittest.TestCase):
    def test_strips_tags_and_decodes_nbsp(self) -> None:
        self.assertEqual(strip_to_plain_text("<b>Hi</b>&nbsp;there"), "Hi there")

    def test_decodes_only_nbsp_and_amp(self) -> None:
        text = strip_to_plain_text("<p>R&amp;D &lt;draft&gt;</p>")
        self.assertEqual(text, "R&D &lt;draft&gt;")

    def test_keeps_whitespace_verbatim(self) -> None:
        self.assertEqual(strip_to_plain_text("<p> a </p>\n<p>b</p>"), " a \nb")

    def test_empty_input(self) -> None:
        self.assertEqual(strip_to_plain_text(None), "")
        self.assertEqual(strip_to_plain_text(""), "")


class TestToConstrainedMarkdown(unittest.TestCase):
    def test_heading_and_paragraph(self) -> None:
        md = to_constrained_markdown("<h1>A</h1><p>B</p>")
        self.assertEqual(md, "# A\n\nB\n\n")
        self.assertNotIn("<h1>", md)
        self.assertNotIn("<p>", md)

    def test_heading_levels_with_attributes(self) -> None:
        md = to_constrained_markdown(
            '<h2 class="x">Two</h2><h3>Three</h3><H1>One</H1>'
        )
        self.assertEqual(md, "## Two\n\n### Three\n\n# One\n\n")

    def test_bold_and_italic(self) -> None:
        md = to_constrained_markdown(
            "<strong>a</strong> <b>b</b> <em>c</em> <i>d</i>"
        )
        self.assertEqual(md, "**a** **b** *c* *d*")

    def test_unordered_list(self) -> None:
        md = to_constrained_markdown("<ul><li>one</li><li>two</li></ul>")
        self.assertEqual(md, "- one\n- two\n")

    def test_ordered_lists_number_per_block(self) -> None:
        md = to_constrained_markdown(
            "<ol><li>a</li><li>b</li></ol><ol>\n<li>c</li>\n</ol>"
        )
        self.assertEqual(md, "1. a\n2. b\n\n1. c\n\n")

    def test_line_breaks(self) -> None:
        self.assertEqual(to_constrained_markdown("a<br>b<br/>c<BR />d"), "a\nb\nc\nd")

    def test_line_break_before_newline_emits_one_newline(self) -> None:
        self.assertEqual(to_constrained_markdown("a<br>\nb"), "a\nb")
        self.assertEqual(to_constrained_markdown("a<br />\nb<br>c"), "a\nb\nc")

    def test_heading_followed_by_text_gets_blank_line(self) -> None:
        self.assertEqual(to_constrained_markdown("<h1>A</h1>B"), "# A\n\nB")

    def test_unknown_tags_are_removed(self) -> None:
        md = to_constrained_markdown('<div><span style="x">kept</span></div>')
        self.assertEqual(md, "kept")

    def test_list_inside_paragraph_is_approximate(self) -> None:
        # The paragraph rule cannot see across the newline the list rule emits.
        md = to_constrained_markdown("<p>Steps<ul><li>x</li></ul></p>")
        self.assertNotIn("<", md)
        self.assertIn("- x", md)

    def test_empty_input(self) -> None:
        self.assertEqual(to_constrained_markdown(None), "")


class TestExtractLinks(unittest.TestCase):
    def test_links_in_source_order(self) -> None:
        html = (
            '<p>See <a href="https://a.example/1">first</a> and '
            "<a class='btn' href='https://b.example/2' target=\"_blank\">second</a></p>"
        )
        self.assertEqual(
            extract_links(html),
            [
                Link(text="first", href="https://a.example/1"),
                Link(text="second", href="https://b.example/2"),
            ],
        )

    def test_unterminated_anchor_is_skipped(self) -> None:
        html = '<p><a href="https://x.example">never closed</p>'
        self.assertEqual(extract_links(html), [])

    def test_anchor_without_href_or_text(self) -> None:
        html = '<a name="top">Top</a><a href="https://z.example"></a>'
        self.assertEqual(extract_links(html), [])

    def test_empty_input(self) -> None:
        self.assertEqual(extract_links(None), [])


if __name__ == "__main__":
    unittest.main()

"""Tests for the render tree builder and layout."""

import pytest

from html2term.core import (
    BackgroundColour,
    Code,
    Colour,
    ConversionError,
    Emphasis,
    ErrorKind,
    Fragment,
    Image,
    Link,
    Preformat,
    Strong,
)
from html2term.rendering.css import StyleSheet
from html2term.rendering.document import parse_html
from html2term.rendering.tree import NodeKind, RenderNode, RenderTreeBuilder, layout, wrap_fragments


def line_text(line: list[Fragment]) -> str:
    return "".join(fragment.text for fragment in line)


def build(html: str, css: bool = False) -> RenderNode:
    soup = parse_html(html)
    stylesheet = StyleSheet.from_document(soup) if css else None
    return RenderTreeBuilder(stylesheet).build(soup)


def text_nodes(node: RenderNode) -> list[RenderNode]:
    if node.kind is NodeKind.TEXT:
        return [node]
    found = []
    for child in node.children:
        found.extend(text_nodes(child))
    return found


def render_lines(html: str, width: int = 80, css: bool = False) -> list[str]:
    return [line_text(line) for line in layout(build(html, css), width)]


class TestBuilder:
    def test_nested_annotations_outermost_first(self):
        (node,) = text_nodes(build('<p><a href="u"><b>hi</b></a></p>'))
        assert node.text == "hi"
        assert node.annotations == (Link("u"), Strong())

    def test_inline_annotations(self):
        nodes = text_nodes(build("<p><em>a</em><code>b</code><i><strong>c</strong></i></p>"))
        assert [n.annotations for n in nodes] == [(Emphasis(),), (Code(),), (Emphasis(), Strong())]

    def test_image_alt_text(self):
        (node,) = text_nodes(build('<p><img src="a.png" alt=" Logo "><img src="b.png"></p>'))
        assert node.text == "Logo"
        assert node.annotations == (Image("a.png"),)

    def test_image_alt_whitespace_collapsed(self):
        (node,) = text_nodes(build('<p><img src="x" alt="line one\n\tline two"></p>'))
        assert node.text == "line one line two"

    def test_link_without_href(self):
        (node,) = text_nodes(build('<p><a name="top">x</a></p>'))
        assert node.annotations == ()

    def test_css_colours(self):
        html = '<style>p { color: red }</style><p><span style="background-color: #0000ff">x</span></p>'
        (node,) = text_nodes(build(html, css=True))
        assert node.annotations == (Colour(255, 0, 0), BackgroundColour(0, 0, 255))

    def test_css_ignored_without_stylesheet(self):
        (node,) = text_nodes(build('<p style="color: red">x</p>'))
        assert node.annotations == ()

    def test_hidden_elements_skipped(self):
        nodes = text_nodes(build('<p style="display:none">a</p><p>b</p>', css=True))
        assert [n.text for n in nodes] == ["b"]

    def test_scripts_skipped(self):
        nodes = text_nodes(build("<script>var x;</script><p>b</p>"))
        assert [n.text for n in nodes] == ["b"]

    def test_preformatted(self):
        tree = build("<pre>a  <b>b</b></pre>")
        (pre,) = tree.children
        assert pre.kind is NodeKind.PREFORMAT
        assert [(n.text, n.annotations) for n in text_nodes(pre)] == [
            ("a  ", (Preformat(),)),
            ("b", (Preformat(), Strong())),
        ]

    def test_list_prefixes(self):
        tree = build('<ol start="3"><li>a</li><li>b</li></ol><ul><li>c</li></ul>')
        ordered, unordered = tree.children
        assert [item.prefix for item in ordered.children] == ["3. ", "4. "]
        assert [item.prefix for item in unordered.children] == ["* "]

    def test_dump(self):
        dump = str(build('<ul><li><b>x</b></li></ul>'))
        assert dump.splitlines() == [
            "DOCUMENT",
            "  LIST spaced",
            "    LIST_ITEM prefix='* '",
            "      TEXT 'x' [Strong()]",
        ]


class TestLayout:
    def test_paragraphs_separated_by_blank_line(self):
        assert render_lines("<p>a</p><p>b</p>") == ["a", "", "b"]

    def test_whitespace_collapsed(self):
        assert render_lines("<p>  one \n  <b> two </b>  three </p>") == ["one two three"]

    def test_wrapping(self):
        assert render_lines("<p>one two three four</p>", width=9) == ["one two", "three", "four"]

    def test_wrapping_keeps_annotations(self):
        lines = layout(build("<p>plain <b>bold words here</b></p>"), 10)
        assert lines == [
            [Fragment("plain "), Fragment("bold", (Strong(),))],
            [Fragment("words here", (Strong(),))],
        ]

    def test_text_width_limits_wrapping(self):
        lines = layout(build("<p>one two three four</p>"), 80, text_width=9)
        assert [line_text(line) for line in lines] == ["one two", "three", "four"]

    def test_list(self):
        assert render_lines("<ul><li>one</li><li>two</li></ul>") == ["* one", "* two"]

    def test_list_item_wraps_under_bullet(self):
        assert render_lines("<ul><li>aaa bbb</li></ul>", width=6) == ["* aaa", "  bbb"]

    def test_heading(self):
        assert render_lines("<h2>Title</h2><p>x</p>") == ["## Title", "", "x"]

    def test_blockquote(self):
        assert render_lines("<blockquote><p>q</p></blockquote>") == ["> q"]

    def test_line_breaks(self):
        assert render_lines("<p>a<br>b<br><br>c</p>") == ["a", "b", "", "c"]

    def test_preformatted_kept(self):
        assert render_lines("<pre>a  b\n  c</pre>") == ["a  b", "  c"]

    def test_rule(self):
        assert render_lines("<p>a</p><hr><p>b</p>", width=5) == ["a", "", "─────", "", "b"]

    def test_table_cells_inline(self):
        assert render_lines("<table><tr><th>A</th><td>1</td></tr></table>") == ["A 1"]

    def test_empty_list_item_keeps_bullet_to_itself(self):
        assert render_lines("<ul><li></li></ul><p>x</p>") == ["x"]

    def test_image_alt_with_newline(self):
        html = '<p><img src="x" alt="line one\nline two"></p>'
        lines = layout(build(html), 80)
        assert lines == [[Fragment("line one line two", (Image("x"),))]]

    def test_too_narrow(self):
        with pytest.raises(ConversionError) as excinfo:
            layout(build("<p>x</p>"), 0)
        assert excinfo.value.kind is ErrorKind.RENDER


def test_wrap_fragments_long_word():
    lines = wrap_fragments([Fragment("abcdef", (Strong(),))], 4)
    assert lines == [[Fragment("abcd", (Strong(),))], [Fragment("ef", (Strong(),))]]


@pytest.mark.parametrize("text", ["a\nb", "a\tb"])
def test_wrap_fragments_rejects_raw_whitespace(text):
    with pytest.raises(ConversionError) as excinfo:
        wrap_fragments([Fragment(text)], 20)
    assert excinfo.value.kind is ErrorKind.RENDER

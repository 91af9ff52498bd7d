"""Tests for output mode selection and the rendering engine."""

import pytest

from html2term.config import RenderConfig, build_render_config
from html2term.core import ConversionError, ErrorKind
from html2term.rendering import OutputMode, RenderEngine, select_mode


class TestSelectMode:
    def test_default_is_text(self):
        assert select_mode(RenderConfig()) is OutputMode.TEXT

    def test_literal_is_text(self):
        assert select_mode(RenderConfig(literal=True)) is OutputMode.TEXT

    def test_colour_beats_dumps(self):
        config = build_render_config(colour=True, show_dom=True, show_render=True, show_css=True)
        assert select_mode(config) is OutputMode.COLOUR

    def test_css_dump_beats_dom(self):
        assert select_mode(RenderConfig(show_css=True, show_dom=True)) is OutputMode.CSS_DUMP

    def test_css_dump_needs_css_support(self):
        config = RenderConfig(show_css=True, show_dom=True, css_supported=False)
        assert select_mode(config) is OutputMode.DOM_DUMP

    def test_dom_beats_render(self):
        assert select_mode(RenderConfig(show_dom=True, show_render=True)) is OutputMode.DOM_DUMP

    def test_render_dump(self):
        assert select_mode(RenderConfig(show_render=True)) is OutputMode.RENDER_DUMP


def translate(html: str, **flags) -> str:
    return RenderEngine(build_render_config(**flags)).translate(html)


class TestColourMode:
    def test_default_styling(self, sample_html):
        out = translate(sample_html, colour=True)
        assert "\x1b[1mUser\x1b[0m" in out
        assert "\x1b[3mimportant\x1b[0m" in out
        assert "\x1b[4;34mClick here\x1b[0m" in out
        assert "\x1b[34mprint()\x1b[0m" in out
        assert "\x1b[3;33mCompany Logo\x1b[0m" in out
        assert "# Welcome" in out
        assert "Hidden text" in out
        assert out.endswith("\n")

    def test_document_css(self, sample_html):
        out = translate(sample_html, colour=True, css=True)
        assert "\x1b[38;2;255;0;0mCareful now\x1b[0m" in out
        assert "Hidden text" not in out

    def test_ignore_css_colour_still_hides(self, sample_html):
        out = translate(sample_html, colour=True, css=True, ignore_css_colour=True)
        assert "\x1b[38;2" not in out
        assert "Careful now" in out
        assert "Hidden text" not in out

    def test_only_css(self, sample_html):
        out = translate(sample_html, colour=True, css=True, only_css=True)
        assert "\x1b[1m" not in out
        assert "\x1b[3mimportant\x1b[0m" in out

    def test_hyperlinks(self, sample_html):
        out = translate(sample_html, colour=True, hyperlinks=True)
        assert "\x1b]8;" in out
        assert "https://example.com" in out

    def test_width(self):
        out = translate("<p>aaa bbb ccc</p>", colour=True, width=7)
        assert out == "aaa bbb\nccc\n"

    def test_wrap_width(self):
        out = translate("<p>aaa bbb ccc</p>", colour=True, width=80, wrap_width=3)
        assert out == "aaa\nbbb\nccc\n"

    def test_multiline_alt_text(self):
        out = translate('<p><img src="x" alt="line one\nline two"></p>', colour=True)
        assert out == "\x1b[3;33mline one line two\x1b[0m\n"

    def test_too_narrow(self):
        with pytest.raises(ConversionError) as excinfo:
            translate("<p>x</p>", colour=True, width=0)
        assert excinfo.value.kind is ErrorKind.RENDER

    def test_dump_flags_ignored(self, sample_html):
        out = translate(sample_html, colour=True, show_dom=True)
        assert not out.startswith("Document")
        assert "\x1b[1mUser\x1b[0m" in out


class TestOtherModes:
    def test_css_dump(self, sample_html):
        out = translate(sample_html, show_css=True)
        assert ".warning (0, 1, 0) {\n  color: #ff0000;\n}\n" in out

    def test_dom_dump(self, sample_html):
        out = translate(sample_html, show_dom=True)
        assert out.startswith("Document\n")
        assert '"Careful now"' in out

    def test_render_dump(self, sample_html):
        out = translate(sample_html, show_render=True)
        assert out.startswith("DOCUMENT\n")
        assert "TEXT 'User' [Strong()]" in out
        assert "Hidden text" in out

    def test_render_dump_with_css(self, sample_html):
        out = translate(sample_html, show_render=True, css=True)
        assert "Colour(r=255, g=0, b=0)" in out
        assert "Hidden text" not in out

    def test_plain_text(self, sample_html):
        out = translate(sample_html)
        assert "Welcome" in out
        assert "https://example.com" in out
        assert "Hidden text" in out
        assert "\x1b" not in out

    def test_plain_text_with_css(self, sample_html):
        out = translate(sample_html, css=True)
        assert "Careful now" in out
        assert "Hidden text" not in out

    def test_literal_text(self, sample_html):
        out = translate(sample_html, literal=True)
        assert "Click here" in out
        assert "https://example.com" not in out

    def test_bytes_input(self):
        out = RenderEngine(RenderConfig()).translate("<p>naïve</p>".encode("utf-8"))
        assert out == "naïve\n"

"""Tests for the document CSS helpers."""

import pytest
from bs4 import BeautifulSoup

from html2term.rendering.css import (
    StyleSheet,
    is_hidden,
    parse_colour,
    parse_declarations,
    parse_stylesheet,
    specificity,
)


@pytest.mark.parametrize("value, expected", [
    ("#f00", (255, 0, 0)),
    ("#00FF80", (0, 255, 128)),
    ("rgb(1, 2, 3)", (1, 2, 3)),
    ("rgba(10,20,30,0.5)", (10, 20, 30)),
    ("rgb(300, 0, 0)", (255, 0, 0)),
    (" Navy ", (0, 0, 128)),
    ("transparent", None),
    ("#12", None),
    ("", None),
])
def test_parse_colour(value, expected):
    assert parse_colour(value) == expected


def test_parse_declarations():
    declarations = parse_declarations("Color: red !important; /* note */ display:none;; bogus")
    assert declarations == {"color": "red", "display": "none"}


def test_parse_stylesheet_skips_at_rules():
    rules = parse_stylesheet("""
        @import url(base.css);
        /* comment { not a rule } */
        h1, h2 { color: blue }
        @media print { p { color: black } }
        .note { background-color: #eee; }
    """)
    assert [rule.selector for rule in rules] == ["h1", "h2", ".note"]
    assert rules[0].declarations == {"color": "blue"}
    assert [rule.order for rule in rules] == [0, 1, 2]


def test_specificity():
    assert specificity("p") == (0, 0, 1)
    assert specificity("div p.note") == (0, 1, 2)
    assert specificity("#main a:hover") == (1, 1, 1)


class TestStyleSheet:
    def _soup(self, body: str) -> BeautifulSoup:
        return BeautifulSoup(body, "lxml")

    def test_more_specific_rule_wins(self):
        soup = self._soup("""
            <style>p.note { color: green } p { color: red }</style>
            <p class="note">x</p><p>y</p>
        """)
        sheet = StyleSheet.from_document(soup)
        first, second = soup.find_all("p")
        assert sheet.computed_style(first)["color"] == "green"
        assert sheet.computed_style(second)["color"] == "red"

    def test_later_rule_wins_on_tie(self):
        soup = self._soup("<style>p { color: red } p { color: blue }</style><p>x</p>")
        sheet = StyleSheet.from_document(soup)
        assert sheet.computed_style(soup.p)["color"] == "blue"

    def test_inline_style_wins(self):
        soup = self._soup('<style>#a { color: red }</style><p id="a" style="color: lime">x</p>')
        sheet = StyleSheet.from_document(soup)
        assert sheet.computed_style(soup.p)["color"] == "lime"

    def test_bad_selector_skipped(self):
        soup = self._soup("<style>a[ { color: red } p { display: none }</style><p>x</p>")
        sheet = StyleSheet.from_document(soup)
        assert is_hidden(sheet.computed_style(soup.p))

    def test_no_rules(self):
        soup = self._soup("<p>x</p>")
        assert StyleSheet.from_document(soup).computed_style(soup.p) == {}

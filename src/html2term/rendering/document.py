# =============================================================================
# Document Parsing
# =============================================================================
# Parses HTML into a BeautifulSoup tree (lxml parser) and provides the
# diagnostic views of it:
#   - dom_to_string():          the parsed DOM (--show-dom)
#   - parsed_style_to_string(): the document's CSS rules (--show-css)
#
# HTML found in the wild carries a lot of Microsoft Office noise
# (conditional comments, XML namespaces). We strip that before parsing.
# =============================================================================

import json
import logging
import re

from bs4 import BeautifulSoup, Comment, Doctype, NavigableString, Tag, UnicodeDammit
from bs4.builder import ParserRejectedMarkup

from html2term.core import ConversionError, ErrorKind
from html2term.rendering.css import StyleSheet, is_hidden

logger = logging.getLogger(__name__)


def parse_html(data: bytes | str) -> BeautifulSoup:
    """
    Parse an HTML document.

    Args:
        data: Raw bytes (encoding is detected) or already-decoded text.

    Returns:
        The parsed document.

    Raises:
        ConversionError: If the input can't be decoded or parsed.
    """
    if isinstance(data, bytes):
        markup = UnicodeDammit(data, ["utf-8"], is_html=True).unicode_markup
        if markup is None:
            raise ConversionError(
                ErrorKind.RENDER, "parsing HTML", "could not detect the character encoding"
            )
    else:
        markup = data

    markup = preclean_html(markup)

    try:
        soup = BeautifulSoup(markup, "lxml")
    except ParserRejectedMarkup as e:
        raise ConversionError(ErrorKind.RENDER, "parsing HTML", e) from e

    logger.debug(f"Parsed {len(markup)} characters of HTML")
    return soup


def preclean_html(html: str) -> str:
    """Remove Office/IE noise that confuses the parser."""
    # Remove IE conditional comments
    html = re.sub(r'<!--\[if[^\]]*\]>.*?<!\[endif\]-->', '', html, flags=re.DOTALL | re.IGNORECASE)
    html = re.sub(r'<!--\[if[^\]]*\]><!-->.*?<!--<!\[endif\]-->', '', html, flags=re.DOTALL | re.IGNORECASE)
    html = re.sub(r'<!\[if[^\]]*\]>.*?<!\[endif\]>', '', html, flags=re.DOTALL | re.IGNORECASE)

    # Remove XML/Office namespace tags
    html = re.sub(r'<\?xml[^>]*\?>', '', html, flags=re.IGNORECASE)
    html = re.sub(r'<o:[^>]*>.*?</o:[^>]*>', '', html, flags=re.DOTALL)
    html = re.sub(r'<v:[^>]*>.*?</v:[^>]*>', '', html, flags=re.DOTALL)

    return html


def hide_undisplayed(soup: BeautifulSoup, stylesheet: StyleSheet) -> int:
    """
    Remove every element whose computed style is display: none.

    Returns:
        Number of elements removed.
    """
    hidden = [
        element for element in soup.find_all(True)
        if is_hidden(stylesheet.computed_style(element))
    ]
    removed = 0
    for element in hidden:
        # Skip elements already gone with a hidden ancestor
        if element.decomposed:
            continue
        element.decompose()
        removed += 1
    logger.debug(f"Removed {removed} hidden elements")
    return removed


# =============================================================================
# Diagnostic Dumps
# =============================================================================

def dom_to_string(soup: BeautifulSoup) -> str:
    """
    Render the parsed DOM as an indented tree.

    Example output:
        Document
          <html>
            <body>
              <p class="note">
                "Hello"
    """
    lines = ["Document"]
    for child in soup.children:
        _dump_node(child, 1, lines)
    return "\n".join(lines) + "\n"


def _dump_node(node, depth: int, lines: list[str]) -> None:
    indent = "  " * depth

    if isinstance(node, Doctype):
        lines.append(f"{indent}<!DOCTYPE {node}>")
        return
    if isinstance(node, Comment):
        lines.append(f"{indent}<!--{node}-->")
        return
    if isinstance(node, NavigableString):
        if str(node).strip():
            lines.append(f"{indent}{json.dumps(str(node), ensure_ascii=False)}")
        return
    if not isinstance(node, Tag):
        return

    attrs = "".join(
        f' {name}="{" ".join(value) if isinstance(value, list) else value}"'
        for name, value in node.attrs.items()
    )
    lines.append(f"{indent}<{node.name}{attrs}>")
    for child in node.children:
        _dump_node(child, depth + 1, lines)


def parsed_style_to_string(stylesheet: StyleSheet) -> str:
    """
    Render the document's CSS rules, one block per selector.

    Example output:
        p.note (0, 1, 1) {
          color: red;
        }
    """
    blocks = []
    for rule in stylesheet.rules:
        body = "".join(f"  {name}: {value};\n" for name, value in rule.declarations.items())
        blocks.append(f"{rule.selector} {rule.specificity} {{\n{body}}}\n")
    return "".join(blocks)

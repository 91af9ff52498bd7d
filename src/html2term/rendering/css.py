# =============================================================================
# Document CSS
# =============================================================================
# Just enough CSS to honour what a terminal can show:
#   - color / background-color (turned into Colour annotations)
#   - display: none (the element is not rendered at all)
#
# Rules come from <style> elements and inline style="" attributes. Selectors
# are matched with BeautifulSoup's select() (soupsieve), so anything it
# understands works; selectors it rejects are skipped.
# =============================================================================

import logging
import re
from dataclasses import dataclass, field

from bs4 import BeautifulSoup, Tag
from soupsieve import SelectorSyntaxError

logger = logging.getLogger(__name__)

RGB = tuple[int, int, int]

# CSS named colours likely to turn up in real documents
NAMED_COLOURS: dict[str, RGB] = {
    "black": (0, 0, 0),
    "silver": (192, 192, 192),
    "gray": (128, 128, 128),
    "grey": (128, 128, 128),
    "white": (255, 255, 255),
    "maroon": (128, 0, 0),
    "red": (255, 0, 0),
    "purple": (128, 0, 128),
    "fuchsia": (255, 0, 255),
    "magenta": (255, 0, 255),
    "green": (0, 128, 0),
    "lime": (0, 255, 0),
    "olive": (128, 128, 0),
    "yellow": (255, 255, 0),
    "navy": (0, 0, 128),
    "blue": (0, 0, 255),
    "teal": (0, 128, 128),
    "aqua": (0, 255, 255),
    "cyan": (0, 255, 255),
    "orange": (255, 165, 0),
    "pink": (255, 192, 203),
    "brown": (165, 42, 42),
    "darkgray": (169, 169, 169),
    "darkgrey": (169, 169, 169),
    "lightgray": (211, 211, 211),
    "lightgrey": (211, 211, 211),
    "darkred": (139, 0, 0),
    "darkgreen": (0, 100, 0),
    "darkblue": (0, 0, 139),
    "gold": (255, 215, 0),
    "indigo": (75, 0, 130),
    "violet": (238, 130, 238),
}

_HEX_RE = re.compile(r"^#([0-9a-f]{3}|[0-9a-f]{6})$", re.IGNORECASE)
_RGB_RE = re.compile(
    r"^rgba?\(\s*(\d{1,3})\s*,?\s*(\d{1,3})\s*,?\s*(\d{1,3})\s*(?:[,/]\s*[\d.]+%?\s*)?\)$",
    re.IGNORECASE,
)
_COMMENT_RE = re.compile(r"/\*.*?\*/", re.DOTALL)


def parse_colour(value: str) -> RGB | None:
    """
    Parse a CSS colour value.

    Supports #rgb, #rrggbb, rgb()/rgba() and common named colours.

    Returns:
        An (r, g, b) tuple, or None for anything unrecognised
        (including "transparent" and "inherit").
    """
    value = value.strip().lower()

    match = _HEX_RE.match(value)
    if match:
        digits = match.group(1)
        if len(digits) == 3:
            digits = "".join(c * 2 for c in digits)
        return (int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16))

    match = _RGB_RE.match(value)
    if match:
        r, g, b = (min(int(part), 255) for part in match.groups())
        return (r, g, b)

    return NAMED_COLOURS.get(value)


def parse_declarations(text: str) -> dict[str, str]:
    """
    Parse "name: value; name: value" into a dict.

    Property names are lowercased and "!important" is dropped.
    Later declarations of the same property win.
    """
    declarations: dict[str, str] = {}
    for part in _COMMENT_RE.sub("", text).split(";"):
        if ":" not in part:
            continue
        name, _, value = part.partition(":")
        name = name.strip().lower()
        value = re.sub(r"!\s*important\s*$", "", value.strip(), flags=re.IGNORECASE).strip()
        if name and value:
            declarations[name] = value
    return declarations


def specificity(selector: str) -> tuple[int, int, int]:
    """Rough (ids, classes/attributes/pseudo-classes, elements) specificity."""
    stripped = re.sub(r"\[[^\]]*\]", "[]", selector)
    ids = stripped.count("#")
    classes = len(re.findall(r"\.[\w-]+|\[\]|:(?!:)[\w-]+", stripped))
    elements = len(re.findall(r"(?:^|[\s>+~(])([a-zA-Z][\w-]*)", stripped))
    return (ids, classes, elements)


@dataclass
class StyleRule:
    """
    One selector with its declarations.

    Attributes:
        selector: A single (not comma-separated) selector.
        declarations: Property name -> value.
        order: Position in the source, used to break specificity ties.
    """
    selector: str
    declarations: dict[str, str]
    order: int = 0

    @property
    def specificity(self) -> tuple[int, int, int]:
        return specificity(self.selector)


def parse_stylesheet(text: str, start_order: int = 0) -> list[StyleRule]:
    """
    Parse CSS source into rules.

    At-rules (@media, @font-face, @import...) are skipped entirely.
    Grouped selectors ("h1, h2 { ... }") become one rule per selector.
    """
    text = _COMMENT_RE.sub("", text)
    rules: list[StyleRule] = []
    order = start_order
    pos = 0

    while pos < len(text):
        brace = text.find("{", pos)
        semicolon = text.find(";", pos)
        prelude = text[pos:brace if brace != -1 else len(text)].strip()

        # Statement at-rule without a block, e.g. @import url(...);
        if prelude.startswith("@") and semicolon != -1 and (brace == -1 or semicolon < brace):
            pos = semicolon + 1
            continue
        if brace == -1:
            break

        end = _matching_brace(text, brace)
        body = text[brace + 1:end]
        pos = end + 1

        if prelude.startswith("@"):
            logger.debug(f"Skipping at-rule: {prelude}")
            continue

        declarations = parse_declarations(body)
        for selector in prelude.split(","):
            selector = selector.strip()
            if selector:
                rules.append(StyleRule(selector, declarations, order))
                order += 1

    return rules


def _matching_brace(text: str, start: int) -> int:
    """Index of the brace closing the one at start (or end of text)."""
    depth = 0
    for index in range(start, len(text)):
        if text[index] == "{":
            depth += 1
        elif text[index] == "}":
            depth -= 1
            if depth == 0:
                return index
    return len(text)


@dataclass
class StyleSheet:
    """
    The CSS rules of a document and their effect on its elements.

    Usage:
        >>> sheet = StyleSheet.from_document(soup)
        >>> sheet.computed_style(soup.find("p"))
        {'color': 'red'}
    """
    rules: list[StyleRule] = field(default_factory=list)
    _matches: dict[int, list[StyleRule]] = field(default_factory=dict, repr=False)
    _matched_soup: int | None = field(default=None, repr=False)

    @classmethod
    def from_document(cls, soup: BeautifulSoup) -> "StyleSheet":
        """Collect the rules from every <style> element of the document."""
        rules: list[StyleRule] = []
        for style in soup.find_all("style"):
            rules.extend(parse_stylesheet(style.get_text(), start_order=len(rules)))
        logger.debug(f"Read {len(rules)} CSS rules from document")
        return cls(rules=rules)

    def computed_style(self, element: Tag) -> dict[str, str]:
        """
        Declarations that apply to an element.

        Matching rules are applied in order of specificity then source
        order, followed by the element's inline style attribute.
        """
        self._ensure_matched(element)
        style: dict[str, str] = {}
        matched = self._matches.get(id(element), [])
        for rule in sorted(matched, key=lambda r: (r.specificity, r.order)):
            style.update(rule.declarations)
        inline = element.get("style")
        if inline:
            style.update(parse_declarations(inline))
        return style

    def _ensure_matched(self, element: Tag) -> None:
        """Run every selector once against the element's document."""
        root = element
        while root.parent is not None:
            root = root.parent
        if self._matched_soup == id(root):
            return

        self._matches = {}
        self._matched_soup = id(root)
        for rule in self.rules:
            try:
                selected = root.select(rule.selector)
            except SelectorSyntaxError as e:
                logger.debug(f"Skipping unsupported selector {rule.selector!r}: {e}")
                continue
            for tag in selected:
                self._matches.setdefault(id(tag), []).append(rule)


def is_hidden(style: dict[str, str]) -> bool:
    """True if the computed style hides the element."""
    return style.get("display", "").strip().lower() == "none"

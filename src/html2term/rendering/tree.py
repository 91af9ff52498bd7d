# =============================================================================
# Render Tree and Layout
# =============================================================================
# Sits between the parsed DOM and the styled output:
#
#   DOM (BeautifulSoup) --RenderTreeBuilder--> RenderNode tree
#   RenderNode tree     --layout()----------> lines of Fragments
#
# The render tree keeps only what matters for text output: block structure
# (paragraphs, lists, quotes, preformatted blocks) and runs of text with
# their annotations. str(tree) gives the --show-render dump.
#
# Layout breaks blocks into lines at the configured width. The wrapping
# itself is textwrap's; we only map its lines back onto the fragments so
# each piece keeps its annotations.
# =============================================================================

import logging
import re
import textwrap
from dataclasses import dataclass, field
from enum import Enum, auto

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import PreformattedString

from html2term.core import (
    Annotation,
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
    Strikeout,
    Strong,
)
from html2term.rendering.css import StyleSheet, is_hidden, parse_colour

logger = logging.getLogger(__name__)


class NodeKind(Enum):
    """Kinds of render tree node."""
    DOCUMENT = auto()
    BLOCK = auto()          # Paragraph, div, heading, table row...
    LIST = auto()           # <ul> / <ol>
    LIST_ITEM = auto()      # <li>, prefix holds the bullet
    QUOTE = auto()          # <blockquote>, prefix holds the quote marker
    PREFORMAT = auto()      # <pre>, whitespace kept verbatim
    TEXT = auto()           # A run of text with annotations
    LINE_BREAK = auto()     # <br>
    RULE = auto()           # <hr>


@dataclass
class RenderNode:
    """
    A node of the render tree.

    Attributes:
        kind: What this node is.
        text: Text content (TEXT nodes only).
        annotations: Annotations of the text, outermost first.
        children: Child nodes.
        prefix: Bullet, quote marker or heading marker.
        spaced: Separate from neighbouring blocks by a blank line.
    """
    kind: NodeKind
    text: str = ""
    annotations: tuple[Annotation, ...] = ()
    children: list["RenderNode"] = field(default_factory=list)
    prefix: str = ""
    spaced: bool = False

    def to_string(self, depth: int = 0) -> str:
        """Indented dump of this node and its descendants."""
        parts = ["  " * depth + self.kind.name]
        if self.kind is NodeKind.TEXT:
            parts.append(repr(self.text))
            parts.append(repr(list(self.annotations)))
        if self.prefix:
            parts.append(f"prefix={self.prefix!r}")
        if self.spaced:
            parts.append("spaced")
        lines = [" ".join(parts)]
        lines.extend(child.to_string(depth + 1) for child in self.children)
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.to_string() + "\n"


# =============================================================================
# Building
# =============================================================================

class RenderTreeBuilder:
    """
    Converts a parsed document into a render tree.

    Elements are dispatched to a _build_<tag> method when one exists;
    otherwise they are treated as inline annotations, plain blocks, or
    transparent containers.

    Usage:
        >>> builder = RenderTreeBuilder(stylesheet)
        >>> tree = builder.build(soup)
        >>> print(tree)
    """

    # Elements that never produce output
    SKIP_ELEMENTS = {'script', 'style', 'head', 'meta', 'link', 'noscript', 'title', 'template'}

    # Blocks separated from their neighbours by a blank line
    SPACED_BLOCKS = {'p', 'table', 'dl', 'figure', 'address', 'fieldset'}

    # Blocks that only start on a new line
    BLOCKS = {
        'div', 'section', 'article', 'header', 'footer', 'nav', 'aside', 'main',
        'center', 'form', 'tr', 'dt', 'dd', 'caption', 'figcaption', 'details',
        'summary', 'thead', 'tbody', 'tfoot',
    }

    # Inline elements and the annotation they add
    INLINE_ANNOTATIONS: dict[str, Annotation] = {
        'em': Emphasis(),
        'i': Emphasis(),
        'cite': Emphasis(),
        'strong': Strong(),
        'b': Strong(),
        's': Strikeout(),
        'strike': Strikeout(),
        'del': Strikeout(),
        'code': Code(),
        'tt': Code(),
        'kbd': Code(),
        'samp': Code(),
    }

    def __init__(self, stylesheet: StyleSheet | None = None) -> None:
        """
        Initialize the builder.

        Args:
            stylesheet: Document CSS to apply. None ignores CSS entirely.
        """
        self.stylesheet = stylesheet

    def build(self, soup: BeautifulSoup) -> RenderNode:
        """Build the render tree for a document."""
        root = RenderNode(NodeKind.DOCUMENT)
        body = soup.body or soup
        root.children = self._build_children(body, (), False)
        return root

    def _build_children(
        self,
        element: Tag,
        annotations: tuple[Annotation, ...],
        preformatted: bool,
    ) -> list[RenderNode]:
        nodes: list[RenderNode] = []
        for child in element.children:
            nodes.extend(self._build(child, annotations, preformatted))
        return nodes

    def _build(self, node, annotations: tuple[Annotation, ...], preformatted: bool) -> list[RenderNode]:
        """Build the render nodes for one DOM node."""
        if isinstance(node, PreformattedString):
            # Comments, doctypes, CDATA...
            return []

        if isinstance(node, NavigableString):
            text = str(node)
            if not preformatted:
                text = re.sub(r'\s+', ' ', text)
            if not text:
                return []
            return [RenderNode(NodeKind.TEXT, text=text, annotations=annotations)]

        if not isinstance(node, Tag):
            return []

        tag = node.name.lower()
        if tag in self.SKIP_ELEMENTS:
            return []

        if self.stylesheet is not None:
            style = self.stylesheet.computed_style(node)
            if is_hidden(style):
                return []
            annotations = annotations + self._style_annotations(style)

        handler = getattr(self, f'_build_{tag}', None)
        if handler:
            return handler(node, annotations, preformatted)

        if tag in self.INLINE_ANNOTATIONS:
            annotations = annotations + (self.INLINE_ANNOTATIONS[tag],)
            return self._build_children(node, annotations, preformatted)

        if tag in self.SPACED_BLOCKS or tag in self.BLOCKS:
            return [RenderNode(
                NodeKind.BLOCK,
                children=self._build_children(node, annotations, preformatted),
                spaced=tag in self.SPACED_BLOCKS,
            )]

        # Unknown or transparent element: just its content
        return self._build_children(node, annotations, preformatted)

    def _style_annotations(self, style: dict[str, str]) -> tuple[Annotation, ...]:
        """Colour annotations for an element's computed style."""
        found: list[Annotation] = []
        colour = parse_colour(style.get('color', ''))
        if colour:
            found.append(Colour(*colour))
        background = parse_colour(style.get('background-color', ''))
        if background is None:
            # Shorthand "background: #fff url(...)" - take the first colour word
            for word in style.get('background', '').split():
                background = parse_colour(word)
                if background:
                    break
        if background:
            found.append(BackgroundColour(*background))
        return tuple(found)

    # =========================================================================
    # Element Handlers
    # =========================================================================

    def _build_a(self, element: Tag, annotations, preformatted) -> list[RenderNode]:
        """Link - annotate its content with the target."""
        href = element.get('href')
        if href:
            annotations = annotations + (Link(href),)
        return self._build_children(element, annotations, preformatted)

    def _build_img(self, element: Tag, annotations, preformatted) -> list[RenderNode]:
        """Image - its alt text stands in for it."""
        alt = re.sub(r'\s+', ' ', element.get('alt') or '').strip()
        if not alt:
            return []
        src = element.get('src') or ''
        return [RenderNode(NodeKind.TEXT, text=alt, annotations=annotations + (Image(src),))]

    def _build_br(self, element: Tag, annotations, preformatted) -> list[RenderNode]:
        if preformatted:
            return [RenderNode(NodeKind.TEXT, text="\n", annotations=annotations)]
        return [RenderNode(NodeKind.LINE_BREAK)]

    def _build_hr(self, element: Tag, annotations, preformatted) -> list[RenderNode]:
        return [RenderNode(NodeKind.RULE)]

    def _build_pre(self, element: Tag, annotations, preformatted) -> list[RenderNode]:
        """Preformatted block - whitespace is kept as-is."""
        annotations = annotations + (Preformat(),)
        return [RenderNode(
            NodeKind.PREFORMAT,
            children=self._build_children(element, annotations, True),
            spaced=True,
        )]

    def _build_blockquote(self, element: Tag, annotations, preformatted) -> list[RenderNode]:
        return [RenderNode(
            NodeKind.QUOTE,
            children=self._build_children(element, annotations, preformatted),
            prefix="> ",
            spaced=True,
        )]

    # Headings
    def _heading(self, element: Tag, annotations, preformatted, level: int) -> list[RenderNode]:
        return [RenderNode(
            NodeKind.BLOCK,
            children=self._build_children(element, annotations, preformatted),
            prefix="#" * level + " ",
            spaced=True,
        )]

    def _build_h1(self, element, annotations, preformatted):
        return self._heading(element, annotations, preformatted, 1)

    def _build_h2(self, element, annotations, preformatted):
        return self._heading(element, annotations, preformatted, 2)

    def _build_h3(self, element, annotations, preformatted):
        return self._heading(element, annotations, preformatted, 3)

    def _build_h4(self, element, annotations, preformatted):
        return self._heading(element, annotations, preformatted, 4)

    def _build_h5(self, element, annotations, preformatted):
        return self._heading(element, annotations, preformatted, 5)

    def _build_h6(self, element, annotations, preformatted):
        return self._heading(element, annotations, preformatted, 6)

    # Lists
    def _build_ul(self, element: Tag, annotations, preformatted) -> list[RenderNode]:
        """Unordered list."""
        return [self._list(element, annotations, preformatted, lambda _: "* ")]

    def _build_ol(self, element: Tag, annotations, preformatted) -> list[RenderNode]:
        """Ordered list, honouring start="N"."""
        try:
            start = int(element.get('start', 1))
        except ValueError:
            start = 1
        return [self._list(element, annotations, preformatted, lambda n: f"{start + n}. ")]

    def _list(self, element: Tag, annotations, preformatted, marker) -> RenderNode:
        node = RenderNode(NodeKind.LIST, spaced=True)
        count = 0
        for child in element.children:
            if isinstance(child, Tag) and child.name.lower() == 'li':
                items = self._build(child, annotations, preformatted)
                for item in items:
                    item.prefix = marker(count)
                count += 1 if items else 0
                node.children.extend(items)
            else:
                node.children.extend(self._build(child, annotations, preformatted))
        return node

    def _build_li(self, element: Tag, annotations, preformatted) -> list[RenderNode]:
        """List item. The surrounding list replaces the default bullet."""
        return [RenderNode(
            NodeKind.LIST_ITEM,
            children=self._build_children(element, annotations, preformatted),
            prefix="* ",
        )]

    # Tables - rows are blocks, cells run inline
    def _build_td(self, element: Tag, annotations, preformatted) -> list[RenderNode]:
        nodes = self._build_children(element, annotations, preformatted)
        nodes.append(RenderNode(NodeKind.TEXT, text=" "))
        return nodes

    def _build_th(self, element: Tag, annotations, preformatted) -> list[RenderNode]:
        return self._build_td(element, annotations + (Strong(),), preformatted)


# =============================================================================
# Layout
# =============================================================================

def layout(tree: RenderNode, width: int, text_width: int | None = None) -> list[list[Fragment]]:
    """
    Break a render tree into lines of fragments.

    Args:
        tree: The render tree.
        width: Column width (used for rules).
        text_width: Maximum width for wrapped text. Defaults to width.

    Returns:
        One list of fragments per output line.

    Raises:
        ConversionError: If the width is too narrow to lay anything out.
    """
    text_width = width if text_width is None else text_width
    if width < 1 or text_width < 1:
        raise ConversionError(
            ErrorKind.RENDER, "laying out text", f"width {min(width, text_width)} is too narrow"
        )

    builder = _LineBuilder(width, text_width)
    builder.visit(tree)
    builder.flush()
    return builder.lines


class _LineBuilder:
    """Walks a render tree, collecting inline runs and emitting lines."""

    def __init__(self, width: int, text_width: int) -> None:
        self.width = width
        self.text_width = text_width
        self.lines: list[list[Fragment]] = []
        self._inline: list[Fragment] = []
        self._indents: list[str] = []
        self._marker: str | None = None
        self._gap_pending = False

    def visit(self, node: RenderNode) -> None:
        kind = node.kind

        if kind is NodeKind.TEXT:
            self._inline.append(Fragment(node.text, node.annotations))
            return
        if kind is NodeKind.LINE_BREAK:
            self.flush(force=True)
            return
        if kind is NodeKind.RULE:
            self.flush()
            self._emit([Fragment("─" * max(self.width - len(self._indent()), 1))])
            return
        if kind is NodeKind.PREFORMAT:
            self.flush()
            self._gap()
            self._emit_preformatted(node)
            self._gap()
            return

        self.flush()
        if node.spaced:
            self._gap()

        if kind is NodeKind.LIST_ITEM:
            self._marker = self._indent() + node.prefix
            self._indents.append(" " * len(node.prefix))
        elif kind is NodeKind.QUOTE:
            self._indents.append(node.prefix)
        elif node.prefix:
            self._inline.append(Fragment(node.prefix))

        for child in node.children:
            self.visit(child)
        self.flush()

        if kind in (NodeKind.LIST_ITEM, NodeKind.QUOTE):
            self._indents.pop()
        if kind is NodeKind.LIST_ITEM:
            # An empty item never emitted its bullet
            self._marker = None
        if node.spaced:
            self._gap()

    def flush(self, force: bool = False) -> None:
        """Wrap and emit the pending inline run."""
        fragments = _normalise_spaces(self._inline)
        self._inline = []
        if not fragments:
            if force:
                self._emit([])
            return
        available = max(self.text_width - len(self._indent()), 1)
        for line in wrap_fragments(fragments, available):
            self._emit(line)

    def _indent(self) -> str:
        return "".join(self._indents)

    def _gap(self) -> None:
        if self.lines:
            self._gap_pending = True

    def _emit(self, fragments: list[Fragment]) -> None:
        if self._gap_pending:
            self.lines.append([])
            self._gap_pending = False
        prefix = self._marker if self._marker is not None else self._indent()
        self._marker = None
        self.lines.append([Fragment(prefix), *fragments] if prefix else list(fragments))

    def _emit_preformatted(self, node: RenderNode) -> None:
        line: list[Fragment] = []
        for fragment in _collect_text(node):
            for index, part in enumerate(fragment.text.split("\n")):
                if index:
                    self._emit(line)
                    line = []
                if part:
                    line.append(Fragment(part, fragment.annotations))
        if line:
            self._emit(line)


def _collect_text(node: RenderNode) -> list[Fragment]:
    if node.kind is NodeKind.TEXT:
        return [Fragment(node.text, node.annotations)]
    if node.kind is NodeKind.LINE_BREAK:
        return [Fragment("\n")]
    fragments: list[Fragment] = []
    for child in node.children:
        fragments.extend(_collect_text(child))
    return fragments


def _normalise_spaces(fragments: list[Fragment]) -> list[Fragment]:
    """Collapse spaces across fragment boundaries and trim the ends."""
    result: list[Fragment] = []
    after_space = True
    for fragment in fragments:
        text = fragment.text.lstrip(" ") if after_space else fragment.text
        if not text:
            continue
        after_space = text.endswith(" ")
        result.append(Fragment(text, fragment.annotations))

    while result and result[-1].text.endswith(" "):
        last = result.pop()
        stripped = last.text.rstrip(" ")
        if stripped:
            result.append(Fragment(stripped, last.annotations))
            break
    return result


def wrap_fragments(fragments: list[Fragment], width: int) -> list[list[Fragment]]:
    """
    Wrap a run of fragments to width, keeping each piece's annotations.

    Every line textwrap produces is a substring of the joined text, so we
    find it and slice the fragments that overlap it. The text must already
    have its whitespace collapsed to plain spaces.

    Raises:
        ConversionError: If a wrapped line can't be mapped back onto the text.
    """
    text = "".join(fragment.text for fragment in fragments)
    wrapped = textwrap.wrap(text, width=width, break_on_hyphens=False)

    lines: list[list[Fragment]] = []
    cursor = 0
    for line_text in wrapped:
        start = text.find(line_text, cursor)
        if start < 0:
            raise ConversionError(
                ErrorKind.RENDER, "wrapping text", f"lost track of line {line_text!r}"
            )
        end = start + len(line_text)
        cursor = end
        lines.append(_slice(fragments, start, end))
    return lines


def _slice(fragments: list[Fragment], start: int, end: int) -> list[Fragment]:
    line: list[Fragment] = []
    offset = 0
    for fragment in fragments:
        frag_start, frag_end = offset, offset + len(fragment.text)
        offset = frag_end
        low, high = max(start, frag_start), min(end, frag_end)
        if low < high:
            line.append(Fragment(fragment.text[low - frag_start:high - frag_start], fragment.annotations))
    return line

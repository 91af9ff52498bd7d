# =============================================================================
# Rendering Engine
# =============================================================================
# Chooses which rendering to produce and drives it.
#
# Exactly one output mode runs per invocation. When several are requested
# the first match in this order wins:
#
#   1. COLOUR       terminal colours via the style mapper
#   2. CSS_DUMP     the document's parsed CSS rules
#   3. DOM_DUMP     the parsed DOM
#   4. RENDER_DUMP  the computed render tree
#   5. TEXT         plain text (or literal text with --literal)
# =============================================================================

import logging
from enum import Enum, auto

from bs4 import BeautifulSoup

from html2term.config import RenderConfig
from html2term.rendering.css import StyleSheet
from html2term.rendering.document import (
    dom_to_string,
    hide_undisplayed,
    parse_html,
    parsed_style_to_string,
)
from html2term.rendering.styles import StyleMapper
from html2term.rendering.text import TextRenderer, TextRenderOptions
from html2term.rendering.tree import RenderNode, RenderTreeBuilder, layout

logger = logging.getLogger(__name__)


class OutputMode(Enum):
    """Available output modes, in priority order."""
    COLOUR = auto()         # ANSI-styled text
    CSS_DUMP = auto()       # Parsed document CSS
    DOM_DUMP = auto()       # Parsed DOM
    RENDER_DUMP = auto()    # Render tree
    TEXT = auto()           # Plain or literal text


def select_mode(config: RenderConfig) -> OutputMode:
    """
    Pick the output mode for a configuration.

    Args:
        config: The render options.

    Returns:
        The first requested mode in priority order; TEXT if none.
    """
    if config.use_colour:
        return OutputMode.COLOUR
    if config.show_css and config.css_supported:
        return OutputMode.CSS_DUMP
    if config.show_dom:
        return OutputMode.DOM_DUMP
    if config.show_render:
        return OutputMode.RENDER_DUMP
    return OutputMode.TEXT


class RenderEngine:
    """
    Converts an HTML document according to a RenderConfig.

    Usage:
        >>> engine = RenderEngine(config)
        >>> output = engine.translate(html_bytes)

    Attributes:
        config: Render options.
        tracer: Optional logger passed on to the style mapper.
    """

    def __init__(self, config: RenderConfig, tracer: logging.Logger | None = None) -> None:
        """
        Initialize the rendering engine.

        Args:
            config: Render options.
            tracer: Receives per-fragment style traces when given.
        """
        self.config = config
        self.tracer = tracer

    @property
    def mode(self) -> OutputMode:
        return select_mode(self.config)

    def translate(self, data: bytes | str) -> str:
        """
        Render a document in the configured mode.

        Args:
            data: The HTML document.

        Returns:
            The complete output text.

        Raises:
            ConversionError: If parsing or rendering fails.
        """
        mode = self.mode
        logger.debug(f"Output mode: {mode.name}")

        soup = parse_html(data)

        if mode == OutputMode.COLOUR:
            return self._render_colour(soup)
        elif mode == OutputMode.CSS_DUMP:
            return parsed_style_to_string(StyleSheet.from_document(soup))
        elif mode == OutputMode.DOM_DUMP:
            return dom_to_string(soup)
        elif mode == OutputMode.RENDER_DUMP:
            return str(self._build_tree(soup))
        else:
            return self._render_text(soup)

    def _stylesheet(self, soup: BeautifulSoup) -> StyleSheet | None:
        """The document's CSS, or None when CSS is not in use."""
        if not self.config.use_css:
            return None
        return StyleSheet.from_document(soup)

    def _build_tree(self, soup: BeautifulSoup) -> RenderNode:
        return RenderTreeBuilder(self._stylesheet(soup)).build(soup)

    def _render_colour(self, soup: BeautifulSoup) -> str:
        """Lay out the render tree and style every fragment."""
        config = self.config
        mapper = StyleMapper(
            use_css_colours=config.use_css_colours,
            no_default_colours=config.use_only_css,
            hyperlinks=config.hyperlinks,
            tracer=self.tracer,
        )
        lines = layout(self._build_tree(soup), config.width, config.text_width)
        return "".join(
            "".join(mapper.render_fragment(fragment) for fragment in line) + "\n"
            for line in lines
        )

    def _render_text(self, soup: BeautifulSoup) -> str:
        """Plain or literal text through inscriptis."""
        stylesheet = self._stylesheet(soup)
        if stylesheet is not None:
            hide_undisplayed(soup, stylesheet)

        width = self.config.text_width
        if self.config.literal:
            options = TextRenderOptions.literal(width=width)
        else:
            options = TextRenderOptions(width=width)
        return TextRenderer(options).render(str(soup))

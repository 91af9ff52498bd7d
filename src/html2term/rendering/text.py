# =============================================================================
# Plain Text Rendering
# =============================================================================
# Converts HTML to plain text using inscriptis.
#
# inscriptis is a battle-tested HTML-to-text converter that handles:
#   - Complex table layouts
#   - Proper whitespace and line break handling
#   - Lists, headings, and other semantic elements
#
# Two flavours:
#   - plain:   links shown as [text](url), images as [alt text]
#   - literal: only the text itself, no decorations at all
# =============================================================================

import logging
import re
import textwrap
from dataclasses import dataclass

from inscriptis import get_text
from inscriptis.css_profiles import CSS_PROFILES
from inscriptis.model.config import ParserConfig

from html2term.core import ConversionError, ErrorKind

logger = logging.getLogger(__name__)


@dataclass
class TextRenderOptions:
    """
    Options for text rendering.

    Attributes:
        display_links: Show link targets after the link text.
        display_images: Show image alt text.
        width: Wrap lines longer than this (None = no wrapping).
    """
    display_links: bool = True
    display_images: bool = True
    width: int | None = None

    @classmethod
    def literal(cls, width: int | None = None) -> "TextRenderOptions":
        """Options for undecorated output."""
        return cls(display_links=False, display_images=False, width=width)


class TextRenderer:
    """
    Renders HTML to plain text using inscriptis.

    Usage:
        >>> renderer = TextRenderer(TextRenderOptions(width=80))
        >>> text = renderer.render(html_content)
    """

    def __init__(self, options: TextRenderOptions | None = None) -> None:
        """
        Initialize the text renderer.

        Args:
            options: Rendering options.
        """
        self.options = options or TextRenderOptions()

        # Configure inscriptis
        self._config = ParserConfig(
            css=CSS_PROFILES['strict'],  # Better whitespace handling
            display_links=self.options.display_links,
            display_images=self.options.display_images,
            display_anchors=False,  # Don't show anchor names
        )

    def render(self, html_content: str) -> str:
        """
        Convert HTML to plain text.

        Args:
            html_content: HTML content to render.

        Returns:
            The text, ending with a newline unless empty.

        Raises:
            ConversionError: If the width is too narrow to wrap into.
        """
        if not html_content or not html_content.strip():
            return ""

        text = get_text(html_content, self._config)
        text = self._clean_output(text)

        if self.options.width is not None:
            text = self._wrap(text, self.options.width)

        return text + "\n" if text else ""

    def _clean_output(self, text: str) -> str:
        """Clean up the rendered output."""
        # Remove zero-width characters
        text = re.sub(r'[\u200b\u200c\u200d\u2060\ufeff]+', '', text)

        # Normalize multiple blank lines to max 2
        text = re.sub(r'\n{3,}', '\n\n', text)

        # Remove trailing whitespace from lines
        lines = [line.rstrip() for line in text.split('\n')]
        text = '\n'.join(lines)

        # Remove leading/trailing blank lines
        return text.strip('\n')

    def _wrap(self, text: str, width: int) -> str:
        """Wrap long lines, keeping each line's indentation."""
        if width < 1:
            raise ConversionError(ErrorKind.RENDER, "wrapping text", f"width {width} is too narrow")

        lines = []
        for line in text.split('\n'):
            if len(line) <= width:
                lines.append(line)
                continue
            indent = line[:len(line) - len(line.lstrip())]
            lines.extend(textwrap.wrap(
                line.strip(),
                width=width,
                initial_indent=indent,
                subsequent_indent=indent,
                break_on_hyphens=False,
            ))
        return '\n'.join(lines)

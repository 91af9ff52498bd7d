# =============================================================================
# Style Mapping
# =============================================================================
# Turns a fragment of text plus its annotations into a terminal-styled
# string.
#
# The mapper folds the annotations, outermost first, into a StyleSet (bold,
# italic, underline, strike, colours, link target) and renders that set
# exactly once with Rich, so nested markup never produces nested escapes.
#
# Precedence policy: an explicit colour from the document's CSS beats the
# default colours chosen for structural markup. Once a Colour annotation has
# been seen, Strong/Strikeout/Code/Preformat and non-hyperlink Link/Image
# styling no longer apply. Emphasis always applies. The "only CSS colours"
# option starts the fold as if an explicit colour had already been seen.
#
# When two annotations both set a foreground colour, the later (inner) one
# wins because the set is rendered once. The html2text crate's colour example
# nests one escape per annotation, so there the earlier colour is what the
# terminal shows: [Code, Colour(red)] is red here and blue there.
# =============================================================================

import logging
from dataclasses import dataclass
from typing import Sequence

from rich.color import Color, ColorSystem
from rich.style import Style

from html2term.core import Annotation, Fragment

# Either a standard colour name ("blue") or an RGB triplet
ColourValue = str | tuple[int, int, int]


@dataclass
class StyleSet:
    """
    Terminal attributes accumulated for one fragment.

    Attributes:
        bold: Bold weight.
        italic: Italic.
        underline: Underlined.
        strike: Struck through.
        foreground: Foreground colour, if any.
        background: Background colour, if any.
        link: Hyperlink target, if any.
    """
    bold: bool = False
    italic: bool = False
    underline: bool = False
    strike: bool = False
    foreground: ColourValue | None = None
    background: ColourValue | None = None
    link: str | None = None

    def to_rich(self) -> Style:
        """Convert to a Rich Style."""
        return Style(
            bold=self.bold or None,
            italic=self.italic or None,
            underline=self.underline or None,
            strike=self.strike or None,
            color=_to_colour(self.foreground),
            bgcolor=_to_colour(self.background),
            link=self.link,
        )

    def render(self, text: str) -> str:
        """Render text with these attributes as ANSI/OSC 8 escapes."""
        return self.to_rich().render(text, color_system=ColorSystem.TRUECOLOR)


def _to_colour(value: ColourValue | None) -> Color | None:
    if value is None:
        return None
    if isinstance(value, tuple):
        return Color.from_rgb(*value)
    return Color.parse(value)


@dataclass
class _FoldState:
    styles: StyleSet
    have_explicit_colour: bool


class StyleMapper:
    """
    Maps (text, annotations) to a styled string.

    The mapper holds only options; every call starts from a fresh fold
    state, so results never depend on earlier calls.

    Usage:
        >>> mapper = StyleMapper(use_css_colours=True)
        >>> mapper.apply("hi", [Strong()])
        '\\x1b[1mhi\\x1b[0m'

    Attributes:
        use_css_colours: Honour Colour/BackgroundColour annotations.
        no_default_colours: Suppress the default colours from the start.
        hyperlinks: Render links and images as clickable anchors.
        tracer: Optional logger receiving debug traces.
    """

    def __init__(
        self,
        use_css_colours: bool = False,
        no_default_colours: bool = False,
        hyperlinks: bool = False,
        tracer: logging.Logger | None = None,
    ) -> None:
        self.use_css_colours = use_css_colours
        self.no_default_colours = no_default_colours
        self.hyperlinks = hyperlinks
        self.tracer = tracer

    def map(self, annotations: Sequence[Annotation]) -> StyleSet:
        """
        Fold annotations (outermost first) into a StyleSet.

        Annotation kinds without a handler are passed over unchanged.
        """
        state = _FoldState(
            styles=StyleSet(),
            have_explicit_colour=self.no_default_colours,
        )
        for annotation in annotations:
            handler = getattr(self, f"_apply_{type(annotation).__name__.lower()}", None)
            if handler:
                handler(state, annotation)
        return state.styles

    def apply(self, text: str, annotations: Sequence[Annotation]) -> str:
        """
        Style one fragment of text.

        Args:
            text: The raw text.
            annotations: Its annotations, outermost first.

        Returns:
            The styled string.
        """
        styles = self.map(annotations)
        styled = styles.render(text)
        if self.tracer:
            self.tracer.debug(f"style: text={text!r} annotations={list(annotations)!r}")
            self.tracer.debug(f"style: output={styled!r}")
        return styled

    def render_fragment(self, fragment: Fragment) -> str:
        """Style a Fragment."""
        return self.apply(fragment.text, fragment.annotations)

    __call__ = apply

    # =========================================================================
    # Annotation Handlers
    # =========================================================================

    def _apply_default(self, state: _FoldState, annotation) -> None:
        pass

    def _apply_link(self, state: _FoldState, annotation) -> None:
        styles = state.styles
        if self.hyperlinks:
            styles.link = annotation.url
            styles.foreground = "blue"
            styles.underline = True
        elif not state.have_explicit_colour:
            styles.foreground = "blue"
            styles.underline = True

    def _apply_image(self, state: _FoldState, annotation) -> None:
        styles = state.styles
        if self.hyperlinks:
            styles.underline = True
            styles.foreground = "blue"
            styles.italic = True
            styles.link = annotation.src
        elif not state.have_explicit_colour:
            styles.foreground = "yellow"
            styles.italic = True

    def _apply_emphasis(self, state: _FoldState, annotation) -> None:
        state.styles.italic = True

    def _apply_strong(self, state: _FoldState, annotation) -> None:
        if not state.have_explicit_colour:
            state.styles.bold = True

    def _apply_strikeout(self, state: _FoldState, annotation) -> None:
        if not state.have_explicit_colour:
            state.styles.strike = True

    def _apply_code(self, state: _FoldState, annotation) -> None:
        if not state.have_explicit_colour:
            state.styles.foreground = "blue"

    def _apply_preformat(self, state: _FoldState, annotation) -> None:
        if not state.have_explicit_colour:
            state.styles.foreground = "blue"

    def _apply_colour(self, state: _FoldState, annotation) -> None:
        if self.use_css_colours:
            state.have_explicit_colour = True
            state.styles.foreground = (annotation.r, annotation.g, annotation.b)

    def _apply_backgroundcolour(self, state: _FoldState, annotation) -> None:
        if self.use_css_colours:
            state.styles.background = (annotation.r, annotation.g, annotation.b)
